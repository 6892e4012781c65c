import os
from assetrev.core.errors import PathMappingError

def relative_to(path:str, root:str)->str:
    """Ruta de `path` relativa a `root`; error si no cuelga de él."""
    rel = os.path.relpath(os.path.abspath(path), os.path.abspath(root))
    if rel == os.curdir or rel == os.pardir or rel.startswith(os.pardir + os.sep) or os.path.isabs(rel):
        raise PathMappingError(f"{path} no está dentro de {root}")
    return rel

def remap(path:str, src_root:str, dst_root:str)->str:
    """Traslada `path` de `src_root` a `dst_root` conservando la estructura relativa."""
    return os.path.join(dst_root, relative_to(path, src_root))

def to_posix(rel:str)->str:
    return rel.replace(os.sep, "/")

def same_path(a:str, b:str)->bool:
    return os.path.normcase(os.path.abspath(a)) == os.path.normcase(os.path.abspath(b))
