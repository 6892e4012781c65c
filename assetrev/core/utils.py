import os, glob, hashlib, shutil
from typing import Iterable, List

def content_hash(path:str, length:int=10)->str:
    """Hash corto (md5 hex truncado) que solo depende del contenido."""
    h = hashlib.md5()
    with open(path,'rb') as f:
        for chunk in iter(lambda: f.read(1024*1024), b''):
            h.update(chunk)
    return h.hexdigest()[:length]

def hashed_name(path:str, digest:str)->str:
    # app.js -> app-<hash>.js ; app.min.js -> app.min-<hash>.js
    stem, ext = os.path.splitext(path)
    return f"{stem}-{digest}{ext}"

def force_delete(path:str)->bool:
    """Borra un fichero o directorio. Si no existe no es error."""
    try:
        if os.path.isdir(path) and not os.path.islink(path):
            shutil.rmtree(path)
        else:
            os.remove(path)
        return True
    except FileNotFoundError:
        return False

def copy_file(src:str, dst:str)->str:
    os.makedirs(os.path.dirname(dst) or ".", exist_ok=True)
    shutil.copy2(src, dst)
    return dst

def prefix_dir_to_files(prefix:str, files:Iterable[str])->List[str]:
    """Antepone `prefix` a cada fichero salvo que ya cuelgue de él."""
    out=[]
    root = os.path.normpath(prefix)
    for f in files:
        norm = os.path.normpath(f)
        if os.path.isabs(norm) or norm == root or norm.startswith(root + os.sep):
            out.append(f)
        else:
            out.append(os.path.join(prefix, f))
    return out

def expand_globs(patterns:Iterable[str])->List[str]:
    """Expande patrones glob (con **) a ficheros existentes, ordenados y sin duplicados."""
    seen=set(); out=[]
    for pat in patterns:
        matches = glob.glob(pat, recursive=True) if glob.has_magic(pat) else [pat]
        for m in sorted(matches):
            if not os.path.isfile(m) or m in seen:
                continue
            seen.add(m); out.append(m)
    return out
