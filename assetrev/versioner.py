"""
Versionado / cache busting de assets.

Añade un hash corto al nombre de cada fichero y genera rev-manifest.json
con la "versión" vigente de cada nombre para que la aplicación la use.

Orden del pipeline (cada etapa recibe la salida de la anterior):
  1. resolver build_dir
  2. borrar la generación anterior (valores del manifest previo)
  3. copiar los fuentes a build_dir
  4. hash + copia con nombre versionado
  5. escribir el manifest
  6. mover los .map asociados
  7. borrar originales y duplicados sin hash
"""
import os, fnmatch, glob
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from assetrev.core.config import Settings, load_settings
from assetrev.core.errors import EmptySourcesError, PathMappingError, SourceMissingError
from assetrev.core.logging import get_logger, log_task
from assetrev.core.utils import content_hash, hashed_name, force_delete, copy_file, prefix_dir_to_files, expand_globs
from assetrev.manifest import manifest_path, load_manifest, save_manifest
from assetrev.paths import relative_to, remap, to_posix, same_path

log = get_logger(__name__)

@dataclass
class VersionResult:
    build_dir: str
    manifest: Dict[str,str]
    hashed: List[str] = field(default_factory=list)
    pruned: List[str] = field(default_factory=list)
    maps: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)

class Versioner:
    def __init__(self, settings:Optional[Settings]=None):
        self.settings = settings or load_settings()

    def run(self, sources:Sequence[str], build_dir:Optional[str]=None)->VersionResult:
        root = self.settings.public_root
        build_dir = self.settings.resolve_build_dir(build_dir)
        entries = self._check_sources(sources, root)

        pruned = self._prune_previous(build_dir)
        copies = self._materialize(entries, build_dir)
        manifest, hashed = self._hash_copies(copies, build_dir)
        save_manifest(manifest_path(build_dir, self.settings.manifest_name), manifest)

        # Solo cuando el manifest ya está escrito
        srcs = [src for src, _ in entries]
        maps = self._copy_maps(srcs, root, build_dir)
        removed = self._delete_originals(srcs, root, build_dir)

        log.info({"event":"version_done","build_dir":build_dir,"files":len(manifest),
                  "pruned":len(pruned),"maps":len(maps),"removed":len(removed)})
        return VersionResult(build_dir=build_dir, manifest=manifest, hashed=hashed,
                             pruned=pruned, maps=maps, removed=removed)

    def _check_sources(self, sources:Sequence[str], root:str)->List[Tuple[str,str]]:
        if not sources:
            raise EmptySourcesError("no hay ficheros que versionar")
        out=[]; seen=set()
        for src in sources:
            if not os.path.isfile(src):
                raise SourceMissingError(f"no existe el fichero fuente: {src}")
            rel = relative_to(src, root)
            if rel in seen:
                continue
            seen.add(rel)
            out.append((src, rel))
        return out

    def _prune_previous(self, build_dir:str)->List[str]:
        path = manifest_path(build_dir, self.settings.manifest_name)
        previous = load_manifest(path, on_corrupt=self.settings.on_corrupt_manifest)
        pruned=[]
        for value in previous.values():
            target = os.path.join(build_dir, value)
            try:
                relative_to(target, build_dir)
            except PathMappingError:
                log.warning({"event":"prune_outside_build_dir","value":value})
                continue
            if force_delete(target):
                pruned.append(target)
        if previous:
            log.info({"event":"pruned_previous","manifest":path,"deleted":len(pruned)})
        return pruned

    def _materialize(self, entries:List[Tuple[str,str]], build_dir:str)->List[Tuple[str,str]]:
        copies=[]
        for src, rel in entries:
            dst = os.path.join(build_dir, rel)
            if not same_path(src, dst):
                copy_file(src, dst)
            copies.append((rel, dst))
        return copies

    def _hash_copies(self, copies:List[Tuple[str,str]], build_dir:str)->Tuple[Dict[str,str],List[str]]:
        manifest={}; hashed=[]
        for rel, copy in copies:
            digest = content_hash(copy, self.settings.hash_length)
            target = hashed_name(copy, digest)
            copy_file(copy, target)
            manifest[to_posix(rel)] = to_posix(relative_to(target, build_dir))
            hashed.append(target)
            log.debug({"event":"hashed","file":rel,"hash":digest})
        return manifest, hashed

    def _copy_maps(self, sources:List[str], root:str, build_dir:str)->List[str]:
        moved=[]
        for src in sources:
            mapping = src + ".map"
            if not os.path.exists(mapping):
                continue
            dst = remap(mapping, root, build_dir)
            if same_path(dst, mapping):
                continue
            copy_file(mapping, dst)
            force_delete(mapping)
            moved.append(dst)
        return moved

    def _delete_originals(self, sources:List[str], root:str, build_dir:str)->List[str]:
        removed=[]
        for src in sources:
            duplicate = remap(src, root, build_dir)
            if force_delete(src):
                removed.append(src)
            if os.path.exists(duplicate) and force_delete(duplicate):
                removed.append(duplicate)
        return removed

def _static_dir(pattern:str)->str:
    # Parte fija (sin comodines) de un patrón glob
    parts = os.path.normpath(pattern).split(os.sep)
    fixed=[]
    for p in parts:
        if glob.has_magic(p):
            break
        fixed.append(p)
    if len(fixed) == len(parts):
        fixed = fixed[:-1]
    return os.sep.join(fixed) or os.curdir

@dataclass
class VersionTask:
    """Unidad de trabajo 'version': fuentes (relativas a public_root) + build_dir."""
    sources: List[str]
    build_dir: Optional[str] = None
    settings: Settings = field(default_factory=load_settings)
    name: str = "version"

    def patterns(self)->List[str]:
        return prefix_dir_to_files(self.settings.public_root, self.sources)

    def resolved_sources(self)->List[str]:
        srcs = expand_globs(self.patterns())
        build_dir = os.path.abspath(self.settings.resolve_build_dir(self.build_dir))
        if same_path(build_dir, self.settings.public_root):
            return srcs
        # La salida de runs anteriores no es un fuente
        return [s for s in srcs if not os.path.abspath(s).startswith(build_dir + os.sep)]

    def watch_paths(self)->List[str]:
        dirs=[]
        for pat in self.patterns():
            d = os.path.abspath(_static_dir(pat))
            if d not in dirs:
                dirs.append(d)
        return dirs

    def matches(self, path:str)->bool:
        p = os.path.abspath(path)
        return any(fnmatch.fnmatch(p, os.path.abspath(pat)) for pat in self.patterns())

    def run(self)->VersionResult:
        srcs = self.resolved_sources()
        log_task("Versioning", srcs)
        if not srcs:
            raise EmptySourcesError(f"ningún fichero coincide con {self.sources}")
        return Versioner(self.settings).run(srcs, self.build_dir)
