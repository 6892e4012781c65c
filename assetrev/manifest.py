import os, json
from typing import Dict

from assetrev.core.errors import ManifestParseError
from assetrev.core.logging import get_logger

log = get_logger(__name__)

def manifest_path(build_dir:str, name:str="rev-manifest.json")->str:
    return os.path.join(build_dir, name)

def load_manifest(path:str, on_corrupt:str="fail")->Dict[str,str]:
    """
    Lee un rev-manifest plano {original: versionado}.

    - Si no existe devuelve {}.
    - Si está corrupto (JSON inválido o no es un mapa de strings):
      on_corrupt='fail' lanza ManifestParseError, 'ignore' lo trata como vacío.
    """
    if not os.path.exists(path):
        return {}
    with open(path,"rb") as f:
        raw = f.read()
    try:
        data = json.loads(raw.decode("utf-8"))
        if not isinstance(data, dict):
            raise ManifestParseError(path, "no es un objeto JSON")
        for k, v in data.items():
            if not isinstance(v, str):
                raise ManifestParseError(path, f"valor no textual para {k!r}")
    except (UnicodeDecodeError, json.JSONDecodeError, ManifestParseError) as e:
        if on_corrupt == "ignore":
            log.warning({"event":"manifest_corrupt_ignored","path":path,"error":str(e)})
            return {}
        if isinstance(e, ManifestParseError):
            raise
        raise ManifestParseError(path, str(e)) from e
    return data

def save_manifest(path:str, data:Dict[str,str])->None:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path,"w",encoding="utf-8",newline="\n") as f:
        json.dump(data, f, ensure_ascii=False, indent=2, sort_keys=True)
        f.write("\n")
