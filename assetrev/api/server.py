import os
from typing import List, Optional

from fastapi import FastAPI, Header, HTTPException, Depends
from pydantic import BaseModel, Field

from assetrev.cli.status import build_status
from assetrev.core.config import load_settings
from assetrev.core.errors import AssetRevError
from assetrev.core.logging import get_logger
from assetrev.manifest import manifest_path, load_manifest
from assetrev.paths import relative_to
from assetrev.versioner import VersionTask

log = get_logger(__name__)
app = FastAPI(title="assetrev", version="1.0")

# ---------- Auth por cabecera X-API-Key (si no se define API_KEY, queda desactivada) ----------
def require_key(x_api_key: Optional[str] = Header(None)):
    api_key = os.getenv("API_KEY")
    if not api_key:
        return True
    if x_api_key != api_key:
        raise HTTPException(status_code=401, detail="invalid api key")
    return True

# ---------- Modelos ----------
class VersionPayload(BaseModel):
    sources: List[str] = Field(..., min_length=1, description="Ficheros o globs relativos a PUBLIC_ROOT")
    build_dir: Optional[str] = Field(default=None, description="Directorio de build (por defecto PUBLIC_ROOT/build)")

# ---------- Endpoints ----------
@app.get("/status")
def status():
    out = build_status()
    out["ok"] = "error" not in out
    out["auth"] = ("on" if os.getenv("API_KEY") else "off")
    return out

@app.get("/manifest")
def manifest():
    settings = load_settings()
    path = manifest_path(settings.resolve_build_dir(), settings.manifest_name)
    if not os.path.exists(path):
        raise HTTPException(status_code=404, detail="no hay manifest")
    try:
        data = load_manifest(path, on_corrupt="fail")
    except AssetRevError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return {"ok": True, "manifest": data}

@app.post("/version", dependencies=[Depends(require_key)])
def version(payload: VersionPayload):
    settings = load_settings()
    try:
        if payload.build_dir:
            # El build_dir del cliente tiene que colgar de public_root
            relative_to(payload.build_dir, settings.public_root)
        task = VersionTask(sources=payload.sources, build_dir=payload.build_dir, settings=settings)
        result = task.run()
    except AssetRevError as e:
        log.warning({"event":"api_version_failed","error":str(e)})
        raise HTTPException(status_code=400, detail=str(e))
    return {"ok": True, "build_dir": result.build_dir, "files": len(result.manifest), "manifest": result.manifest}
