import os, json

from assetrev.core.config import load_settings
from assetrev.core.errors import AssetRevError
from assetrev.manifest import manifest_path, load_manifest

def build_status(settings=None)->dict:
    settings = settings or load_settings()
    build_dir = settings.resolve_build_dir()
    path = manifest_path(build_dir, settings.manifest_name)
    out = {"public_root": settings.public_root, "build_dir": build_dir,
           "manifest": os.path.exists(path), "entries": 0, "missing": []}
    if not out["manifest"]:
        return out
    try:
        data = load_manifest(path, on_corrupt="fail")
    except AssetRevError as e:
        out["error"] = str(e)
        return out
    out["entries"] = len(data)
    out["missing"] = sorted(v for v in data.values() if not os.path.exists(os.path.join(build_dir, v)))
    return out

def main():
    print(json.dumps(build_status(), ensure_ascii=False))
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
