import argparse, os, sys

from assetrev.core.config import load_settings
from assetrev.core.errors import AssetRevError, EmptySourcesError
from assetrev.core.logging import get_logger
from assetrev.manifest import manifest_path, load_manifest
from assetrev.versioner import VersionTask

log = get_logger(__name__)

def run_main(argv=None):
    ap = argparse.ArgumentParser(prog="assetrev run", description="Versiona assets con hash de contenido")
    ap.add_argument("sources", nargs="+", help="Ficheros o patrones glob, relativos a PUBLIC_ROOT")
    ap.add_argument("--build-dir", default=None)
    ap.add_argument("--public-root", default=None)
    args = ap.parse_args(argv)

    settings = load_settings(public_root=args.public_root)
    task = VersionTask(sources=args.sources, build_dir=args.build_dir, settings=settings)
    try:
        result = task.run()
    except EmptySourcesError as e:
        print(f"ERR {e}", file=sys.stderr)
        return 2
    except AssetRevError as e:
        log.error({"event":"version_failed","error":str(e)})
        print(f"ERR {e}", file=sys.stderr)
        return 1
    print(f"OK version files={len(result.manifest)} build={result.build_dir}")
    return 0

def manifest_main(argv=None):
    ap = argparse.ArgumentParser(prog="assetrev manifest")
    ap.add_argument("--build-dir", default=None)
    ap.add_argument("--public-root", default=None)
    args = ap.parse_args(argv)

    settings = load_settings(public_root=args.public_root)
    build_dir = settings.resolve_build_dir(args.build_dir)
    path = manifest_path(build_dir, settings.manifest_name)
    if not os.path.exists(path):
        print(f"ERR no hay manifest en {path}", file=sys.stderr)
        return 1
    try:
        data = load_manifest(path, on_corrupt="fail")
    except AssetRevError as e:
        print(f"ERR {e}", file=sys.stderr)
        return 1
    for original, hashed in sorted(data.items()):
        print(original, "→", hashed)
    return 0

def main(argv=None):
    argv = list(sys.argv[1:] if argv is None else argv)
    cmd = (argv[0] if argv else "")
    rest = argv[1:]
    if cmd=="run":      return run_main(rest)
    if cmd=="manifest": return manifest_main(rest)
    print("Uso: python -m assetrev.cli.version [run|manifest] ...", file=sys.stderr)
    return 2

if __name__ == "__main__":
    sys.exit(main())
