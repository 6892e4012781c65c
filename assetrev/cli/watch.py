import argparse, os, sys, threading, time
from watchdog.observers import Observer
from watchdog.events import FileSystemEventHandler

from assetrev.core.config import load_settings
from assetrev.core.logging import get_logger
from assetrev.versioner import VersionTask

log = get_logger(__name__)

class Debounce:
    """Ejecuta `fn` cuando pasan `secs` sin eventos nuevos (el último evento siempre se procesa)."""
    def __init__(self, secs=2.0, timer=threading.Timer):
        self.secs=secs; self.timer=timer; self.pending=None; self.lock=threading.Lock()
    def call(self, fn):
        with self.lock:
            if self.pending is not None:
                self.pending.cancel()
            self.pending = self.timer(self.secs, fn)
            self.pending.daemon = True
            self.pending.start()
    def cancel(self):
        with self.lock:
            if self.pending is not None:
                self.pending.cancel()
                self.pending = None

class Handler(FileSystemEventHandler):
    def __init__(self, task:VersionTask, debounce:float=2.0):
        self.task = task
        self.deb = Debounce(debounce)
        self.run_lock = threading.Lock()
        self.build_dir = os.path.abspath(task.settings.resolve_build_dir(task.build_dir))

    def _relevant(self, event)->str:
        if event.is_directory: return ""
        if event.event_type not in ("created", "modified", "moved"): return ""
        path = getattr(event, "dest_path", "") if event.event_type == "moved" else event.src_path
        if not path: return ""
        # Lo que escribimos nosotros en build_dir no dispara nada
        if os.path.abspath(path).startswith(self.build_dir + os.sep): return ""
        return path if self.task.matches(path) else ""

    def on_any_event(self, event):
        path = self._relevant(event)
        if not path: return
        log.debug({"event":"watch_event","path":path,"type":event.event_type})
        self.deb.call(self.trigger)

    def trigger(self):
        with self.run_lock:
            log.info({"event":"watch_trigger","task":self.task.name})
            try:
                self.task.run()
            except Exception:
                log.exception("watch_version_failed")

def main(argv=None):
    ap = argparse.ArgumentParser(prog="assetrev watch", description="Re-versiona al cambiar los fuentes")
    ap.add_argument("sources", nargs="+")
    ap.add_argument("--build-dir", default=None)
    ap.add_argument("--public-root", default=None)
    args = ap.parse_args(argv)

    settings = load_settings(public_root=args.public_root)
    task = VersionTask(sources=args.sources, build_dir=args.build_dir, settings=settings)
    paths = task.watch_paths()
    obs = Observer()
    h = Handler(task, settings.watch_debounce)
    for p in paths:
        if os.path.isdir(p):
            obs.schedule(h, p, recursive=True)
    log.info({"event":"watch_start","paths":paths})
    obs.start()
    try:
        while True:
            time.sleep(1.0)
    except KeyboardInterrupt:
        pass
    finally:
        h.deb.cancel()
        obs.stop(); obs.join()
    return 0

if __name__ == "__main__":
    sys.exit(main())
