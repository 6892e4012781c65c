import logging, json, os, sys
from logging.handlers import RotatingFileHandler
from datetime import datetime, timezone
from typing import Sequence

LEVEL = os.getenv("LOG_LEVEL","INFO").upper()
LOG_DIR = os.getenv("LOG_DIR","")

class JsonFormatter(logging.Formatter):
    def format(self, record):
        msg = record.msg if isinstance(record.msg, dict) else record.getMessage()
        base = {
            "ts": datetime.now(timezone.utc).isoformat().replace("+00:00","Z"),
            "lvl": record.levelname,
            "logger": record.name,
            "msg": msg,
        }
        if record.exc_info:
            base["exc"] = self.formatException(record.exc_info)
        return json.dumps(base, ensure_ascii=False, default=str)

def get_logger(name:str)->logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(LEVEL)

    # Archivo JSON (solo si hay LOG_DIR)
    if LOG_DIR:
        os.makedirs(LOG_DIR, exist_ok=True)
        fh = RotatingFileHandler(os.path.join(LOG_DIR, "assetrev.log"), maxBytes=10_000_000, backupCount=5)
        fh.setLevel(LEVEL)
        fh.setFormatter(JsonFormatter())
        logger.addHandler(fh)

    # Consola humana
    ch = logging.StreamHandler(sys.stdout)
    ch.setLevel(LEVEL)
    ch.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(ch)
    logger.propagate = False
    return logger

def log_task(label:str, sources:Sequence[str], logger:logging.Logger=None)->None:
    """Anuncia una tarea y los ficheros que va a procesar."""
    logger = logger or get_logger("assetrev.task")
    logger.info({"event":"task_start","task":label,"files":len(sources)})
    for src in sources:
        logger.info(f"   - {src}")
