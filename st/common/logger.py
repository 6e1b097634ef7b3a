import logging
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from st.common.setup import PATHS

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s:%(filename)s:%(lineno)d] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


# Adds the handler built by `factory` unless one with the same name is already attached. Calling get_logger twice
# (tests, re-imports) must never double up output.
def _attach(logger, handler_name, factory, level, fmt):
    if any(h.get_name() == handler_name for h in logger.handlers):
        return None
    handler = factory()
    handler.setLevel(level)
    handler.setFormatter(fmt)
    handler.set_name(handler_name)
    logger.addHandler(handler)
    return handler


# Keeps only the newest `keep` per-run debug logs in `folder`.
def _prune_debug_runs(folder: Path, name, keep):
    runs = sorted(folder.glob(f"{name}_*.log"), key=lambda p: p.stat().st_mtime, reverse=True)
    for old in runs[keep:]:
        try:
            old.unlink()
        except OSError:
            # Still open by another running copy, next start gets it
            continue


def get_logger(
        name = "studytimer",
        level = logging.INFO,
        log_dir: Path | None = None,
        max_bytes = 2 * 1024 * 1024,
        backup_count = 3,
        persistent = True,
        console = False,
        historical_debugs: int = 10
) -> logging.Logger:
    """Named logger writing to:

    - ``<name>.log``, rotated at ``max_bytes`` and kept across runs (``persistent``)
    - ``latest.log``, truncated on every start
    - ``debug/<name>_<timestamp>.log``, one DEBUG-level file per run, newest ``historical_debugs`` kept
    - stderr when ``console`` is set
    """
    logger = logging.getLogger(name)
    logger.propagate = False
    logger.setLevel(level)

    log_dir = log_dir or PATHS.logs
    log_dir.mkdir(parents=True, exist_ok=True)
    fmt = logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT)

    if persistent:
        _attach(logger, f"{name}:persistent", lambda: RotatingFileHandler(
            log_dir / f"{name}.log", maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8",
        ), level, fmt)

    _attach(logger, f"{name}:latest",
            lambda: logging.FileHandler(log_dir / "latest.log", mode="w", encoding="utf-8"), level, fmt)

    if historical_debugs > 0:
        debug_dir = log_dir / "debug"
        debug_dir.mkdir(parents=True, exist_ok=True)
        run_file = debug_dir / f"{name}_{datetime.now():%Y-%m-%d_%H-%M-%S_%f}.log"
        added = _attach(logger, f"{name}:historical_debug",
                        lambda: logging.FileHandler(run_file, encoding="utf-8"), logging.DEBUG, fmt)
        if added is not None:
            _prune_debug_runs(debug_dir, name, historical_debugs)

    if console:
        _attach(logger, f"{name}:console", logging.StreamHandler, level, fmt)

    return logger

log = get_logger(level=logging.DEBUG)
log.info("=== study timer starting ===")
