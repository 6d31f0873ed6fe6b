# logger.py
import logging
import os
import sys

LOG_FILE = os.environ.get("PROVISION_WIZARD_LOG", "/var/log/provision_wizard.log")
FALLBACK_LOG_FILE = "/tmp/provision_wizard.log"


def setup_logger(log_file: str = LOG_FILE) -> logging.Logger:
    logger = logging.getLogger("provision_wizard")
    logger.setLevel(logging.DEBUG)

    fmt = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )

    # Try to write to log file; fall back to /tmp if the directory is not writable
    try:
        fh = logging.FileHandler(log_file)
    except OSError:
        fh = logging.FileHandler(FALLBACK_LOG_FILE)
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(fmt)

    sh = logging.StreamHandler(sys.stderr)
    sh.setLevel(logging.WARNING)
    sh.setFormatter(fmt)

    if not logger.handlers:
        logger.addHandler(fh)
        logger.addHandler(sh)
    return logger


def redirect_log_file(log_file: str) -> None:
    """Point the file handler at a new path (used once the config is loaded)."""
    for handler in list(log.handlers):
        if isinstance(handler, logging.FileHandler):
            if handler.baseFilename == os.path.abspath(log_file):
                return
            log.removeHandler(handler)
            handler.close()
            try:
                fh = logging.FileHandler(log_file)
            except OSError:
                fh = logging.FileHandler(FALLBACK_LOG_FILE)
            fh.setLevel(logging.DEBUG)
            fh.setFormatter(handler.formatter)
            log.addHandler(fh)
            return


log = setup_logger()
