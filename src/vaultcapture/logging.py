# src/vaultcapture/logging.py
import logging
import sys

ROOT_LOGGER = "vaultcapture"


def get_logger(name: str = ROOT_LOGGER, verbose: bool | None = None) -> logging.Logger:
    """Return a package logger; the stderr handler lives on the package root.

    `verbose=None` leaves the current level alone so library modules can fetch
    a logger without undoing the level chosen by the CLI or the server.
    """
    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        fmt = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
        handler.setFormatter(logging.Formatter(fmt))
        root.addHandler(handler)
        root.setLevel(logging.INFO)
    if verbose is not None:
        root.setLevel(logging.DEBUG if verbose else logging.INFO)
    return logging.getLogger(name)
