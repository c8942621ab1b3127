"""Logger helper shared by the solver packages."""

import logging

ROOT_LOGGER_NAME = "fdm"
DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s: %(message)s"

_stream_handler = None


def get_logger(name: str) -> logging.Logger:
    """Return a logger nested under the package root logger.

    Module names such as ``la.equations`` become ``fdm.la.equations`` so a
    single ``logging.getLogger("fdm")`` controls every solver module.
    """
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def configure_logging(level=logging.INFO, fmt: str = DEFAULT_FORMAT) -> logging.Logger:
    """Send package log records to stderr at `level`.

    Repeated calls update the level and format of the same handler instead of
    adding another one.
    """
    global _stream_handler
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)
    if _stream_handler is None or _stream_handler not in root.handlers:
        _stream_handler = logging.StreamHandler()
        root.addHandler(_stream_handler)
    _stream_handler.setFormatter(logging.Formatter(fmt))
    return root
