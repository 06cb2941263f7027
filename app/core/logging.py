"""
Configuración de logging para la aplicación e integración con Uvicorn.
"""
import logging

# Loggers de terceros demasiado verbosos en DEBUG
_QUIET = ("pymongo", "pymongo.serverSelection", "pymongo.connection", "pymongo.command")


def setup_logging(level: str = "INFO") -> None:
    lvl = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=lvl,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).setLevel(lvl)
    for name in _QUIET:
        logging.getLogger(name).setLevel(max(lvl, logging.INFO))
