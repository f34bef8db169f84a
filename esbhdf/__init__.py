from . import (
    canon,
    config,
    exceptions,
    types,
    utils,
    ingest,
    disambiguate,
    validate,
    transform,
    formats,
    engine,
)
from .engine import convert

__all__ = [
    "canon",
    "config",
    "exceptions",
    "types",
    "utils",
    "ingest",
    "disambiguate",
    "validate",
    "transform",
    "formats",
    "engine",
    "convert",
]
