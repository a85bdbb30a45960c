# src/circuitry_core/catalog/__init__.py
from .catalog import BUILTIN_CATALOG_PATH, ProblemCatalog, load_builtin_catalog

__all__ = [
    "BUILTIN_CATALOG_PATH",
    "ProblemCatalog",
    "load_builtin_catalog",
]
