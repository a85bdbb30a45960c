# src/circuitry_core/parser/__init__.py
from .parser import ProblemParser
from .exceptions import ParsingError, SchemaValidationError

__all__ = [
    "ProblemParser",
    "ParsingError",
    "SchemaValidationError",
]
