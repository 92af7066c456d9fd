"""Instance and solution file parsing."""

from .errors import (
    MalformedSectionError,
    MissingEdgeError,
    MissingInstanceError,
    NoRoutesError,
    ParseError,
    UnknownTokenError,
)
from .instance_parser import parse_instance
from .solution_parser import parse_solution
from .writer import serialize_instance

__all__ = [
    "MalformedSectionError",
    "MissingEdgeError",
    "MissingInstanceError",
    "NoRoutesError",
    "ParseError",
    "UnknownTokenError",
    "parse_instance",
    "parse_solution",
    "serialize_instance",
]
