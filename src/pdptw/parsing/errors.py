"""Typed failures raised while reading instance and solution files."""

from __future__ import annotations

from typing import Optional


class ParseError(ValueError):
    """Base class for fatal parse failures, carrying the offending token and line."""

    def __init__(self, message: str, *, token: Optional[str] = None, line_number: Optional[int] = None) -> None:
        self.token = token
        self.line_number = line_number
        if line_number is not None:
            message = f"Line {line_number}: {message}"
        super().__init__(message)


class UnknownTokenError(ParseError):
    def __init__(self, token: str, *, line_number: Optional[int] = None, source: str = "instance") -> None:
        super().__init__(
            f"Unknown keyword '{token}' in {source} file.",
            token=token,
            line_number=line_number,
        )


class MalformedSectionError(ParseError):
    """A NODES/EDGES block or a header value could not be read."""


class MissingInstanceError(ParseError):
    def __init__(self) -> None:
        super().__init__("A parsed instance is required before reading a solution.")


class NoRoutesError(ParseError):
    def __init__(self) -> None:
        super().__init__("No routes were parsed from solution file.", token="Solution")


class MissingEdgeError(ParseError):
    """Raised in strict cost mode when the travel-time matrix lacks an edge."""

    def __init__(self, from_id: int, to_id: int, *, line_number: Optional[int] = None) -> None:
        self.from_id = from_id
        self.to_id = to_id
        super().__init__(
            f"Travel time from node {from_id} to node {to_id} is missing.",
            line_number=line_number,
        )
