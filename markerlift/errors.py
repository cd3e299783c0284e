"""Error types raised while loading inputs and joining lift results."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class MarkerLiftError(Exception):
    """Base class for all markerlift failures."""


class _LocatedError(MarkerLiftError):
    """Error pointing at a line of an input file."""

    def __init__(self, path: Union[str, Path, None], line: Optional[int], reason: str) -> None:
        self.path = str(path) if path is not None else "<stream>"
        self.line = line
        self.reason = reason
        super().__init__(self._render())

    def _render(self) -> str:
        if self.line is None:
            return f"{self.path}: {self.reason}"
        return f"{self.path}:{self.line}: {self.reason}"


class FormatError(_LocatedError):
    """Malformed marker annotation table (row shape, non-numeric fields, duplicates)."""


class ChainFormatError(_LocatedError):
    """Malformed or inconsistent chain file."""


class JoinError(MarkerLiftError):
    """Mapped stream disagrees with the dataset it is joined against."""

    def __init__(self, identifier: str, reason: str = "identifier not present in dataset") -> None:
        self.identifier = identifier
        self.reason = reason
        super().__init__(f"{identifier}: {reason}")


__all__ = ["MarkerLiftError", "FormatError", "ChainFormatError", "JoinError"]
