"""
Error taxonomy for the resource model library.

- UnsupportedAlgorithmError: unknown or unimplemented compression tag
- ValidationError: every structural problem found in a model, reported at once
- DecodeError: malformed or truncated compressed input
"""

from typing import Iterable, List, Optional


class ResourceModelError(Exception):
    """Base class for errors raised by this library."""


class UnsupportedAlgorithmError(ResourceModelError, ValueError):
    """Raised when a compression algorithm is not supported for an operation."""

    def __init__(self, algorithm, operation: str = "decompress"):
        self.algorithm = algorithm
        self.operation = operation
        super().__init__(f"Cannot {operation} with unsupported compression type: {_describe_algorithm(algorithm)}")


class ValidationError(ResourceModelError, ValueError):
    """
    Raised by validate() with the full list of problems that were found.

    Args:
        problems: One human readable message per problem
    """

    def __init__(self, problems: Iterable[str]):
        self.problems: List[str] = list(problems)
        if len(self.problems) == 1:
            message = self.problems[0]
        else:
            message = f"{len(self.problems)} problems found:\n" + "\n".join(f"  - {p}" for p in self.problems)
        super().__init__(message)


class DecodeError(ResourceModelError, ValueError):
    """Raised when compressed input cannot be decoded."""

    def __init__(self, message: str, offset: Optional[int] = None):
        self.offset = offset
        if offset is not None:
            message = f"{message} (at input offset {offset})"
        super().__init__(message)


def _describe_algorithm(algorithm) -> str:
    name = getattr(algorithm, 'name', None)
    if isinstance(algorithm, int):
        return f"0x{int(algorithm):04X} ({name})" if name else f"0x{int(algorithm):04X}"
    return repr(algorithm)
