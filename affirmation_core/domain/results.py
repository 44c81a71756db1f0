"""Tagged use-case results.

Use cases never raise for expected failures; they return ``Success`` or
``Failure`` and the caller branches on ``result.ok`` (or pattern-matches on
the class).
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from .errors import DomainError

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    """Operation completed; ``value`` carries the payload."""

    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """Operation rejected or failed; ``reason`` is the typed error."""

    reason: DomainError

    @property
    def ok(self) -> bool:
        return False

    @property
    def message(self) -> str:
        return str(self.reason)


Result = Union[Success[T], Failure]
