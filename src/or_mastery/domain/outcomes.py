"""Tagged results returned by the data-access layer.

Callers branch on the variant and decide navigation themselves; nothing
below the web layer redirects.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class RequiresAuth:
    pass


@dataclass(frozen=True)
class NotFound:
    pass


@dataclass(frozen=True)
class Invalid:
    message: str


@dataclass(frozen=True)
class Failed:
    message: str


Outcome = Ok[T] | RequiresAuth | NotFound | Invalid | Failed
