"""Conversion of service exceptions into tagged outcomes."""

import logging
from collections.abc import Callable
from typing import TypeVar

from or_mastery.domain.errors import (
    AuthError,
    NotFoundError,
    RemoteError,
    ValidationError,
)
from or_mastery.domain.outcomes import (
    Failed,
    Invalid,
    NotFound,
    Ok,
    Outcome,
    RequiresAuth,
)

T = TypeVar("T")

logger = logging.getLogger(__name__)


def attempt(operation: str, action: Callable[[], T]) -> Outcome[T]:
    """Run an action and map the error taxonomy onto outcomes."""
    try:
        return Ok(action())
    except AuthError:
        return RequiresAuth()
    except NotFoundError:
        return NotFound()
    except ValidationError as exc:
        return Invalid(exc.message)
    except RemoteError as exc:
        logger.exception("Remote call failed", extra={"operation": operation})
        return Failed(exc.message)
