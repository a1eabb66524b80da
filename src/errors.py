"""Domain errors and the result type returned by every service operation."""
import functools
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar, Union

T = TypeVar("T")

logger = logging.getLogger(__name__)


class DomainError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthorizationError(DomainError):
    status_code = 403


class NotFoundError(DomainError):
    status_code = 404


class ValidationError(DomainError):
    status_code = 400


class UpstreamError(DomainError):
    status_code = 502


class ProtectedResourceError(DomainError):
    status_code = 409


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    error: DomainError

    @property
    def ok(self) -> bool:
        return False

    @property
    def message(self) -> str:
        return self.error.message


Result = Union[Ok[Any], Err]


def as_result(func: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[Result]]:
    """Turn domain errors raised by ``func`` into ``Err`` values.

    Plain return values are wrapped in ``Ok``; anything that is not a
    ``DomainError`` propagates unchanged.
    """

    @functools.wraps(func)
    async def wrapper(*args, **kwargs) -> Result:
        try:
            value = await func(*args, **kwargs)
        except DomainError as e:
            logger.warning("%s failed: %s: %s", func.__name__, type(e).__name__, e.message)
            return Err(e)
        if isinstance(value, (Ok, Err)):
            return value
        return Ok(value)

    return wrapper
