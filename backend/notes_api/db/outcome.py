from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

import httpx
from postgrest.exceptions import APIError

from notes_api.core.exceptions import CLIENT_SQLSTATE_CLASSES, UpstreamError

if TYPE_CHECKING:
    from collections.abc import Callable

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class RemoteError:
    """Failure reported by PostgREST or by the transport underneath it."""

    message: str
    code: str | None = None
    details: str | None = None

    @property
    def is_client_error(self) -> bool:
        if not self.code:
            return False
        return self.code.startswith(CLIENT_SQLSTATE_CLASSES) or self.code.startswith("PGRST1")

    @classmethod
    def from_exception(cls, err: Exception) -> RemoteError:
        if isinstance(err, APIError):
            return cls(
                message=err.message or "Unknown database error",
                code=err.code,
                details=err.details,
            )
        return cls(message=str(err) or type(err).__name__)


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Tagged result of a single remote call: either a typed value or an error."""

    value: T | None = None
    error: RemoteError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> Outcome[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: RemoteError) -> Outcome[T]:
        return cls(error=error)

    def map(self, func: Callable[[T], U]) -> Outcome[U]:
        if self.error is not None:
            return Outcome(error=self.error)
        return Outcome(value=func(self.value))  # type: ignore[arg-type]

    def unwrap(self, step: str) -> T:
        """Return the value or raise ``UpstreamError`` naming ``step``."""
        if self.error is not None:
            raise UpstreamError.from_remote(step, self.error)
        return self.value  # type: ignore[return-value]


async def run_remote(func: Callable[[], Any]) -> Outcome[Any]:
    """Run a blocking PostgREST call in a worker thread and capture its failure."""
    try:
        resp = await asyncio.to_thread(func)
    except (APIError, httpx.HTTPError) as err:
        return Outcome.failure(RemoteError.from_exception(err))
    return Outcome.success(resp)
