"""
Handler boundary. Turns a handler's result or failure into exactly one
response.

``run_handler`` runs a handler coroutine as a task and races it against an
optional deadline.  Whichever finishes first resolves the request's
``ResponseGuard``; the loser is dropped, so a store that answers after the
deadline fired can never produce a second response.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

from auth.errors import AuthServiceError, ServerError, ServiceUnavailable

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome:
    """A single structured response: status plus JSON body."""

    status_code: int
    body: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_error(cls, error: AuthServiceError) -> "Outcome":
        return cls(status_code=error.status_code, body={"error": error.message})


def outcome_for_exception(exc: BaseException, server_error_message: str) -> Outcome:
    """Map any handler exception onto the public error taxonomy."""
    if isinstance(exc, ServerError):
        logger.error("Server error: %s", exc.__cause__ or exc, exc_info=exc)
        return Outcome.from_error(ServerError(server_error_message))
    if isinstance(exc, AuthServiceError):
        return Outcome.from_error(exc)
    logger.error("Unhandled handler failure: %s", exc, exc_info=exc)
    return Outcome.from_error(ServerError(server_error_message))


class ResponseGuard:
    """Single-assignment slot for a request's outcome."""

    def __init__(self) -> None:
        self._future: asyncio.Future = asyncio.get_running_loop().create_future()

    @property
    def responded(self) -> bool:
        return self._future.done()

    def resolve(self, outcome: Outcome) -> bool:
        """Set the outcome if none is set yet.  Returns False if ignored."""
        if self._future.done():
            logger.warning(
                "Dropping late %d response; request already answered with %d",
                outcome.status_code,
                self._future.result().status_code,
            )
            return False
        self._future.set_result(outcome)
        return True

    async def wait(self) -> Outcome:
        return await asyncio.shield(self._future)


async def run_handler(
    operation: Awaitable[T],
    on_success: Callable[[T], Outcome],
    server_error_message: str,
    deadline: Optional[float] = None,
) -> Outcome:
    """
    Await ``operation`` and return the one ``Outcome`` for this request.

    Parameters
    ----------
    operation : awaitable
        The handler call, e.g. ``service.authenticate(...)``.
    on_success : callable
        Builds the success outcome from the handler's return value.
    server_error_message : str
        Public message for unexpected faults.
    deadline : float, optional
        Seconds after which the request is answered with 503 and the
        handler task is cancelled.
    """
    loop = asyncio.get_running_loop()
    guard = ResponseGuard()
    task = asyncio.ensure_future(operation)

    def _finished(t: asyncio.Future) -> None:
        if t.cancelled() or guard.responded:
            return
        try:
            exc = t.exception()
            if exc is None:
                outcome = on_success(t.result())
            else:
                outcome = outcome_for_exception(exc, server_error_message)
        except Exception as callback_exc:
            outcome = outcome_for_exception(callback_exc, server_error_message)
        guard.resolve(outcome)

    task.add_done_callback(_finished)

    timer = None
    if deadline is not None:

        def _expired() -> None:
            if guard.resolve(Outcome.from_error(ServiceUnavailable())):
                logger.warning("Request deadline of %.2fs exceeded", deadline)
                task.cancel()

        timer = loop.call_later(deadline, _expired)

    try:
        return await guard.wait()
    finally:
        if timer is not None:
            timer.cancel()
        if not task.done():
            task.cancel()
