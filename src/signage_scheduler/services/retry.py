"""Timeout and bounded retry around the candidate repository."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from sqlalchemy import exc as sa_exc

from signage_scheduler.core.errors import TransientInfraError
from signage_scheduler.services.resolver import CandidateRepository, CandidateRows

logger = logging.getLogger(__name__)

T = TypeVar("T")

RETRYABLE_ERRORS: tuple[type[BaseException], ...] = (
    sa_exc.OperationalError,
    sa_exc.InterfaceError,
    sa_exc.TimeoutError,
    asyncio.TimeoutError,
    ConnectionError,
    OSError,
)


class RetryingCandidateRepository:
    """
    Wrap a :class:`CandidateRepository` with a per-attempt timeout and
    exponential backoff.

    Only connection-level failures are retried. Once *attempts* are used up a
    :class:`TransientInfraError` is raised so the caller never mistakes an
    outage for "no schedule".
    """

    def __init__(
        self,
        inner: CandidateRepository,
        *,
        attempts: int = 3,
        backoff_seconds: float = 0.2,
        backoff_max_seconds: float = 2.0,
        timeout_seconds: float = 5.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._inner = inner
        self._attempts = max(1, attempts)
        self._backoff_seconds = backoff_seconds
        self._backoff_max_seconds = backoff_max_seconds
        self._timeout_seconds = timeout_seconds
        self._sleep = sleep

    def _delay_for(self, attempt: int) -> float:
        return min(self._backoff_seconds * (2 ** (attempt - 1)), self._backoff_max_seconds)

    async def find_active_schedules_with_assignments(self, customer_id: int) -> CandidateRows:
        for attempt in range(1, self._attempts + 1):
            try:
                return await asyncio.wait_for(
                    self._inner.find_active_schedules_with_assignments(customer_id),
                    timeout=self._timeout_seconds,
                )
            except RETRYABLE_ERRORS as exc:
                if attempt == self._attempts:
                    logger.error(
                        "Schedule lookup for customer %s failed after %d attempts: %r",
                        customer_id,
                        attempt,
                        exc,
                    )
                    raise TransientInfraError(
                        "Schedule store is temporarily unavailable",
                        retry_after=max(1, round(self._backoff_max_seconds)),
                    ) from exc

                delay = self._delay_for(attempt)
                logger.warning(
                    "Schedule lookup for customer %s failed (attempt %d/%d): %r; retrying in %.2fs",
                    customer_id,
                    attempt,
                    self._attempts,
                    exc,
                    delay,
                )
                await self._sleep(delay)

        raise AssertionError("unreachable")  # pragma: no cover


async def call_store(
    awaitable: Awaitable[T],
    *,
    what: str,
    timeout_seconds: float,
    retry_after: int,
) -> T:
    """
    Await a single lookup on a request session with a timeout.

    The session may be unusable after a connection failure, so there is no
    retry here; failures surface as :class:`TransientInfraError`.
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout_seconds)
    except RETRYABLE_ERRORS as exc:
        logger.error("%s lookup failed: %r", what, exc)
        raise TransientInfraError(
            "Schedule store is temporarily unavailable", retry_after=retry_after
        ) from exc


__all__ = ["RETRYABLE_ERRORS", "RetryingCandidateRepository", "call_store"]
