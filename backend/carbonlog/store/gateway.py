"""Submission gateways: where a finished batch of entries is sent."""

from __future__ import annotations

import asyncio
import logging
import random
from typing import TYPE_CHECKING, Protocol

from carbonlog.exceptions import SubmissionError

if TYPE_CHECKING:
    from carbonlog.models.entry import SubmissionRecord

logger = logging.getLogger(__name__)

DEFAULT_SUCCESS_RATE = 0.9
DEFAULT_DELAY_SECONDS = 2.0


class SubmissionGateway(Protocol):
    """Sends a submission record to the remote side.

    Implementations return normally on success and raise
    :class:`~carbonlog.exceptions.SubmissionError` on failure.
    """

    async def submit(self, record: SubmissionRecord) -> None: ...


class SimulatedGateway:
    """Stand-in for a reporting backend.

    Waits ``delay`` seconds, then succeeds with probability
    ``success_rate``.

    Args:
        success_rate: Probability in [0, 1] that a submission succeeds.
        delay: Simulated network latency in seconds.
        rng: Random source, injectable for deterministic tests.
    """

    def __init__(
        self,
        success_rate: float = DEFAULT_SUCCESS_RATE,
        delay: float = DEFAULT_DELAY_SECONDS,
        rng: random.Random | None = None,
    ) -> None:
        if not 0.0 <= success_rate <= 1.0:
            msg = f"success_rate must be within [0, 1], got {success_rate}"
            raise ValueError(msg)
        if delay < 0:
            msg = f"delay must not be negative, got {delay}"
            raise ValueError(msg)
        self._success_rate = success_rate
        self._delay = delay
        self._rng = rng or random.Random()

    async def submit(self, record: SubmissionRecord) -> None:
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._rng.random() >= self._success_rate:
            msg = "Submission failed due to server error"
            raise SubmissionError(msg)
        logger.debug("Simulated submission of %d entries accepted", record.entry_count)
