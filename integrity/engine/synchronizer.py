"""Progress/completion synchronizer.

Separates a pure time-based tick generator from a completion gate (a latch
set when a real asynchronous call settles) and composes the two with the
ceiling/hold rule: a gated phase advances normally up to its ceiling, holds
there while the gate is closed, then resumes to 100 once the gate opens.
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass

import structlog

logger = structlog.get_logger(__name__)

PROGRESS_MAX = 100


@dataclass(frozen=True)
class PhaseTiming:
    """Tick parameters for one phase."""

    step: int
    interval: float
    ceiling: int | None = None

    def __post_init__(self) -> None:
        if not 1 <= self.step <= PROGRESS_MAX:
            raise ValueError(f"step must be in 1..{PROGRESS_MAX}, got {self.step}")
        if self.interval < 0:
            raise ValueError(f"interval must be >= 0, got {self.interval}")
        if self.ceiling is not None and not 0 < self.ceiling < PROGRESS_MAX:
            raise ValueError(f"ceiling must be in 1..{PROGRESS_MAX - 1}, got {self.ceiling}")


class CompletionGate:
    """One-shot latch opened when the associated call has resolved."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def is_open(self) -> bool:
        return self._event.is_set()

    def open(self) -> None:
        self._event.set()

    async def wait(self) -> None:
        await self._event.wait()


def next_progress(current: int, step: int, limit: int = PROGRESS_MAX) -> int:
    """Advance by one tick without passing limit."""
    return min(current + step, limit)


class ProgressSynchronizer:
    """Drives the progress value of a single phase.

    Without a gate the phase is a pure timer. With a gate, progress never
    exceeds ``timing.ceiling`` until the gate opens. If the gate opens early
    the timer still runs at its own pace, preserving the minimum duration.

    Cancelling the task running ``run`` releases all pending ticks.
    """

    def __init__(
        self,
        name: str,
        timing: PhaseTiming,
        on_progress: Callable[[int], None],
        gate: CompletionGate | None = None,
    ):
        if gate is not None and timing.ceiling is None:
            raise ValueError("A gated phase needs a ceiling")
        self.name = name
        self.timing = timing
        self.gate = gate
        self._on_progress = on_progress
        self.progress = 0

    def _emit(self, value: int) -> None:
        self.progress = value
        self._on_progress(value)

    def _limit(self) -> int:
        if self.gate is not None and not self.gate.is_open:
            return self.timing.ceiling
        return PROGRESS_MAX

    async def run(self) -> int:
        """Tick until progress reaches 100.

        Returns:
            The final progress value (always 100).
        """
        logger.debug(
            "phase_progress_start",
            phase=self.name,
            step=self.timing.step,
            interval=self.timing.interval,
            gated=self.gate is not None,
        )
        self._emit(0)

        while self.progress < PROGRESS_MAX:
            await asyncio.sleep(self.timing.interval)

            limit = self._limit()
            if self.progress >= limit:
                logger.debug("phase_progress_holding", phase=self.name, progress=self.progress)
                await self.gate.wait()
                logger.debug("phase_progress_released", phase=self.name)
                continue

            self._emit(next_progress(self.progress, self.timing.step, limit))

        logger.debug("phase_progress_complete", phase=self.name)
        return self.progress
