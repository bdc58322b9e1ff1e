"""Stage scheduler: the audit timeline state machine.

idle -> retrieve -> audit -> verdict -> complete

All phase, progress and verdict state lives in one AuditSnapshot owned by
the scheduler and replaced only through ``_apply``. Each run carries a
generation number (the in-flight token); updates tagged with a superseded
generation are discarded.
"""

import asyncio
from collections.abc import Callable
from typing import Protocol

import structlog

from integrity.config.settings import Settings, get_settings
from integrity.engine.synchronizer import (
    CompletionGate,
    PhaseTiming,
    ProgressSynchronizer,
)
from integrity.models import (
    AuditSnapshot,
    AuditVerdict,
    GatewayFailure,
    Phase,
    ProjectRecord,
    fallback_verdict,
)

logger = structlog.get_logger(__name__)

NEXT_PHASE: dict[Phase, Phase] = {
    Phase.IDLE: Phase.RETRIEVE,
    Phase.RETRIEVE: Phase.AUDIT,
    Phase.AUDIT: Phase.VERDICT,
    Phase.VERDICT: Phase.COMPLETE,
}

Listener = Callable[[AuditSnapshot], None]


class InvalidTransitionError(Exception):
    """A phase change that skips or reverses the timeline."""

    pass


class Analyzer(Protocol):
    """Anything that turns a record and evidence image into a verdict."""

    async def analyze(
        self,
        record: ProjectRecord,
        evidence_image: bytes | None,
        mime_type: str = ...,
    ) -> AuditVerdict: ...


class AuditScheduler:
    """Sequences one audit run at a time and wires the synchronizer to the gateway.

    Commands: ``begin``, ``reset``, ``restart``, ``aclose``.
    Queries: ``current_phase``, ``current_progress``, ``current_verdict``,
    ``snapshot``.

    Must be driven from a running event loop.
    """

    def __init__(self, gateway: Analyzer, settings: Settings | None = None):
        self.gateway = gateway
        self.settings = settings or get_settings()
        self._state = AuditSnapshot()
        self._generation = 0
        self._listeners: list[Listener] = []
        self._driver: asyncio.Task | None = None
        self._analysis: asyncio.Task | None = None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def current_phase(self) -> Phase:
        return self._state.phase

    @property
    def current_progress(self) -> int:
        return self._state.progress

    @property
    def current_verdict(self) -> AuditVerdict | None:
        return self._state.verdict

    @property
    def run_id(self) -> int:
        return self._generation

    @property
    def analysis_pending(self) -> bool:
        return self._analysis is not None and not self._analysis.done()

    def snapshot(self) -> AuditSnapshot:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a callback for every state update.

        Returns:
            A callable that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def begin(
        self,
        record: ProjectRecord,
        evidence_image: bytes | None,
        mime_type: str = "image/jpeg",
    ) -> bool:
        """Start an audit run from idle.

        A begin while a run exists (in flight or complete) is ignored;
        only ``reset`` returns the scheduler to idle.

        Returns:
            True if a new run was started.
        """
        if self._state.phase != Phase.IDLE or self.analysis_pending:
            logger.info(
                "audit_begin_ignored",
                run_id=self._generation,
                phase=self._state.phase.value,
                analysis_pending=self.analysis_pending,
            )
            return False

        self._generation += 1
        token = self._generation
        gate = CompletionGate()

        logger.info("audit_run_start", run_id=token, project_id=record.project_id)

        self._apply(token, run_id=token, analysis_pending=True)
        self._advance(token, Phase.RETRIEVE)
        self._analysis = asyncio.create_task(
            self._run_analysis(token, gate, record, evidence_image, mime_type),
            name=f"audit-analysis-{token}",
        )
        self._driver = asyncio.create_task(self._drive(token, gate), name=f"audit-driver-{token}")
        return True

    def reset(self) -> None:
        """Abandon the current run and return to idle.

        Pending timers are cancelled; the in-flight analysis is cancelled and
        its token invalidated so a late result cannot touch state.
        """
        superseded = self._generation
        self._generation += 1
        for task in (self._driver, self._analysis):
            if task is not None and not task.done():
                task.cancel()
        self._driver = None
        self._analysis = None

        logger.info("audit_reset", superseded_run_id=superseded, phase=self._state.phase.value)
        self._publish(AuditSnapshot(run_id=0))

    def restart(
        self,
        record: ProjectRecord,
        evidence_image: bytes | None,
        mime_type: str = "image/jpeg",
    ) -> bool:
        """Supersede any current run with a new one."""
        self.reset()
        return self.begin(record, evidence_image, mime_type)

    async def wait_until_settled(self) -> AuditSnapshot:
        """Wait for the current run driver to finish or be cancelled."""
        driver = self._driver
        if driver is not None:
            await asyncio.wait({driver})
        return self._state

    async def aclose(self) -> None:
        """Tear down: cancel every pending task and return to idle."""
        tasks = [task for task in (self._driver, self._analysis) if task is not None]
        self.reset()
        if tasks:
            await asyncio.wait(tasks)
        self._listeners.clear()

    # ------------------------------------------------------------------
    # Run internals
    # ------------------------------------------------------------------

    async def _run_analysis(
        self,
        token: int,
        gate: CompletionGate,
        record: ProjectRecord,
        evidence_image: bytes | None,
        mime_type: str,
    ) -> None:
        try:
            verdict = await self.gateway.analyze(record, evidence_image, mime_type)
        except Exception:
            logger.exception("audit_gateway_raised", run_id=token)
            verdict = fallback_verdict(GatewayFailure.TRANSPORT)

        if token != self._generation:
            logger.info("audit_stale_verdict_discarded", run_id=token, current_run_id=self._generation)
            return

        self._apply(token, verdict=verdict, analysis_pending=False)
        gate.open()

    async def _drive(self, token: int, gate: CompletionGate) -> None:
        settings = self.settings

        retrieve = ProgressSynchronizer(
            Phase.RETRIEVE.value,
            PhaseTiming(step=settings.retrieve_step, interval=settings.retrieve_tick_seconds),
            on_progress=lambda value: self._apply(token, retrieve_progress=value),
        )
        await retrieve.run()
        await asyncio.sleep(settings.phase_settle_seconds)
        self._advance(token, Phase.AUDIT)

        audit = ProgressSynchronizer(
            Phase.AUDIT.value,
            PhaseTiming(
                step=settings.audit_step,
                interval=settings.audit_tick_seconds,
                ceiling=settings.audit_ceiling,
            ),
            on_progress=lambda value: self._apply(token, audit_progress=value),
            gate=gate,
        )
        await audit.run()
        await asyncio.sleep(settings.phase_settle_seconds)
        self._advance(token, Phase.VERDICT)

        await asyncio.sleep(settings.verdict_reveal_seconds)
        self._apply(token, verdict_revealed=True)
        await asyncio.sleep(settings.verdict_hold_seconds)
        self._advance(token, Phase.COMPLETE)

        logger.info(
            "audit_run_complete",
            run_id=token,
            risk_level=self._state.verdict.risk_level.value,
            outcome=self._state.verdict.outcome.value,
        )

    def _advance(self, token: int, target: Phase) -> None:
        if token != self._generation:
            return
        current = self._state.phase
        if NEXT_PHASE.get(current) != target:
            raise InvalidTransitionError(f"Cannot move from {current.value} to {target.value}")
        if target == Phase.VERDICT and self._state.verdict is None:
            raise InvalidTransitionError("Cannot enter verdict without a resolved verdict")

        logger.info("audit_phase_entered", run_id=token, phase=target.value)
        self._apply(
            token,
            phase=target,
            phase_history=(*self._state.phase_history, target),
        )

    def _apply(self, token: int, **changes) -> None:
        """Single update path for scheduler state."""
        if token != self._generation:
            return
        self._publish(self._state.model_copy(update=changes))

    def _publish(self, state: AuditSnapshot) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("audit_listener_failed", run_id=state.run_id, phase=state.phase.value)
