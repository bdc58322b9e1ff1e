"""Models describing the observable state of the audit scheduler."""

from pydantic import BaseModel, ConfigDict, Field

from .enums import Phase
from .verdict import AuditVerdict


class AuditSnapshot(BaseModel):
    """Immutable view of scheduler state, published after every update."""

    model_config = ConfigDict(frozen=True)

    run_id: int = Field(default=0, ge=0, description="Generation of the current run, 0 before any run")
    phase: Phase = Field(default=Phase.IDLE)
    retrieve_progress: int = Field(default=0, ge=0, le=100)
    audit_progress: int = Field(default=0, ge=0, le=100)
    analysis_pending: bool = Field(default=False)
    verdict: AuditVerdict | None = Field(None)
    verdict_revealed: bool = Field(default=False)
    phase_history: tuple[Phase, ...] = Field(default=(Phase.IDLE,))

    @property
    def progress(self) -> int:
        """Progress of the phase currently on screen."""
        if self.phase == Phase.RETRIEVE:
            return self.retrieve_progress
        if self.phase == Phase.AUDIT:
            return self.audit_progress
        if self.phase in (Phase.VERDICT, Phase.COMPLETE):
            return 100
        return 0
