"""Workflow state definition for LangGraph."""

from typing import TypedDict

from integrity.models import AuditVerdict, EvidenceSubmission, ExtractionFailure, Phase, ProjectRecord


class AuditWorkflowState(TypedDict, total=False):
    """State that flows through the one-shot audit workflow."""

    # Input
    document: bytes
    mime_type: str
    evidence: EvidenceSubmission | None

    # Stage 1: Extraction
    record: ProjectRecord | None
    extraction_failure: ExtractionFailure | None

    # Stage 2: Audit
    verdict: AuditVerdict | None
    phase_history: list[Phase]


def create_initial_state(
    document: bytes,
    mime_type: str,
    evidence: EvidenceSubmission | None = None,
) -> AuditWorkflowState:
    """Create initial workflow state."""
    return AuditWorkflowState(
        document=document,
        mime_type=mime_type,
        evidence=evidence,
        record=None,
        extraction_failure=None,
        verdict=None,
        phase_history=[],
    )
