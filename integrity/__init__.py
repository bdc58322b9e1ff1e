"""Civic infrastructure audit engine.

Compares an official project record with field evidence and produces a
risk verdict, driving a staged retrieve -> audit -> verdict timeline.

Usage:
    from integrity import AuditSession

    session = AuditSession()
    record = await session.ingest_document(pdf_bytes, "application/pdf")
    session.submit_evidence(evidence)
    snapshot = await session.run_audit()
"""

from integrity.engine import AuditScheduler, CompletionGate, PhaseTiming, ProgressSynchronizer
from integrity.gateways import AnalysisGateway, ExtractionGateway
from integrity.logging_config import configure_logging
from integrity.models import (
    AuditSnapshot,
    AuditVerdict,
    EvidenceMetadata,
    EvidenceSubmission,
    ExtractionFailure,
    Phase,
    ProjectRecord,
    RiskLevel,
)
from integrity.pipeline import run_audit_workflow
from integrity.session import AuditSession, SessionStateError

__version__ = "0.1.0"

__all__ = [
    "AuditSession",
    "SessionStateError",
    "AuditScheduler",
    "ProgressSynchronizer",
    "CompletionGate",
    "PhaseTiming",
    "AnalysisGateway",
    "ExtractionGateway",
    "run_audit_workflow",
    "configure_logging",
    "AuditSnapshot",
    "AuditVerdict",
    "EvidenceMetadata",
    "EvidenceSubmission",
    "ExtractionFailure",
    "Phase",
    "ProjectRecord",
    "RiskLevel",
]
