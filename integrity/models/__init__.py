"""Pydantic data models for the audit engine."""

from .enums import GatewayFailure, Phase, RiskLevel, VerdictOutcome
from .evidence import (
    ISSUE_CATEGORIES,
    Coordinates,
    EvidenceMetadata,
    EvidenceSubmission,
    IssueCategory,
)
from .record import NOT_MENTIONED, Location, ProjectRecord
from .state import AuditSnapshot
from .verdict import (
    FALLBACK_DISCREPANCY,
    FALLBACK_RECOMMENDATION,
    NO_EVIDENCE_DISCREPANCY,
    NO_EVIDENCE_RECOMMENDATION,
    AuditVerdict,
    ExtractionFailure,
    OracleVerdictPayload,
    fallback_verdict,
    no_evidence_verdict,
)

__all__ = [
    # Enums
    "RiskLevel",
    "Phase",
    "VerdictOutcome",
    "GatewayFailure",
    # Record
    "NOT_MENTIONED",
    "Location",
    "ProjectRecord",
    # Evidence
    "Coordinates",
    "EvidenceMetadata",
    "IssueCategory",
    "ISSUE_CATEGORIES",
    "EvidenceSubmission",
    # Verdict
    "AuditVerdict",
    "OracleVerdictPayload",
    "ExtractionFailure",
    "no_evidence_verdict",
    "fallback_verdict",
    "NO_EVIDENCE_DISCREPANCY",
    "NO_EVIDENCE_RECOMMENDATION",
    "FALLBACK_DISCREPANCY",
    "FALLBACK_RECOMMENDATION",
    # State
    "AuditSnapshot",
]
