"""Enumeration types for the audit models."""

from enum import Enum


class RiskLevel(str, Enum):
    """Risk classification produced by an audit."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class Phase(str, Enum):
    """Phases of one audit run, in timeline order."""

    IDLE = "idle"
    RETRIEVE = "retrieve"
    AUDIT = "audit"
    VERDICT = "verdict"
    COMPLETE = "complete"


class VerdictOutcome(str, Enum):
    """How a verdict was produced."""

    ASSESSED = "assessed"          # Oracle judgment that passed validation
    NO_EVIDENCE = "no_evidence"    # Short-circuit, no image supplied
    FALLBACK = "fallback"          # Substituted after an oracle failure


class GatewayFailure(str, Enum):
    """Reasons a gateway call did not yield oracle data."""

    NOT_CONFIGURED = "not_configured"
    TRANSPORT = "transport"
    TIMEOUT = "timeout"
    EMPTY_RESPONSE = "empty_response"
    INVALID_JSON = "invalid_json"
    SCHEMA_VIOLATION = "schema_violation"
    EMPTY_DOCUMENT = "empty_document"
    UNSUPPORTED_TYPE = "unsupported_type"
