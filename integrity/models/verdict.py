"""Models for audit verdicts and gateway failures."""

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator

from .enums import GatewayFailure, RiskLevel, VerdictOutcome

NO_EVIDENCE_DISCREPANCY = "No photographic evidence provided"
NO_EVIDENCE_RECOMMENDATION = "Upload evidence to perform audit."
FALLBACK_DISCREPANCY = "AI Analysis Failed - Manual Review Required"
FALLBACK_RECOMMENDATION = "System error during audit. Proceed with manual inspection."


class OracleVerdictPayload(BaseModel):
    """Strict shape of the analysis oracle's JSON response.

    Any deviation (missing field, unknown risk level, confidence outside [0, 1],
    non-string findings, empty recommendation) fails validation.
    """

    model_config = ConfigDict(extra="ignore")

    risk_level: RiskLevel
    confidence: float = Field(..., ge=0.0, le=1.0, strict=True, allow_inf_nan=False)
    discrepancies: list[StrictStr] = Field(..., description="May be empty, never absent")
    recommendation: StrictStr = Field(..., min_length=1)


class AuditVerdict(BaseModel):
    """Risk assessment for one audit run."""

    model_config = ConfigDict(frozen=True)

    risk_level: RiskLevel = Field(..., description="LOW, MEDIUM, HIGH or CRITICAL")
    confidence: float = Field(..., allow_inf_nan=False, description="Clamped into [0, 1]")
    discrepancies: tuple[str, ...] = Field(default=(), description="Ordered findings")
    recommendation: str = Field(..., description="Next steps")
    outcome: VerdictOutcome = Field(default=VerdictOutcome.ASSESSED)
    failure: GatewayFailure | None = Field(None, description="Set on fallback verdicts")

    @field_validator("confidence")
    @classmethod
    def _clamp_confidence(cls, value: float) -> float:
        return min(1.0, max(0.0, value))

    @property
    def is_fallback(self) -> bool:
        return self.outcome == VerdictOutcome.FALLBACK

    def to_oracle_dict(self) -> dict:
        """The four-field wire shape."""
        return {
            "risk_level": self.risk_level.value,
            "confidence": self.confidence,
            "discrepancies": list(self.discrepancies),
            "recommendation": self.recommendation,
        }

    @classmethod
    def from_payload(cls, payload: OracleVerdictPayload) -> "AuditVerdict":
        return cls(
            risk_level=payload.risk_level,
            confidence=payload.confidence,
            discrepancies=tuple(payload.discrepancies),
            recommendation=payload.recommendation,
            outcome=VerdictOutcome.ASSESSED,
        )


def no_evidence_verdict() -> AuditVerdict:
    """Deterministic verdict when no evidence image was supplied."""
    return AuditVerdict(
        risk_level=RiskLevel.LOW,
        confidence=1.0,
        discrepancies=(NO_EVIDENCE_DISCREPANCY,),
        recommendation=NO_EVIDENCE_RECOMMENDATION,
        outcome=VerdictOutcome.NO_EVIDENCE,
    )


def fallback_verdict(failure: GatewayFailure) -> AuditVerdict:
    """Fixed verdict substituted for any analysis failure."""
    return AuditVerdict(
        risk_level=RiskLevel.MEDIUM,
        confidence=0.5,
        discrepancies=(FALLBACK_DISCREPANCY,),
        recommendation=FALLBACK_RECOMMENDATION,
        outcome=VerdictOutcome.FALLBACK,
        failure=failure,
    )


class ExtractionFailure(BaseModel):
    """Signal that a document could not be turned into a record."""

    model_config = ConfigDict(frozen=True)

    reason: GatewayFailure
    message: str
