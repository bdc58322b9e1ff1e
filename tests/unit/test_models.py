"""Unit tests for Pydantic models."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from integrity.models import (
    FALLBACK_DISCREPANCY,
    ISSUE_CATEGORIES,
    NOT_MENTIONED,
    AuditSnapshot,
    AuditVerdict,
    EvidenceMetadata,
    EvidenceSubmission,
    GatewayFailure,
    Location,
    OracleVerdictPayload,
    Phase,
    ProjectRecord,
    RiskLevel,
    VerdictOutcome,
    fallback_verdict,
    no_evidence_verdict,
)


class TestAuditVerdict:
    """Tests for AuditVerdict."""

    def test_confidence_clamped_above(self):
        verdict = AuditVerdict(risk_level=RiskLevel.HIGH, confidence=1.7, recommendation="Inspect")
        assert verdict.confidence == 1.0

    def test_confidence_clamped_below(self):
        verdict = AuditVerdict(risk_level=RiskLevel.LOW, confidence=-0.3, recommendation="None")
        assert verdict.confidence == 0.0

    def test_invalid_risk_level(self):
        with pytest.raises(ValidationError):
            AuditVerdict(risk_level="SEVERE", confidence=0.5, recommendation="x")

    def test_nan_confidence_rejected(self):
        with pytest.raises(ValidationError):
            AuditVerdict(risk_level=RiskLevel.LOW, confidence=float("nan"), recommendation="x")

    def test_frozen(self):
        verdict = no_evidence_verdict()
        with pytest.raises(ValidationError):
            verdict.confidence = 0.1

    def test_to_oracle_dict(self):
        verdict = AuditVerdict(
            risk_level=RiskLevel.CRITICAL,
            confidence=0.9,
            discrepancies=("a", "b"),
            recommendation="Halt payments",
        )
        assert verdict.to_oracle_dict() == {
            "risk_level": "CRITICAL",
            "confidence": 0.9,
            "discrepancies": ["a", "b"],
            "recommendation": "Halt payments",
        }

    def test_no_evidence_verdict(self):
        verdict = no_evidence_verdict()
        assert verdict.to_oracle_dict() == {
            "risk_level": "LOW",
            "confidence": 1.0,
            "discrepancies": ["No photographic evidence provided"],
            "recommendation": "Upload evidence to perform audit.",
        }
        assert verdict.outcome == VerdictOutcome.NO_EVIDENCE
        assert verdict.failure is None

    def test_fallback_verdict(self):
        verdict = fallback_verdict(GatewayFailure.TIMEOUT)
        assert verdict.risk_level == RiskLevel.MEDIUM
        assert verdict.confidence == 0.5
        assert verdict.discrepancies == (FALLBACK_DISCREPANCY,)
        assert verdict.recommendation.endswith("manual inspection.")
        assert verdict.is_fallback
        assert verdict.failure == GatewayFailure.TIMEOUT

    def test_empty_findings_distinct_from_failure(self):
        payload = OracleVerdictPayload(
            risk_level="LOW", confidence=0.95, discrepancies=[], recommendation="No action needed."
        )
        verdict = AuditVerdict.from_payload(payload)
        assert verdict.discrepancies == ()
        assert verdict.outcome == VerdictOutcome.ASSESSED
        assert not verdict.is_fallback


class TestOracleVerdictPayload:
    """Tests for strict oracle response validation."""

    def test_valid_payload(self):
        payload = OracleVerdictPayload.model_validate({
            "risk_level": "MEDIUM",
            "confidence": 0.6,
            "discrepancies": ["Signboard missing"],
            "recommendation": "Request site photos from contractor.",
        })
        assert payload.risk_level == RiskLevel.MEDIUM

    def test_integer_confidence_accepted(self):
        payload = OracleVerdictPayload.model_validate(
            {"risk_level": "LOW", "confidence": 1, "discrepancies": [], "recommendation": "ok"}
        )
        assert payload.confidence == 1.0

    @pytest.mark.parametrize(
        "overrides",
        [
            {"risk_level": "SEVERE"},
            {"risk_level": "low"},
            {"confidence": 1.5},
            {"confidence": -0.1},
            {"confidence": "0.8"},
            {"discrepancies": [1, 2]},
            {"discrepancies": "one finding"},
            {"recommendation": ""},
        ],
    )
    def test_contract_violations(self, overrides):
        data = {
            "risk_level": "HIGH",
            "confidence": 0.7,
            "discrepancies": ["x"],
            "recommendation": "Inspect",
            **overrides,
        }
        with pytest.raises(ValidationError):
            OracleVerdictPayload.model_validate(data)

    @pytest.mark.parametrize("field", ["risk_level", "confidence", "discrepancies", "recommendation"])
    def test_missing_field(self, field):
        data = {"risk_level": "HIGH", "confidence": 0.7, "discrepancies": [], "recommendation": "x"}
        del data[field]
        with pytest.raises(ValidationError):
            OracleVerdictPayload.model_validate(data)


class TestProjectRecord:
    """Tests for ProjectRecord."""

    def test_frozen(self, sample_record):
        with pytest.raises(ValidationError):
            sample_record.status = "In Progress"

    def test_display_fields(self, sample_record):
        fields = sample_record.display_fields()
        assert fields[0] == ("PROJECT ID", "MH-2024-PWD-01847")
        assert [label for label, _ in fields] == [
            "PROJECT ID",
            "TITLE",
            "BUDGET",
            "CONTRACTOR",
            "STATUS",
            "COMPLETION DATE",
            "SANCTIONED BY",
        ]

    def test_missing_fields(self):
        record = ProjectRecord(
            project_id="X-1",
            title=NOT_MENTIONED,
            budget="₹10",
            contractor=NOT_MENTIONED,
            status="Completed",
            completion_date="2024-01-01",
            sanctioned_by="PWD",
            location=Location(address=NOT_MENTIONED),
        )
        assert record.missing_fields() == ["title", "contractor", "location_address"]

    def test_location_optional(self, sample_record):
        record = sample_record.model_copy(update={"location": None})
        assert record.location is None
        assert record.missing_fields() == []

    def test_invalid_latitude(self):
        with pytest.raises(ValidationError):
            Location(address="Somewhere", lat=123.0, lng=0.0)


class TestEvidence:
    """Tests for evidence models."""

    def test_capture_stamps_utc_now(self):
        before = datetime.now(timezone.utc)
        metadata = EvidenceMetadata.capture(lat=19.076, lng=72.8777)
        assert metadata.timestamp >= before
        assert metadata.weather == "PARTLY CLOUDY"
        assert metadata.lighting == "DAYLIGHT"

    def test_issue_catalogue(self):
        ids = [category.id for category in ISSUE_CATEGORIES]
        assert len(ids) == 8
        assert "safety" in ids

    def test_requires_an_issue(self, sample_image):
        with pytest.raises(ValidationError):
            EvidenceSubmission(
                metadata=EvidenceMetadata.capture(lat=0, lng=0),
                issues=(),
                image=sample_image,
            )

    def test_unknown_issue_rejected(self, sample_image):
        with pytest.raises(ValidationError):
            EvidenceSubmission(
                metadata=EvidenceMetadata.capture(lat=0, lng=0),
                issues=("graffiti",),
                image=sample_image,
            )

    def test_issues_deduplicated(self, sample_image):
        submission = EvidenceSubmission(
            metadata=EvidenceMetadata.capture(lat=0, lng=0),
            issues=("safety", "quality", "safety"),
            image=sample_image,
        )
        assert submission.issues == ("safety", "quality")

    def test_requires_image_mime(self, sample_image):
        with pytest.raises(ValidationError):
            EvidenceSubmission(
                metadata=EvidenceMetadata.capture(lat=0, lng=0),
                issues=("other",),
                image=sample_image,
                mime_type="application/pdf",
            )

    def test_requires_image_bytes(self):
        with pytest.raises(ValidationError):
            EvidenceSubmission(
                metadata=EvidenceMetadata.capture(lat=0, lng=0),
                issues=("other",),
                image=b"",
            )


class TestAuditSnapshot:
    """Tests for AuditSnapshot."""

    def test_initial_state(self):
        snapshot = AuditSnapshot()
        assert snapshot.phase == Phase.IDLE
        assert snapshot.progress == 0
        assert snapshot.verdict is None
        assert snapshot.phase_history == (Phase.IDLE,)

    @pytest.mark.parametrize(
        ("phase", "expected"),
        [
            (Phase.IDLE, 0),
            (Phase.RETRIEVE, 40),
            (Phase.AUDIT, 70),
            (Phase.VERDICT, 100),
            (Phase.COMPLETE, 100),
        ],
    )
    def test_progress_follows_phase(self, phase, expected):
        snapshot = AuditSnapshot(phase=phase, retrieve_progress=40, audit_progress=70)
        assert snapshot.progress == expected


class TestEnums:
    """Tests for enum values."""

    def test_risk_levels(self):
        assert [level.value for level in RiskLevel] == ["LOW", "MEDIUM", "HIGH", "CRITICAL"]

    def test_phase_order(self):
        assert [phase.value for phase in Phase] == ["idle", "retrieve", "audit", "verdict", "complete"]
