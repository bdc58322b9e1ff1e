"""Per-session audit flow: document intake, field evidence, audit.

Holds the session's in-memory inputs and the single scheduler that runs
audits against them. Nothing is persisted.
"""

import structlog

from integrity.config.settings import Settings, get_settings
from integrity.engine.scheduler import AuditScheduler
from integrity.gateways import AnalysisGateway, ExtractionGateway
from integrity.models import (
    AuditSnapshot,
    EvidenceSubmission,
    ExtractionFailure,
    ProjectRecord,
)

logger = structlog.get_logger(__name__)


class SessionStateError(Exception):
    """A session command issued before its inputs exist."""

    pass


class AuditSession:
    """In-process entry point for a UI shell."""

    def __init__(
        self,
        analysis_gateway: AnalysisGateway | None = None,
        extraction_gateway: ExtractionGateway | None = None,
        settings: Settings | None = None,
    ):
        self.settings = settings or get_settings()
        self.extraction_gateway = extraction_gateway or ExtractionGateway(settings=self.settings)
        self.scheduler = AuditScheduler(
            analysis_gateway or AnalysisGateway(settings=self.settings),
            settings=self.settings,
        )
        self.record: ProjectRecord | None = None
        self.evidence: EvidenceSubmission | None = None

    async def ingest_document(self, document: bytes, mime_type: str) -> ProjectRecord | ExtractionFailure:
        """Extract and store the official record.

        On failure nothing is stored and no phase is started; the caller
        reports the returned ExtractionFailure to the user.
        """
        result = await self.extraction_gateway.extract(document, mime_type)
        if isinstance(result, ExtractionFailure):
            logger.warning("session_document_rejected", reason=result.reason.value)
            return result

        self.record = result
        logger.info("session_record_stored", project_id=result.project_id)
        return result

    def use_record(self, record: ProjectRecord) -> None:
        """Supply a record directly instead of extracting one."""
        self.record = record

    def submit_evidence(self, evidence: EvidenceSubmission) -> None:
        self.evidence = evidence
        logger.info(
            "session_evidence_stored",
            issues=list(evidence.issues),
            image_bytes=len(evidence.image),
            captured_at=evidence.metadata.timestamp.isoformat(),
        )

    def begin_audit(self) -> bool:
        """Start the audit timeline for the stored record and evidence.

        Returns:
            True if a run started, False if one is already in progress.

        Raises:
            SessionStateError: If no record has been ingested.
        """
        if self.record is None:
            raise SessionStateError("No project record: ingest a document before auditing")

        image = self.evidence.image if self.evidence else None
        mime_type = self.evidence.mime_type if self.evidence else "image/jpeg"
        return self.scheduler.begin(self.record, image, mime_type)

    async def run_audit(self) -> AuditSnapshot:
        """Begin (if idle) and wait for the run to settle."""
        self.begin_audit()
        return await self.scheduler.wait_until_settled()

    def reset(self) -> None:
        self.scheduler.reset()

    async def aclose(self) -> None:
        await self.scheduler.aclose()
