"""Analysis gateway: compares a project record with field evidence."""

import json

import structlog
from langchain_core.runnables import Runnable
from pydantic import ValidationError

from integrity.config.prompts import AUDIT_PROMPT
from integrity.config.settings import Settings, get_settings
from integrity.llm.chains import LLMChainError, build_media_message, run_oracle_chain
from integrity.llm.client import LLMConfigurationError, create_chat_model
from integrity.models import (
    AuditVerdict,
    GatewayFailure,
    OracleVerdictPayload,
    ProjectRecord,
    fallback_verdict,
    no_evidence_verdict,
)

logger = structlog.get_logger(__name__)


def build_audit_instruction(record: ProjectRecord) -> str:
    """Render the audit instruction with the record embedded as JSON."""
    record_json = json.dumps(record.model_dump(mode="json"), ensure_ascii=False, indent=2)
    return AUDIT_PROMPT.format(record_json=record_json)


class AnalysisGateway:
    """Mediates the record-vs-evidence contract with the analysis oracle.

    ``analyze`` never raises to its caller: every failure is absorbed into
    the fixed fallback verdict, so the audit timeline can always finish.
    """

    def __init__(self, oracle: Runnable | None = None, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self._oracle = oracle

    def _resolve_oracle(self) -> Runnable:
        # Built per call so that a missing credential only fails the call
        return self._oracle if self._oracle is not None else create_chat_model(self.settings)

    async def analyze(
        self,
        record: ProjectRecord,
        evidence_image: bytes | None,
        mime_type: str = "image/jpeg",
    ) -> AuditVerdict:
        """Produce a verdict for the record against the evidence image.

        Args:
            record: The official project record.
            evidence_image: Raw image bytes, or None when no evidence exists.
            mime_type: MIME type of the image.

        Returns:
            A structurally valid AuditVerdict.
        """
        if not evidence_image:
            logger.info("audit_analysis_no_evidence", project_id=record.project_id)
            return no_evidence_verdict()

        logger.info(
            "audit_analysis_start",
            project_id=record.project_id,
            image_bytes=len(evidence_image),
            mime_type=mime_type,
        )

        try:
            oracle = self._resolve_oracle()
            message = build_media_message(build_audit_instruction(record), evidence_image, mime_type)
            data = await run_oracle_chain(
                oracle,
                message,
                timeout=self.settings.llm_request_timeout,
                context_name="audit",
            )
            payload = OracleVerdictPayload.model_validate(data)
        except LLMConfigurationError as e:
            return self._fallback(GatewayFailure.NOT_CONFIGURED, str(e))
        except LLMChainError as e:
            return self._fallback(e.kind, str(e))
        except ValidationError as e:
            return self._fallback(GatewayFailure.SCHEMA_VIOLATION, str(e))
        except Exception as e:
            logger.exception("audit_analysis_unexpected_error")
            return self._fallback(GatewayFailure.TRANSPORT, f"Unexpected error: {e}")

        verdict = AuditVerdict.from_payload(payload)
        logger.info(
            "audit_analysis_complete",
            project_id=record.project_id,
            risk_level=verdict.risk_level.value,
            confidence=verdict.confidence,
            discrepancies=len(verdict.discrepancies),
        )
        return verdict

    @staticmethod
    def _fallback(failure: GatewayFailure, error: str) -> AuditVerdict:
        logger.warning("audit_analysis_failed", failure=failure.value, error=error[:300])
        return fallback_verdict(failure)
