"""Extraction gateway: turns a raw document into a project record."""

import structlog
from langchain_core.runnables import Runnable

from integrity.config.prompts import EXTRACTION_PROMPT
from integrity.config.settings import Settings, get_settings
from integrity.llm.chains import LLMChainError, build_media_message, run_oracle_chain
from integrity.llm.client import LLMConfigurationError, create_chat_model
from integrity.models import (
    NOT_MENTIONED,
    ExtractionFailure,
    GatewayFailure,
    Location,
    ProjectRecord,
)

logger = structlog.get_logger(__name__)

RECORD_FIELDS = (
    "project_id",
    "title",
    "budget",
    "contractor",
    "status",
    "completion_date",
    "sanctioned_by",
)
ADDRESS_FIELD = "location_address"


def is_supported_document(mime_type: str) -> bool:
    """Images and PDFs are accepted."""
    return mime_type.startswith("image/") or mime_type == "application/pdf"


def _field_value(data: dict, name: str) -> str:
    """Read one field, substituting the placeholder for absent data."""
    value = data.get(name)
    if isinstance(value, bool):
        return NOT_MENTIONED
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return NOT_MENTIONED


def build_record(data: dict) -> ProjectRecord | None:
    """Normalize an oracle response into a fully populated record.

    Returns:
        The record, or None if the response mentions none of the fields.
    """
    values = {name: _field_value(data, name) for name in RECORD_FIELDS}
    address = _field_value(data, ADDRESS_FIELD)

    if all(value == NOT_MENTIONED for value in (*values.values(), address)):
        return None

    return ProjectRecord(**values, location=Location(address=address))


class ExtractionGateway:
    """Mediates the document-to-record contract with the extraction oracle.

    Unlike analysis, failure is returned to the caller as an
    ExtractionFailure because no meaningful record can be fabricated.
    """

    def __init__(self, oracle: Runnable | None = None, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self._oracle = oracle

    def _resolve_oracle(self) -> Runnable:
        return self._oracle if self._oracle is not None else create_chat_model(self.settings)

    async def extract(self, document: bytes, mime_type: str) -> ProjectRecord | ExtractionFailure:
        """Extract a ProjectRecord from document bytes.

        Args:
            document: Raw image or PDF bytes.
            mime_type: MIME type of the document.

        Returns:
            ProjectRecord on success, ExtractionFailure otherwise.
        """
        if not document:
            return self._failure(GatewayFailure.EMPTY_DOCUMENT, "No document content supplied")
        if not is_supported_document(mime_type):
            return self._failure(
                GatewayFailure.UNSUPPORTED_TYPE,
                f"Unsupported document type {mime_type}, expected an image or PDF",
            )

        logger.info("document_extraction_start", document_bytes=len(document), mime_type=mime_type)

        try:
            oracle = self._resolve_oracle()
            instruction = EXTRACTION_PROMPT.format(not_mentioned=NOT_MENTIONED)
            data = await run_oracle_chain(
                oracle,
                build_media_message(instruction, document, mime_type),
                timeout=self.settings.llm_request_timeout,
                context_name="extraction",
            )
        except LLMConfigurationError as e:
            return self._failure(GatewayFailure.NOT_CONFIGURED, str(e))
        except LLMChainError as e:
            return self._failure(e.kind, str(e))
        except Exception as e:
            logger.exception("document_extraction_unexpected_error")
            return self._failure(GatewayFailure.TRANSPORT, f"Unexpected error: {e}")

        record = build_record(data)
        if record is None:
            return self._failure(GatewayFailure.EMPTY_RESPONSE, "Oracle returned no record data")

        logger.info(
            "document_extraction_complete",
            project_id=record.project_id,
            missing_fields=record.missing_fields(),
        )
        return record

    @staticmethod
    def _failure(reason: GatewayFailure, message: str) -> ExtractionFailure:
        logger.warning("document_extraction_failed", reason=reason.value, error=message[:300])
        return ExtractionFailure(reason=reason, message=message)
