"""Pytest configuration and fixtures."""

import asyncio
import json

import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel
from langchain_core.runnables import RunnableLambda

from integrity.config.settings import Settings
from integrity.models import EvidenceMetadata, EvidenceSubmission, Location, ProjectRecord


@pytest.fixture
def fast_settings() -> Settings:
    """Settings with the timeline shrunk to a few milliseconds."""
    return Settings(
        _env_file=None,
        gemini_api_key=None,
        llm_provider="gemini",
        llm_request_timeout=5.0,
        retrieve_step=25,
        retrieve_tick_seconds=0.001,
        audit_step=10,
        audit_tick_seconds=0.001,
        audit_ceiling=90,
        phase_settle_seconds=0.0,
        verdict_reveal_seconds=0.0,
        verdict_hold_seconds=0.0,
    )


@pytest.fixture
def sample_record() -> ProjectRecord:
    """Official record claiming a completed road project."""
    return ProjectRecord(
        project_id="MH-2024-PWD-01847",
        title="Kurla-Andheri Connector Road Resurfacing",
        budget="₹4,27,50,000",
        contractor="Desai Infrastructure Ltd.",
        status="Completed (claimed)",
        completion_date="2024-11-15",
        sanctioned_by="Municipal Corporation of Greater Mumbai",
        location=Location(address="Kurla West, Mumbai, Maharashtra", lat=19.076, lng=72.8777),
    )


@pytest.fixture
def sample_image() -> bytes:
    """Minimal PNG-signed payload; the oracle is faked so content is irrelevant."""
    return b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture
def sample_evidence(sample_image: bytes) -> EvidenceSubmission:
    return EvidenceSubmission(
        metadata=EvidenceMetadata.capture(lat=19.076, lng=72.8777),
        issues=("incomplete", "quality"),
        image=sample_image,
        mime_type="image/png",
    )


@pytest.fixture
def verdict_json() -> str:
    """A well-formed oracle verdict."""
    return json.dumps({
        "risk_level": "HIGH",
        "confidence": 0.82,
        "discrepancies": [
            "Record claims completion but road surface shows open trenches",
            "Heavy machinery still present on site",
        ],
        "recommendation": "Withhold final payment and schedule a physical inspection.",
    })


@pytest.fixture
def record_json() -> str:
    """A well-formed extraction response."""
    return json.dumps({
        "project_id": "MH-2024-PWD-01847",
        "title": "Kurla-Andheri Connector Road Resurfacing",
        "budget": "₹4,27,50,000",
        "contractor": "Desai Infrastructure Ltd.",
        "status": "Completed",
        "completion_date": "2024-11-15",
        "sanctioned_by": "Municipal Corporation of Greater Mumbai",
        "location_address": "Kurla West, Mumbai, Maharashtra",
    })


@pytest.fixture
def fake_oracle():
    """Build a chat model that answers with the given responses in order."""

    def build(*responses: str) -> FakeListChatModel:
        return FakeListChatModel(responses=list(responses))

    return build


@pytest.fixture
def recording_oracle():
    """Build an oracle that records each request and answers (or raises)."""

    def build(response: str | Exception = "", delay: float = 0.0):
        requests: list = []

        async def answer(messages):
            requests.append(messages)
            if delay:
                await asyncio.sleep(delay)
            if isinstance(response, Exception):
                raise response
            return response

        return RunnableLambda(answer), requests

    return build


@pytest.fixture
def wait_until():
    """Poll an async condition on the running loop."""

    async def wait(predicate, timeout: float = 2.0) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while not predicate():
            if loop.time() > deadline:
                raise AssertionError("condition not reached before timeout")
            await asyncio.sleep(0.001)

    return wait
