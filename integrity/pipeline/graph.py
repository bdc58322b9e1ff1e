"""LangGraph workflow: document extraction followed by a full audit run."""

import structlog
from langgraph.graph import END, START, StateGraph

from integrity.config.settings import Settings, get_settings
from integrity.engine.scheduler import AuditScheduler
from integrity.gateways import AnalysisGateway, ExtractionGateway
from integrity.models import EvidenceSubmission, ExtractionFailure
from integrity.pipeline.state import AuditWorkflowState, create_initial_state

logger = structlog.get_logger(__name__)


def should_continue_after_extraction(state: AuditWorkflowState) -> str:
    """Stop before any phase starts when extraction failed.

    Returns:
        'continue' if a record exists, 'error' otherwise.
    """
    if state.get("record") is None:
        logger.warning("workflow_stopping_no_record")
        return "error"
    return "continue"


def build_audit_workflow(
    extraction_gateway: ExtractionGateway | None = None,
    analysis_gateway: AnalysisGateway | None = None,
    settings: Settings | None = None,
) -> StateGraph:
    """Build the extraction -> audit workflow.

    Returns:
        StateGraph ready for compilation.
    """
    settings = settings or get_settings()
    extraction_gateway = extraction_gateway or ExtractionGateway(settings=settings)
    analysis_gateway = analysis_gateway or AnalysisGateway(settings=settings)

    async def extraction_node(state: AuditWorkflowState) -> AuditWorkflowState:
        result = await extraction_gateway.extract(state["document"], state["mime_type"])
        if isinstance(result, ExtractionFailure):
            return {"record": None, "extraction_failure": result}
        return {"record": result, "extraction_failure": None}

    async def audit_node(state: AuditWorkflowState) -> AuditWorkflowState:
        evidence = state.get("evidence")
        scheduler = AuditScheduler(analysis_gateway, settings=settings)
        try:
            scheduler.begin(
                state["record"],
                evidence.image if evidence else None,
                evidence.mime_type if evidence else "image/jpeg",
            )
            final = await scheduler.wait_until_settled()
        finally:
            await scheduler.aclose()
        return {"verdict": final.verdict, "phase_history": list(final.phase_history)}

    workflow = StateGraph(AuditWorkflowState)

    workflow.add_node("extraction", extraction_node)
    workflow.add_node("audit", audit_node)

    workflow.add_edge(START, "extraction")
    workflow.add_conditional_edges(
        "extraction",
        should_continue_after_extraction,
        {
            "continue": "audit",
            "error": END,
        },
    )
    workflow.add_edge("audit", END)

    return workflow


async def run_audit_workflow(
    document: bytes,
    mime_type: str,
    evidence: EvidenceSubmission | None = None,
    extraction_gateway: ExtractionGateway | None = None,
    analysis_gateway: AnalysisGateway | None = None,
    settings: Settings | None = None,
) -> AuditWorkflowState:
    """Extract a record from the document and audit it against the evidence.

    Returns:
        Final workflow state with record, extraction_failure, verdict and phase_history.
    """
    logger.info("workflow_starting", mime_type=mime_type, has_evidence=evidence is not None)

    app = build_audit_workflow(extraction_gateway, analysis_gateway, settings).compile()
    result = await app.ainvoke(create_initial_state(document, mime_type, evidence))

    logger.info(
        "workflow_complete",
        extracted=result.get("record") is not None,
        risk_level=result["verdict"].risk_level.value if result.get("verdict") else None,
    )
    return result
