"""One-shot audit workflow built on LangGraph."""

from .graph import build_audit_workflow, run_audit_workflow, should_continue_after_extraction
from .state import AuditWorkflowState, create_initial_state

__all__ = [
    "AuditWorkflowState",
    "build_audit_workflow",
    "create_initial_state",
    "run_audit_workflow",
    "should_continue_after_extraction",
]
