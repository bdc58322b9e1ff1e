"""Gateways mediating contracts with the external oracles."""

from .analysis import AnalysisGateway, build_audit_instruction
from .extraction import ExtractionGateway, build_record, is_supported_document

__all__ = [
    "AnalysisGateway",
    "ExtractionGateway",
    "build_audit_instruction",
    "build_record",
    "is_supported_document",
]
