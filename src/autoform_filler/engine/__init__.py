"""
Engine module - The form-fill engine.

Pipeline, repeated once per pass:
    FieldCollector -> build_signature -> FieldMapper -> ValueWriter
driven by FillOrchestrator, which owns the stop policy.
"""

from autoform_filler.engine.collector import FieldCollector, is_fillable
from autoform_filler.engine.labeler import build_signature, normalize_text, resolve_label
from autoform_filler.engine.mapper import (
    FIELD_RULES,
    FieldMapper,
    FieldRule,
    render_value,
    resolve_option,
)
from autoform_filler.engine.writer import ValueWriter
from autoform_filler.engine.orchestrator import (
    FillOrchestrator,
    FillReport,
    FillSession,
    FillState,
    PassResult,
    StopPolicy,
)

__all__ = [
    "FieldCollector",
    "is_fillable",
    "build_signature",
    "normalize_text",
    "resolve_label",
    "FIELD_RULES",
    "FieldMapper",
    "FieldRule",
    "render_value",
    "resolve_option",
    "ValueWriter",
    "FillOrchestrator",
    "FillReport",
    "FillSession",
    "FillState",
    "PassResult",
    "StopPolicy",
]
