"""Typed results of LLM operations.

Models accept the camelCase field names the prompts ask for as well as
their snake_case attribute names. Leaf fields are tolerant: a missing or
null leaf becomes an empty string or list, list elements that are not
strings are stringified. Top-level sections are required and must be
JSON objects; a missing or null section fails validation.
"""
from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Annotated, Any, Dict, Iterator, List, Optional, overload

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def _string_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, (list, tuple)):
        return [_stringify(item) for item in value if item is not None]
    return [_stringify(value)]


def _text(value: Any) -> str:
    if value is None:
        return ""
    return _stringify(value)


def _string_map(value: Any) -> Dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"expected an object, got {type(value).__name__}")
    return {str(key): _text(item) for key, item in value.items()}


def _optional_score(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _object_list(value: Any) -> List[Dict[str, Any]]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"expected an array, got {type(value).__name__}")
    return [item for item in value if isinstance(item, dict)]


StringList = Annotated[List[str], BeforeValidator(_string_list)]
Text = Annotated[str, BeforeValidator(_text)]


class _Payload(BaseModel):
    """Base for models decoded from model output."""

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # null is treated as absent: leaves fall back to defaults, sections fail
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


# ============================================================================
# Strategy analysis
# ============================================================================


class ParameterReview(_Payload):
    identified: StringList = Field(default_factory=list)
    suggestions: StringList = Field(default_factory=list)


class LogicReview(_Payload):
    strengths: StringList = Field(default_factory=list)
    weaknesses: StringList = Field(default_factory=list)
    improvements: StringList = Field(default_factory=list)


class RiskReview(_Payload):
    assessment: Text = ""
    recommendations: StringList = Field(default_factory=list)


class PerformanceReview(_Payload):
    bottlenecks: StringList = Field(default_factory=list)
    optimizations: StringList = Field(default_factory=list)


class StrategyAnalysis(_Payload):
    """Structured review of a strategy script."""

    parameters: ParameterReview
    logic: LogicReview
    risk: RiskReview
    performance: PerformanceReview

    def to_json(self) -> str:
        """Serialize with the field names used in prompts."""
        return self.model_dump_json(by_alias=True, indent=2)


# ============================================================================
# Backtest analysis
# ============================================================================


class OverallAssessment(_Payload):
    assessment: Text = ""
    score: Annotated[Optional[float], BeforeValidator(_optional_score)] = None


class ParameterAdjustment(_Payload):
    parameter: Text = ""
    current_value: Text = ""
    suggested_value: Text = ""
    rationale: Text = ""


class BacktestAnalysis(_Payload):
    """Interpretation of a strategy's backtest report."""

    overall: OverallAssessment
    metrics: Annotated[Dict[str, str], BeforeValidator(_string_map)] = Field(default_factory=dict)
    strengths: StringList = Field(default_factory=list)
    concerns: StringList = Field(default_factory=list)
    suggestions: StringList = Field(default_factory=list)
    parameter_adjustments: Annotated[
        List[ParameterAdjustment], BeforeValidator(_object_list)
    ] = Field(default_factory=list)


# ============================================================================
# Enhancements
# ============================================================================


class EnhancementResult(_Payload):
    """One enhanced variant of a strategy."""

    version: Text = ""
    code: str = Field(min_length=1)
    explanation: Text = ""
    expected_improvements: StringList = Field(default_factory=list)


class EnhancementBatch(Sequence):
    """Enhancement variants in provider order plus a count-mismatch indicator."""

    def __init__(self, items: List[EnhancementResult], requested: int):
        self.items = list(items)
        self.requested = requested

    @property
    def received(self) -> int:
        return len(self.items)

    @property
    def count_mismatch(self) -> bool:
        return self.received < self.requested

    @property
    def warning(self) -> Optional[str]:
        if not self.count_mismatch:
            return None
        return (
            f"Provider returned {self.received} of {self.requested} "
            f"requested enhancement variants"
        )

    @overload
    def __getitem__(self, index: int) -> EnhancementResult: ...

    @overload
    def __getitem__(self, index: slice) -> List[EnhancementResult]: ...

    def __getitem__(self, index):
        return self.items[index]

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[EnhancementResult]:
        return iter(self.items)

    def __repr__(self) -> str:
        return f"EnhancementBatch(received={self.received}, requested={self.requested})"
