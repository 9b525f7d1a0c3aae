"""Extraction of structured payloads from free-form model output.

Model answers may wrap the JSON in a fenced block or surround it with
prose, and the payload itself usually embeds PineScript source whose
string literals contain brackets. The payload is therefore located by
scanning for a balanced delimiter region while ignoring delimiters that
occur inside JSON string literals, never by a greedy regular expression.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Iterator, List, Optional, Tuple

from pydantic import ValidationError

from pinescript_assistant.core.models import (
    BacktestAnalysis,
    EnhancementResult,
    StrategyAnalysis,
)
from pinescript_assistant.errors import ParseError

logger = logging.getLogger(__name__)

_CLOSING = {"{": "}", "[": "]"}


def iter_balanced_regions(text: str, opener: str) -> Iterator[Tuple[int, int]]:
    """Yield ``(start, end)`` spans of balanced ``opener`` regions, left to right.

    Depth counts only ``opener`` and its matching closer. Inside a region,
    double-quoted string literals are skipped, honouring backslash escapes.
    An opener whose region never closes is skipped.
    """
    closer = _CLOSING[opener]
    start = text.find(opener)
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        end = None
        for index in range(start, len(text)):
            char = text[index]
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
                continue
            if char == '"':
                in_string = True
            elif char == opener:
                depth += 1
            elif char == closer:
                depth -= 1
                if depth == 0:
                    end = index + 1
                    break
        if end is not None:
            yield start, end
        start = text.find(opener, start + 1)


def extract_json(
    raw: str,
    opener: str,
    accept: Callable[[Any], bool],
    operation: Optional[str] = None,
) -> Any:
    """Decode the first balanced region of ``raw`` that ``accept`` approves.

    Raises:
        ParseError: If no region decodes to an accepted value.
    """
    if not raw or not raw.strip():
        raise ParseError("Empty response from provider", raw=raw or "", operation=operation)

    last_error: Optional[str] = None
    for start, end in iter_balanced_regions(raw, opener):
        candidate = raw[start:end]
        try:
            value = json.loads(candidate)
        except json.JSONDecodeError as exc:
            last_error = str(exc)
            logger.debug("Skipping undecodable region at %d: %s", start, exc)
            continue
        if accept(value):
            return value
        logger.debug("Skipping region at %d with unexpected shape", start)

    kind = "object" if opener == "{" else "array"
    message = f"No JSON {kind} found in response"
    if last_error:
        message = f"{message} (last decode error: {last_error})"
    logger.debug("Parse failure for %s: %s", operation or "response", raw[:500])
    raise ParseError(message, raw=raw, operation=operation)


def _is_object(value: Any) -> bool:
    return isinstance(value, dict)


def _is_object_array(value: Any) -> bool:
    return isinstance(value, list) and bool(value) and all(isinstance(item, dict) for item in value)


def _validate(model, data: Any, raw: str, operation: str):
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise ParseError(
            f"Response does not match the {model.__name__} shape: {exc.error_count()} error(s)",
            raw=raw,
            operation=operation,
            context={"errors": exc.errors(include_url=False)},
        ) from exc


def parse_analysis(raw: str) -> StrategyAnalysis:
    """Extract a StrategyAnalysis from model output.

    Raises:
        ParseError: If no JSON object is found or a section is not an object.
    """
    data = extract_json(raw, "{", _is_object, operation="analyze_strategy")
    return _validate(StrategyAnalysis, data, raw, "analyze_strategy")


def parse_backtest(raw: str) -> BacktestAnalysis:
    """Extract a BacktestAnalysis from model output."""
    data = extract_json(raw, "{", _is_object, operation="analyze_backtest")
    return _validate(BacktestAnalysis, data, raw, "analyze_backtest")


def parse_enhancements(raw: str, expected_count: int) -> List[EnhancementResult]:
    """Extract enhancement variants from model output, in provider order.

    Elements that are not valid variants (no ``code``) are skipped. Fewer
    than ``expected_count`` variants is not an error; more are truncated.

    An empty array is not a payload: stray ``[]`` in surrounding prose is
    skipped, and an answer with no variants at all is a ParseError.

    Raises:
        ParseError: If no non-empty JSON array of objects is found.
    """
    data = extract_json(raw, "[", _is_object_array, operation="generate_enhancements")

    results: List[EnhancementResult] = []
    for position, item in enumerate(data):
        try:
            results.append(EnhancementResult.model_validate(item))
        except ValidationError as exc:
            logger.warning("Skipping invalid enhancement variant #%d: %s", position + 1, exc)

    if len(results) > expected_count:
        logger.info("Provider returned %d variants, keeping first %d", len(results), expected_count)
        results = results[:expected_count]
    return results
