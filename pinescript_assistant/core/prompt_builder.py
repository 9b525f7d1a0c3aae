"""Prompt construction for strategy analysis, backtest review and enhancement.

All renderers are pure: the same inputs always produce the same prompt.
Each prompt fixes the JSON field names of the answer so the response can
be decoded against a schema instead of being read as free text.
"""

from __future__ import annotations

ANALYSIS_SCHEMA = """{
  "parameters": {
    "identified": ["parameter description", ...],
    "suggestions": ["parameter suggestion", ...]
  },
  "logic": {
    "strengths": ["strength description", ...],
    "weaknesses": ["weakness description", ...],
    "improvements": ["improvement suggestion", ...]
  },
  "risk": {
    "assessment": "overall risk assessment",
    "recommendations": ["risk management suggestion", ...]
  },
  "performance": {
    "bottlenecks": ["bottleneck description", ...],
    "optimizations": ["optimization suggestion", ...]
  }
}"""

BACKTEST_SCHEMA = """{
  "overall": {
    "assessment": "overall assessment",
    "score": 7.5
  },
  "metrics": {
    "profitFactor": "profit factor analysis",
    "winRate": "win rate analysis",
    "drawdown": "drawdown analysis"
  },
  "strengths": ["strength", ...],
  "concerns": ["concern", ...],
  "suggestions": ["suggestion", ...],
  "parameterAdjustments": [
    {
      "parameter": "parameter name",
      "currentValue": "current value",
      "suggestedValue": "suggested value",
      "rationale": "why the change helps"
    }
  ]
}"""

ENHANCEMENT_SCHEMA = """{
  "version": "short name of the variant",
  "code": "complete PineScript source of the variant",
  "explanation": "what was changed and why",
  "expectedImprovements": ["expected improvement", ...]
}"""

JSON_ONLY = (
    "Respond with valid JSON only. "
    "Do not include any commentary, markdown or text outside of the JSON."
)
STRING_LISTS = "Lists of descriptions must contain plain strings, not objects."


def _code_block(source: str) -> str:
    return f"```pinescript\n{source}\n```"


def analysis_prompt(script: str) -> str:
    """Render the instruction for reviewing a strategy script."""
    return "\n\n".join(
        [
            "You are an expert PineScript developer and quantitative trader.",
            "Analyze the provided PineScript trading strategy and assess its "
            "parameters, logic, risk management approach and performance characteristics.",
            "Strategy source:",
            _code_block(script),
            "Focus on practical improvements, give specific parameter suggestions "
            "and identify any missing components.",
            f"Your response must be a single JSON object with exactly this structure:\n{ANALYSIS_SCHEMA}",
            STRING_LISTS,
            JSON_ONLY,
        ]
    )


def backtest_prompt(results: str, script: str) -> str:
    """Render the instruction for interpreting backtest results of a strategy."""
    return "\n\n".join(
        [
            "You are an expert PineScript developer and quantitative trader.",
            "Interpret the backtest results of the PineScript strategy below. "
            "Assess profitability, win rate and drawdown, and recommend parameter adjustments.",
            "Backtest results:",
            f"```\n{results}\n```",
            "Strategy source:",
            _code_block(script),
            f"Your response must be a single JSON object with exactly this structure:\n{BACKTEST_SCHEMA}",
            STRING_LISTS,
            JSON_ONLY,
        ]
    )


def enhancement_prompt(prior_analysis_json: str, script: str, count: int) -> str:
    """Render the instruction for generating ``count`` enhanced variants."""
    if count < 1:
        raise ValueError("count must be at least 1")
    return "\n\n".join(
        [
            "You are an expert PineScript developer and quantitative trader.",
            f"Generate {count} enhanced versions of the PineScript strategy below. "
            "Each version should address a different weakness while keeping the core approach.",
            "Prior analysis of the strategy:",
            f"```json\n{prior_analysis_json}\n```",
            "Original strategy source:",
            _code_block(script),
            f"Your response must be a JSON array of exactly {count} objects, "
            f"each with this structure:\n{ENHANCEMENT_SCHEMA}",
            JSON_ONLY,
        ]
    )
