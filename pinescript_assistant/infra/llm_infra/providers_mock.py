"""Deterministic offline provider returning canned answers."""

import json
import logging
from typing import Any, Dict, List

from pinescript_assistant.config.models import ProviderConfig
from pinescript_assistant.core import prompt_builder

logger = logging.getLogger(__name__)

MOCK_ANALYSIS: Dict[str, Any] = {
    "parameters": {
        "identified": ["length", "source", "multiplier"],
        "suggestions": ["Try different length values", "Experiment with EMA instead of SMA"],
    },
    "logic": {
        "strengths": ["Clear entry conditions", "Well-defined risk management"],
        "weaknesses": ["No consideration for market regime", "Simple exit strategy"],
        "improvements": ["Add market regime filter", "Consider trailing stop loss"],
    },
    "risk": {
        "assessment": "Moderate risk with basic position sizing",
        "recommendations": ["Implement dynamic position sizing", "Add correlation analysis"],
    },
    "performance": {
        "bottlenecks": ["Calculation efficiency could be improved", "Redundant variables"],
        "optimizations": ["Use request.security() for efficiency", "Consolidate calculations"],
    },
}

MOCK_BACKTEST: Dict[str, Any] = {
    "overall": {
        "assessment": "Strategy shows potential but has optimization opportunities",
        "score": 7.2,
    },
    "metrics": {
        "profitFactor": "Good at 1.8, but could be improved",
        "winRate": "Acceptable at 62%, but room for improvement",
        "drawdown": "High maximum drawdown of 18% is concerning",
    },
    "strengths": ["Good win rate", "Positive profit factor"],
    "concerns": ["High maximum drawdown", "Long recovery periods"],
    "suggestions": ["Implement tighter stop-loss", "Consider profit-taking at resistance levels"],
    "parameterAdjustments": [
        {
            "parameter": "length",
            "currentValue": "14",
            "suggestedValue": "21",
            "rationale": "Longer period may reduce false signals in current market conditions",
        }
    ],
}

MOCK_ENHANCEMENTS: List[Dict[str, Any]] = [
    {
        "version": "Enhanced Version 1",
        "code": "//@version=5\nstrategy(\"Enhanced Strategy 1\", overlay=true)\n"
                "regimeOk = ta.ema(close, 200) < close\n"
                "if (ta.crossover(ta.sma(close, 9), ta.sma(close, 21)) and regimeOk)\n"
                "    strategy.entry(\"Long\", strategy.long)",
        "explanation": "This version adds a market regime filter to reduce false signals",
        "expectedImprovements": ["Reduced drawdown", "Higher win rate"],
    },
    {
        "version": "Enhanced Version 2",
        "code": "//@version=5\nstrategy(\"Enhanced Strategy 2\", overlay=true)\n"
                "atrLen = input(14, \"ATR Length\")\n"
                "len = math.round(ta.atr(atrLen) / close * 1000)\n"
                "plot(ta.sma(close, 20), \"Adaptive MA\")",
        "explanation": "This version implements adaptive parameters based on volatility",
        "expectedImprovements": ["Better performance in changing markets", "Smoother equity curve"],
    },
]


def _fenced(payload: Any) -> str:
    body = json.dumps(payload, indent=2)
    return f"Here is the requested output:\n```json\n{body}\n```"


class MockProvider:
    """Provider returning fixed answers chosen by the kind of prompt."""

    name = "mock"

    def __init__(self) -> None:
        self.prompts: List[str] = []

    async def send(self, prompt: str, config: ProviderConfig) -> str:
        """Answer by the response schema the prompt asks for.

        The schemas are fixed text emitted by the prompt builder, so words
        inside the embedded script or report never change the route.
        """
        self.prompts.append(prompt)

        if prompt_builder.ENHANCEMENT_SCHEMA in prompt:
            logger.debug("Mock provider answering enhancement prompt")
            return _fenced(MOCK_ENHANCEMENTS)
        if prompt_builder.BACKTEST_SCHEMA in prompt:
            logger.debug("Mock provider answering backtest prompt")
            return _fenced(MOCK_BACKTEST)
        logger.debug("Mock provider answering analysis prompt")
        return _fenced(MOCK_ANALYSIS)
