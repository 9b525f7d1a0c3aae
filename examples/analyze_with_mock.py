#!/usr/bin/env python3
"""Example script: analyze, enhance and template-lookup with the offline provider."""

import asyncio
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from pinescript_assistant import PineScriptTools
from pinescript_assistant.config import AppConfig, ConfigStore

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")

SCRIPT = """//@version=5
strategy("SMA Cross", overlay=true)
fast = ta.sma(close, 9)
slow = ta.sma(close, 21)
if ta.crossover(fast, slow)
    strategy.entry("Long", strategy.long)
if ta.crossunder(fast, slow)
    strategy.close("Long")
"""


async def run(tools: PineScriptTools) -> None:
    analysis = await tools.analyze_strategy(SCRIPT)
    print("Weaknesses:")
    for item in analysis.logic.weaknesses:
        print(f"  - {item}")
    print()

    batch = await tools.generate_enhancements(analysis, SCRIPT, count=3)
    if batch.warning:
        print(f"⚠️  {batch.warning}")
    for variant in batch:
        print(f"✓ {variant.version}: {variant.explanation}")
    print()


def main():
    """Run the assistant against the mock provider (no API key needed)."""
    print("=" * 80)
    print("PineScript Assistant (mock provider)")
    print("=" * 80)
    print()

    tools = PineScriptTools.from_config(ConfigStore(AppConfig()))
    asyncio.run(run(tools))

    print("Available templates:")
    for category, names in tools.list_templates().items():
        print(f"  {category}: {', '.join(names)}")
    print()
    print(tools.resolve_template("strategy", "ma cross"))


if __name__ == "__main__":
    main()
