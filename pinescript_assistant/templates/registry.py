"""
Template registry and resolver.

TemplateRegistry: Read-only catalog of code skeletons per category.
TemplateResolver: Fuzzy lookup of a skeleton by category and name.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from string import Template

from pinescript_assistant.errors import UnknownCategoryError
from pinescript_assistant.templates import library

logger = logging.getLogger(__name__)

_VERSION_LINE = re.compile(r"^//@version=\d+", re.MULTILINE)


class TemplateCategory(str, Enum):
    """Kinds of script: strategies place trades, indicators only plot."""

    STRATEGY = "strategy"
    INDICATOR = "indicator"

    @classmethod
    def parse(cls, value: "TemplateCategory | str") -> "TemplateCategory":
        """Coerce an enum member or its (case-insensitive) value.

        Raises:
            UnknownCategoryError: If the value names no category.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise UnknownCategoryError(value)


def normalize_name(name: str) -> str:
    return name.strip().lower()


@dataclass(frozen=True)
class TemplateEntry:
    """An immutable code skeleton and the names it answers to."""

    category: TemplateCategory
    canonical_name: str
    aliases: frozenset[str]
    body: str

    def names(self) -> tuple[str, ...]:
        """Normalized canonical name followed by aliases in sorted order."""
        return (normalize_name(self.canonical_name), *sorted(self.aliases))

    def matches_exactly(self, query: str) -> bool:
        return query in self.names()

    def contains(self, query: str) -> bool:
        return any(query in name for name in self.names())


# ── Registry ─────────────────────────────────────────────────


class TemplateRegistry:
    """
    Catalog of skeletons per category, in registration order.

    Each category has exactly one fallback skeleton. Once frozen the
    registry rejects further registration and is safe to share.
    """

    def __init__(self):
        self._entries: dict[TemplateCategory, list[TemplateEntry]] = {
            category: [] for category in TemplateCategory
        }
        self._fallbacks: dict[TemplateCategory, TemplateEntry] = {}
        self._frozen = False

    def register(
        self,
        category: TemplateCategory | str,
        canonical_name: str,
        body: str,
        aliases: tuple[str, ...] = (),
    ) -> TemplateEntry:
        self._check_mutable()
        entry = TemplateEntry(
            category=TemplateCategory.parse(category),
            canonical_name=canonical_name,
            aliases=frozenset(normalize_name(alias) for alias in aliases),
            body=body,
        )
        self._entries[entry.category].append(entry)
        logger.debug("Registered %s template: %s", entry.category.value, canonical_name)
        return entry

    def register_fallback(
        self,
        category: TemplateCategory | str,
        body: str,
        canonical_name: str = "custom",
    ) -> TemplateEntry:
        self._check_mutable()
        parsed = TemplateCategory.parse(category)
        if parsed in self._fallbacks:
            raise ValueError(f"Fallback for '{parsed.value}' already registered")
        entry = TemplateEntry(
            category=parsed,
            canonical_name=canonical_name,
            aliases=frozenset(),
            body=body,
        )
        self._fallbacks[parsed] = entry
        return entry

    def freeze(self) -> "TemplateRegistry":
        missing = [c.value for c in TemplateCategory if c not in self._fallbacks]
        if missing:
            raise ValueError(f"No fallback template for: {', '.join(missing)}")
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def entries(self, category: TemplateCategory | str) -> tuple[TemplateEntry, ...]:
        return tuple(self._entries[TemplateCategory.parse(category)])

    def fallback(self, category: TemplateCategory | str) -> TemplateEntry:
        return self._fallbacks[TemplateCategory.parse(category)]

    @property
    def count(self) -> int:
        return sum(len(entries) for entries in self._entries.values())

    def _check_mutable(self) -> None:
        if self._frozen:
            raise RuntimeError("Template registry is frozen")


def build_default_registry() -> TemplateRegistry:
    """Build and freeze the registry of bundled skeletons."""
    registry = TemplateRegistry()

    registry.register(
        TemplateCategory.STRATEGY,
        "Moving Average Crossover",
        library.MOVING_AVERAGE_CROSS_STRATEGY,
        aliases=("movingaveragecross", "ma_cross", "ma cross", "ma crossover", "moving average cross"),
    )
    registry.register(
        TemplateCategory.STRATEGY,
        "RSI Strategy",
        library.RSI_STRATEGY,
        aliases=("rsi", "rsistrategy", "relative strength index"),
    )
    registry.register(
        TemplateCategory.STRATEGY,
        "MACD Strategy",
        library.MACD_STRATEGY,
        aliases=("macd", "macdstrategy", "macd cross"),
    )
    registry.register_fallback(TemplateCategory.STRATEGY, library.GENERIC_STRATEGY)

    registry.register(
        TemplateCategory.INDICATOR,
        "Bollinger Bands",
        library.BOLLINGER_BANDS_INDICATOR,
        aliases=("bollinger", "bollingerbands", "bbands", "bb"),
    )
    registry.register(
        TemplateCategory.INDICATOR,
        "MACD",
        library.MACD_INDICATOR,
        aliases=("moving average convergence divergence",),
    )
    registry.register(
        TemplateCategory.INDICATOR,
        "RSI",
        library.RSI_INDICATOR,
        aliases=("relative strength index",),
    )
    registry.register_fallback(TemplateCategory.INDICATOR, library.GENERIC_INDICATOR)

    return registry.freeze()


@lru_cache(maxsize=1)
def default_registry() -> TemplateRegistry:
    """Process-wide registry of bundled skeletons, built on first use."""
    registry = build_default_registry()
    logger.info("Loaded %d templates", registry.count)
    return registry


# ── Resolver ─────────────────────────────────────────────────


class TemplateResolver:
    """
    Looks up a skeleton by category and fuzzy name.

    Matching order: exact name or alias, then substring of a name or
    alias (first registered wins), then the category's generic skeleton.
    """

    DEFAULT_TITLES = {
        TemplateCategory.STRATEGY: "Custom Strategy",
        TemplateCategory.INDICATOR: "Custom Indicator",
    }

    def __init__(self, registry: TemplateRegistry | None = None, version: int = 5):
        self.registry = registry or default_registry()
        self.version = version

    def find(self, category: TemplateCategory | str, query: str) -> TemplateEntry | None:
        """Return the matching entry, or None when only the fallback applies."""
        entries = self.registry.entries(category)
        needle = normalize_name(query or "")
        if not needle:
            return None

        for entry in entries:
            if entry.matches_exactly(needle):
                return entry
        for entry in entries:
            if entry.contains(needle):
                return entry
        return None

    def resolve(self, category: TemplateCategory | str, query: str) -> str:
        """Return skeleton source for ``query``; never fails for an unmatched name.

        Raises:
            UnknownCategoryError: If ``category`` is not a recognized category.
        """
        parsed = TemplateCategory.parse(category)
        entry = self.find(parsed, query)
        if entry is not None:
            logger.debug("Resolved %s '%s' to %s", parsed.value, query, entry.canonical_name)
            return self._with_version(entry.body)

        title = (query or "").strip() or self.DEFAULT_TITLES[parsed]
        logger.debug("No %s template matches '%s', using generic skeleton", parsed.value, query)
        body = Template(self.registry.fallback(parsed).body).safe_substitute(
            title=title.replace("\\", "\\\\").replace('"', '\\"')
        )
        return self._with_version(body)

    def list_templates(
        self, category: TemplateCategory | str | None = None
    ) -> dict[str, list[str]]:
        """Canonical names per category in registration order."""
        categories = list(TemplateCategory) if category is None else [TemplateCategory.parse(category)]
        return {
            c.value: [entry.canonical_name for entry in self.registry.entries(c)]
            for c in categories
        }

    def _with_version(self, body: str) -> str:
        return _VERSION_LINE.sub(f"//@version={self.version}", body, count=1)
