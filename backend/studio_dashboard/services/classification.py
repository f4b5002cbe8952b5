from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Literal


logger = logging.getLogger(__name__)


class PatternSet(str, Enum):
    INTRO = "intro"
    MEMBERSHIP = "membership"
    PACKAGE = "package"


class SaleCategory(str, Enum):
    MEMBERSHIP = "membership"
    INTRO = "intro"
    DROP_IN = "dropIn"
    PACK = "pack"
    PRIVATE = "private"
    PARTY = "party"
    OTHER = "other"


def _compile(*patterns: str) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(pattern, re.IGNORECASE) for pattern in patterns)


INTRO_PATTERNS = _compile(
    r"new\s+flyer\s+3[\s-]?(class|pack)",
    r"unlimited\s+14\s+day\s+intro",
    r"new\s+flyer\s+6[\s-]?(class|pack)",
    r"3[\s-]?class\s+intro",
    r"6[\s-]?class\s+intro",
    r"intro\s+pack",
)
MEMBERSHIP_PATTERNS = _compile(
    r"4[\s-]?class\s+membership",
    r"8[\s-]?class\s+membership",
    r"12[\s-]?class\s+membership",
    r"unlimited\s+membership",
    r"monthly\s+membership",
)
PACKAGE_PATTERNS = _compile(
    r"10[\s-]?class\s+package",
    r"5[\s-]?class\s+package",
    r"15[\s-]?class\s+package",
    r"class\s+package",
)

PATTERN_SETS: dict[PatternSet, tuple[re.Pattern[str], ...]] = {
    PatternSet.INTRO: INTRO_PATTERNS,
    PatternSet.MEMBERSHIP: MEMBERSHIP_PATTERNS,
    PatternSet.PACKAGE: PACKAGE_PATTERNS,
}


def matches_pattern(text: str | None, patterns: Iterable[re.Pattern[str]]) -> bool:
    if not text:
        return False
    return any(pattern.search(text) for pattern in patterns)


def classify_by_pattern(text: str | None, pattern_set: PatternSet) -> bool:
    return matches_pattern(text, PATTERN_SETS[pattern_set])


@dataclass(frozen=True)
class SaleRule:
    category: str
    match: Literal["exact", "contains", "any"]
    needle: str
    result: SaleCategory

    def applies(self, category: str, item: str) -> bool:
        if category != self.category:
            return False
        if self.match == "exact":
            return item == self.needle
        if self.match == "contains":
            return self.needle in item
        return True


# Ordered: the first rule that applies wins. Matching is case-sensitive, as the
# payments export spells categories and item names consistently.
SALE_RULES: tuple[SaleRule, ...] = (
    SaleRule("Class", "any", "", SaleCategory.DROP_IN),
    SaleRule("Subscription", "exact", "Unlimited 14 Day Intro Package", SaleCategory.INTRO),
    SaleRule("Subscription", "contains", "Monthly", SaleCategory.MEMBERSHIP),
    SaleRule("Subscription", "any", "", SaleCategory.OTHER),
    SaleRule("Appointment", "contains", "Private Lesson", SaleCategory.PRIVATE),
    SaleRule("Appointment", "contains", "PARTY", SaleCategory.PARTY),
    SaleRule("Appointment", "any", "", SaleCategory.OTHER),
    SaleRule("Pack", "exact", "New Flyer 3 Class Pack", SaleCategory.INTRO),
    SaleRule("Pack", "any", "", SaleCategory.PACK),
    SaleRule("Product", "any", "", SaleCategory.OTHER),
    SaleRule("Payment plan installment", "any", "", SaleCategory.OTHER),
    SaleRule("Gift card", "any", "", SaleCategory.OTHER),
    SaleRule("Automatic penalty charge", "any", "", SaleCategory.OTHER),
    SaleRule("On-demand", "any", "", SaleCategory.OTHER),
)


def categorize_sale(category: str | None, item: str | None) -> SaleCategory:
    category = category or ""
    item = item or ""
    for rule in SALE_RULES:
        if rule.applies(category, item):
            return rule.result

    logger.debug("Unrecognized sale category %r for item %r; counting as other.", category, item)
    return SaleCategory.OTHER
