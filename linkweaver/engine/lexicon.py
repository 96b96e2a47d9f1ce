"""Word lists shared by the validator, generator and matcher.

Everything here is read-only module data.
"""

from __future__ import annotations

import re
from typing import FrozenSet, Tuple

STOPWORDS: FrozenSet[str] = frozenset(
    {
        "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
        "of", "with", "by", "from", "as", "is", "was", "are", "were", "been",
        "be", "have", "has", "had", "do", "does", "did", "will", "would",
        "could", "should", "may", "might", "must", "shall", "can", "need",
        "this", "that", "these", "those", "i", "you", "he", "she", "it", "we",
        "they", "what", "which", "who", "whom", "your", "his", "her", "its",
        "our", "their", "my", "how", "why", "when", "where", "here", "there",
        "check", "out", "click", "link", "visit", "view", "get", "make", "go",
        "see", "look", "come", "think", "know", "take", "give", "use", "find",
    }
)

# Starting an anchor with any of these reads as a call to action or a pointer,
# not as a description of the target page.
WEAK_STARTERS: FrozenSet[str] = frozenset(
    {
        "the", "a", "an", "this", "that", "these", "those",
        "our", "your", "my", "their", "his", "her", "its",
        "here", "there", "click", "read", "learn", "see", "view",
        "check", "visit", "go", "get", "find", "discover", "explore",
        "just", "simply", "also", "and", "but", "or", "so", "then",
        "more", "try", "start", "begin", "continue", "download", "access",
        "open", "link", "page", "article", "post",
    }
)

BANNED_PATTERNS: Tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"^(?:click|read|learn|see|check|visit|go|get|find|this|here)\b",
        r"click\s+here$",
        r"read\s+more$",
        r"^view\s+(?:all|more|the|our)\b",
        r"^link\s+(?:to|here)\b",
        r"^continue\s+(?:reading|to|here)\b",
        r"^(?:https?|www)\b",
        r"https?://|www\.|\.(?:com|net|org|io)\b",
        r"^(?:the|a|an)\s+\w+$",
    )
)

POWER_WORDS: FrozenSet[str] = frozenset(
    {
        "proven", "guaranteed", "exclusive", "secret", "revolutionary", "breakthrough",
        "ultimate", "essential", "comprehensive", "definitive", "expert", "professional",
        "advanced", "complete", "powerful", "effective", "instant", "free", "new",
        "best", "top", "amazing", "incredible", "remarkable", "outstanding", "critical",
    }
)

# Qualifiers combined with core title words to synthesise natural phrases.
CORE_EXPANSIONS: Tuple[str, ...] = (
    "effective {core}",
    "{core} techniques",
    "{core} strategies",
    "advanced {core}",
    "{core} best practices",
    "mastering {core}",
    "{core} fundamentals",
    "essential {core}",
    "{core} optimization",
    "professional {core}",
    "{core} methods",
    "complete {core}",
)

TOPIC_VARIANTS: Tuple[Tuple[str, int], ...] = (
    ("{topic}", 20),
    ("{topic} strategies", 18),
    ("{topic} techniques", 16),
    ("{topic} best practices", 15),
    ("effective {topic}", 14),
    ("{topic} guide", 12),
)

# Words absorbed in front of a match when widening it.
LEADING_QUALIFIERS: Tuple[str, ...] = (
    "advanced", "best", "top", "comprehensive", "ultimate", "essential",
    "effective", "complete", "professional", "modern", "basic", "fundamental",
    "critical", "strategic", "practical", "proven", "successful", "innovative",
    "powerful", "full", "detailed", "quick", "easy", "simple", "step-by-step",
    "in-depth", "expert", "beginner",
)

# Nouns absorbed after a match when widening it.
TRAILING_NOUNS: Tuple[str, ...] = (
    "guide", "tutorial", "tips", "strategies", "techniques", "methods",
    "approach", "system", "framework", "process", "steps", "checklist",
    "template", "examples", "solutions", "tactics", "practices", "principles",
    "fundamentals", "basics", "essentials", "overview", "introduction",
    "review", "comparison", "analysis",
)

AUDIENCE_TAILS: Tuple[str, ...] = (
    "beginners", "experts", "professionals", "businesses", "developers",
    "marketers", "success", "growth", "improvement",
)

CONTEXTUAL_TEMPLATES: Tuple[str, ...] = (
    "{term} strategies",
    "{term} strategy",
    "{term} techniques",
    "{term} tips",
    "{term} basics",
    "{term} for beginners",
    "guide to {term}",
    "introduction to {term}",
    "mastering {term}",
    "benefits of {term}",
)

BRIDGE_TEMPLATES: Tuple[str, ...] = (
    "For more details, see our comprehensive resource on {anchor}.",
    "We've covered this topic extensively in our article about {anchor}.",
    "To dive deeper into this subject, explore our guide on {anchor}.",
    "Related reading: check out our detailed breakdown of {anchor}.",
    "This concept is further explained in our analysis of {anchor}.",
    "For practical applications, refer to our resource on {anchor}.",
    "Learn more about this in our featured article covering {anchor}.",
)


def is_stopword(word: str) -> bool:
    return word.lower() in STOPWORDS


def is_meaningful(word: str) -> bool:
    """Length above two and not a stopword."""

    return len(word) > 2 and word.lower() not in STOPWORDS
