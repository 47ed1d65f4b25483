"""Label quality filters, defense-context detection and official-guidance noise stripping."""

from __future__ import annotations

import re
from typing import Optional

from extract_topics.models import TopicExtractionInput
from extract_topics.taxonomy import TAXONOMY
from ingest_articles.fetch_articles.sources import SourceRegistry, resolve_story_role

LOW_VALUE_SINGLE_TOKENS = frozenset({
    "and", "but", "for",
    "a", "an", "the", "this", "that", "these", "those",
    "today", "yesterday", "tomorrow",
    "breaking", "update", "updates", "news", "live",
    "video", "watch", "audio", "podcast",
    "share", "comment", "comments", "opinion", "analysis",
})

DAY_AND_MONTH_TOKENS = frozenset({
    "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday",
    "mon", "tue", "wed", "thu", "thur", "thurs", "fri", "sat", "sun",
    "january", "february", "march", "april", "may", "june", "july",
    "august", "september", "october", "november", "december",
    "jan", "feb", "mar", "apr", "jun", "jul", "aug", "sep", "sept", "oct", "nov", "dec",
})

DATELINE_CITY_TOKENS = frozenset({
    "washington", "london", "brussels", "moscow", "kyiv", "kiev",
    "paris", "berlin", "tokyo", "beijing",
})

HEADLINE_JUNK_PATTERNS = tuple(re.compile(p, re.IGNORECASE) for p in (
    r"\bread more\b",
    r"\bcontinue reading\b",
    r"\blive updates?\b",
    r"\blive blog\b",
    r"\bnewsletter\b",
    r"\bclick here\b",
    r"\bwatch (?:now|live)\b",
    r"\bwhat you need to know\b",
    r"\bkey takeaways?\b",
    r"\bfull transcript\b",
    r"\bphoto gallery\b",
    r"\brelated (?:story|stories)\b",
    r"\bupdated at\b",
))

_DAYS = r"(?:mon|tue|wed|thu|thur|thurs|fri|sat|sun|monday|tuesday|wednesday|thursday|friday|saturday|sunday)"
_MONTHS = (
    r"(?:jan|feb|mar|apr|may|jun|jul|aug|sep|sept|oct|nov|dec|january|february|march|april|june|july"
    r"|august|september|october|november|december)"
)

# Matched against the original label, so case matters for some
DATELINE_FRAGMENT_PATTERNS = (
    re.compile(r"\((?:reuters|ap|associated press|afp)\)", re.IGNORECASE),
    re.compile(r"^(?:updated|added|published|last updated|last modified)\b", re.IGNORECASE),
    re.compile(r"^(?:[A-Z][A-Za-z.'-]+,\s*){1,4}[A-Z][A-Za-z.'-]+\s*[—–-]"),
    re.compile(r"^[A-Z]{3,}(?:\s+[A-Z]{3,}){0,3}\s*[—–-]"),
    re.compile(rf"^{_DAYS},?\s+[A-Za-z]+\s+\d{{1,2}}(?:,\s*\d{{4}})?", re.IGNORECASE),
    re.compile(rf"^{_MONTHS}\.?\s+\d{{1,2}}(?:,\s*\d{{4}})?$", re.IGNORECASE),
)

DEFENSE_CONTEXT_PATTERNS = tuple(re.compile(p, re.IGNORECASE) for p in (
    r"\bdefense\b",
    r"\bpentagon\b",
    r"\bmilitary\b",
    r"\bmissile\b",
    r"\barmy\b",
    r"\bnavy\b",
    r"\bair force\b",
    r"\bspace force\b",
    r"\bmarine corps\b",
    r"\bdod\b",
    r"\bdarpa\b",
    r"\bnato\b",
    r"\bcentcom\b",
    r"\bindopacom\b",
))

DEFENSE_SOURCE_NAME_PATTERNS = tuple(re.compile(p, re.IGNORECASE) for p in (
    r"defense",
    r"military",
    r"ministry of defence",
    r"pentagon",
    r"army",
    r"navy",
))

# Update stamps ("Updated: March 3, 2024 at 10:15 a.m.") lead a line; the rest of the line is kept
UPDATE_STAMP_RE = re.compile(
    rf"^(?:last updated|last modified|updated|added|published|posted)(?:\s+(?:on|at))?\s*[:-]?\s*"
    rf"(?:{_DAYS},?\s+)?"
    rf"(?:{_MONTHS}\.?\s+\d{{1,2}}(?:,?\s+\d{{4}})?"
    rf"|\d{{1,2}}\s+{_MONTHS}\.?(?:\s+\d{{4}})?"
    rf"|\d{{1,4}}[/.-]\d{{1,2}}[/.-]\d{{1,4}})"
    rf"(?:,?\s+(?:at\s+)?\d{{1,2}}:\d{{2}}(?:\s*[ap]\.?m\.?(?![a-z]))?)?\.?",
    re.IGNORECASE,
)

OFFICIAL_NOISE_LINE_PATTERNS = (
    re.compile(r"^[A-Z][A-Z .,'-]{2,}\s*[—–-]\s*$"),
    re.compile(rf"^(?:{_DAYS},?\s+)?{_MONTHS}\.?\s+\d{{1,2}}(?:,\s*\d{{4}})?\.?$", re.IGNORECASE),
    re.compile(rf"^\d{{1,2}}\s+{_MONTHS}\.?(?:\s+\d{{4}})?\.?$", re.IGNORECASE),
)

_DISALLOWED_CHARS_RE = re.compile(r"[^a-z0-9\s/&.+-]+")
_CALENDAR_NUMBER_RE = re.compile(r"^\d{1,4}$")
_URL_OR_EMAIL_RE = re.compile(r"https?://|www\.|\S+@\S+\.\S+", re.IGNORECASE)


def normalize_topic_label(label: str) -> str:
    """Lowercase, unify quote/dash variants, strip punctuation outside the allow-list, collapse whitespace."""
    normalized = label.lower()
    normalized = normalized.replace("‘", "'").replace("’", "'")
    normalized = normalized.replace("–", " ").replace("—", " ")
    normalized = _DISALLOWED_CHARS_RE.sub(" ", normalized)
    return " ".join(normalized.split())


def _taxonomy_lookup() -> frozenset[str]:
    lookup = set()
    for topic in TAXONOMY:
        for alias in (topic.label, *topic.aliases, *topic.context_gated_aliases):
            normalized = normalize_topic_label(alias)
            if normalized:
                lookup.add(normalized)
    return frozenset(lookup)


TAXONOMY_LABEL_LOOKUP = _taxonomy_lookup()
TAXONOMY_MATCH_KEYS = frozenset(label.replace(".", "") for label in TAXONOMY_LABEL_LOOKUP)

CONTEXT_GATED_ALIASES = frozenset(
    normalize_topic_label(alias) for topic in TAXONOMY for alias in topic.context_gated_aliases
)


def is_taxonomy_label(label: str) -> bool:
    """Whether a label names a taxonomy topic, ignoring dots (D.o.D matches DoD)."""
    return normalize_topic_label(label).replace(".", "") in TAXONOMY_MATCH_KEYS


def alias_requires_defense_context(alias: str) -> bool:
    return normalize_topic_label(alias) in CONTEXT_GATED_ALIASES


def is_low_value_topic_label(label: str) -> bool:
    """True for labels that are junk as topics: datelines, calendar tokens, headline boilerplate.

    Taxonomy labels and aliases are never low-value.
    """
    normalized = normalize_topic_label(label)
    if not normalized:
        return True
    if normalized in TAXONOMY_LABEL_LOOKUP:
        return False

    if len(normalized) < 3 or re.fullmatch(r"[-.]+", normalized) or normalized.isdigit():
        return True
    if re.fullmatch(r"[\d\s/&.+-]+", normalized):
        return True

    if any(pattern.search(normalized) for pattern in HEADLINE_JUNK_PATTERNS):
        return True

    original = label.strip()
    if original and any(pattern.search(original) for pattern in DATELINE_FRAGMENT_PATTERNS):
        return True

    words = normalized.split(" ")
    if len(words) > 7:
        return True

    if len(words) == 1:
        token = words[0]
        if token in LOW_VALUE_SINGLE_TOKENS or token in DAY_AND_MONTH_TOKENS or token in DATELINE_CITY_TOKENS:
            return True

    if all(token in DAY_AND_MONTH_TOKENS or _CALENDAR_NUMBER_RE.match(token) for token in words):
        return True

    if _URL_OR_EMAIL_RE.search(original):
        return True

    return False


def has_defense_context(
    article: TopicExtractionInput,
    registry: Optional[SourceRegistry] = None,
) -> bool:
    """Whether ambiguous defense aliases may be trusted for this article."""
    if normalize_topic_label(article.source_category or "") == "official":
        return True

    if registry is not None and registry.get(article.source_id):
        return True

    source_name = (article.source_name or "").strip()
    if source_name and any(pattern.search(source_name) for pattern in DEFENSE_SOURCE_NAME_PATTERNS):
        return True

    text = " ".join((article.title or "", article.summary or "", article.full_text or ""))
    if not text.strip():
        return False
    return any(pattern.search(text) for pattern in DEFENSE_CONTEXT_PATTERNS)


def is_official_guidance_source(
    article: TopicExtractionInput,
    registry: Optional[SourceRegistry] = None,
) -> bool:
    """Official by category, else by resolved story role when a registry is given."""
    if (article.source_category or "").strip().lower() == "official":
        return True
    if registry is None:
        return False
    role = resolve_story_role(
        registry,
        source_id=article.source_id,
        source_name=article.source_name,
        source_badge=article.source_badge,
        source_category=article.source_category,
    )
    return role == "official"


def strip_noise_lines(text: str) -> str:
    """Drop bare datelines and date-only lines, and strip update stamps that lead a line."""
    kept = []
    for line in text.splitlines():
        stripped = UPDATE_STAMP_RE.sub("", line.strip(), count=1).strip()
        if not stripped:
            continue
        if any(pattern.match(stripped) for pattern in OFFICIAL_NOISE_LINE_PATTERNS):
            continue
        kept.append(stripped)
    return "\n".join(kept)
