"""Extract canonical topics from article text via the curated taxonomy and heuristic NER."""

from __future__ import annotations

import logging
import re
from typing import Any, Iterable, Optional

from common.utils import get_value
from extract_topics.models import ArticleTopics, TaxonomyTopic, TopicCandidate, TopicExtractionInput
from extract_topics.quality import (
    alias_requires_defense_context,
    has_defense_context,
    is_low_value_topic_label,
    is_official_guidance_source,
    is_taxonomy_label,
    normalize_topic_label,
    strip_noise_lines,
)
from extract_topics.slug import normalize_topic_key, slugify_topic
from extract_topics.taxonomy import TAXONOMY
from ingest_articles.fetch_articles.sources import SourceRegistry

logger = logging.getLogger(__name__)

MAX_TOPICS_PER_ARTICLE = 24
NER_TEXT_LIMIT = 12000

STOP_PHRASES = frozenset(
    normalize_topic_key(phrase)
    for phrase in (
        "The", "A", "An", "This", "That", "These", "Those",
        "Breaking News", "Defense News", "Read More", "United States",
    )
)

ORGANIZATION_HINTS = ("department", "command", "agency", "force", "ministry", "office", "corps", "navy", "army")
PROGRAM_HINTS = ("initiative", "program", "effort", "procurement", "contract", "project")
COMPANY_HINTS = ("inc", "corp", "corporation", "llc", "technologies", "systems", "group", "defense")
GEOGRAPHY_HINTS = ("sea", "ocean", "middle east", "europe", "pacific", "atlantic", "ukraine", "russia", "china")

_ACRONYM_RE = re.compile(r"\b[A-Z][A-Z0-9]{1,7}\b")
_PHRASE_RE = re.compile(r"\b[A-Z][A-Za-z0-9'&.-]+(?:\s+[A-Z][A-Za-z0-9'&.-]+){0,4}\b")
_LABEL_SHAPE_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9\s'&.-]*$")
_LEADING_ARTICLE_RE = re.compile(r"^(?:The|A|An)\s+")
_TECHNOLOGY_RE = re.compile(r"ai|radar|satellite|hypersonic|cyber|autonomy|missile|drone", re.IGNORECASE)
_PERSON_RE = re.compile(r"^[A-Z][a-z]+\s+[A-Z][a-z]+(?:\s+[A-Z][a-z]+)?$")


def _alias_pattern(normalized_alias: str) -> re.Pattern:
    return re.compile(rf"(?<![a-z0-9]){re.escape(normalized_alias)}(?![a-z0-9])")


def _match_spans(corpus: str, aliases: Iterable[str]) -> list[tuple[int, int]]:
    """Whole-word spans of every alias, longest alias first, never overlapping."""
    spans: list[tuple[int, int]] = []
    for alias in sorted(aliases, key=len, reverse=True):
        for match in _alias_pattern(alias).finditer(corpus):
            start, end = match.span()
            if any(start < taken_end and taken_start < end for taken_start, taken_end in spans):
                continue
            spans.append((start, end))
    return spans


def _count_occurrences(corpus: str, normalized_label: str) -> int:
    if not normalized_label:
        return 0
    return len(_alias_pattern(normalized_label).findall(corpus))


def _topic_aliases(topic: TaxonomyTopic, defense_context: bool) -> set[str]:
    aliases = set()
    for alias in (topic.label, *topic.aliases, *topic.context_gated_aliases):
        normalized = normalize_topic_label(alias)
        if not normalized:
            continue
        if alias_requires_defense_context(alias) and not defense_context:
            continue
        aliases.add(normalized)
    return aliases


def extract_from_taxonomy(
    normalized_corpus: str,
    normalized_title: str,
    defense_context: bool,
) -> list[TopicCandidate]:
    """Match every taxonomy topic's aliases against the normalized corpus."""
    extracted = []
    for topic in TAXONOMY:
        aliases = _topic_aliases(topic, defense_context)
        occurrences = len(_match_spans(normalized_corpus, aliases))
        if occurrences <= 0:
            continue

        in_title = bool(_match_spans(normalized_title, aliases))
        confidence = min(0.99, 0.84 + 0.1 * in_title + 0.01 * min(occurrences, 8))
        extracted.append(
            TopicCandidate(
                slug=topic.slug,
                label=topic.label,
                topic_type=topic.topic_type,
                occurrences=occurrences,
                confidence=confidence,
                is_primary=in_title or occurrences >= 3,
                matched_by="taxonomy",
            )
        )
    return extracted


def detect_topic_type(candidate: str) -> str:
    lowered = normalize_topic_key(candidate)
    if re.fullmatch(r"[A-Z0-9]{2,8}", candidate):
        return "acronym"
    if any(hint in lowered for hint in COMPANY_HINTS):
        return "company"
    if any(hint in lowered for hint in ORGANIZATION_HINTS):
        return "organization"
    if any(hint in lowered for hint in PROGRAM_HINTS):
        return "program"
    if any(hint in lowered for hint in GEOGRAPHY_HINTS):
        return "geography"
    if _TECHNOLOGY_RE.search(candidate):
        return "technology"
    if _PERSON_RE.match(candidate):
        return "person"
    return "organization"


def _candidate_entities(source: str) -> dict[str, int]:
    counts: dict[str, int] = {}
    for token in _ACRONYM_RE.findall(source):
        counts[token] = counts.get(token, 0) + 1
    for raw in _PHRASE_RE.findall(source):
        phrase = _LEADING_ARTICLE_RE.sub("", raw.strip())
        if len(phrase) < 3:
            continue
        counts[phrase] = counts.get(phrase, 0) + 1
    return counts


def extract_with_heuristic_ner(
    title: str,
    summary: str,
    full_text: str,
    normalized_corpus: str,
    normalized_title: str,
) -> list[TopicCandidate]:
    """Capitalized phrases and acronyms as low-confidence candidates.

    Labels that are taxonomy aliases are left to the taxonomy pass.
    """
    source = " ".join(part for part in (title, summary, full_text[:NER_TEXT_LIMIT]) if part)
    merged: dict[str, TopicCandidate] = {}

    for label, base_hits in _candidate_entities(source).items():
        if normalize_topic_key(label) in STOP_PHRASES:
            continue
        if not _LABEL_SHAPE_RE.match(label) or len(label.split()) > 5:
            continue

        normalized = normalize_topic_label(label)
        if is_taxonomy_label(label) or is_low_value_topic_label(label):
            continue

        slug = slugify_topic(label)
        if not slug:
            continue

        occurrences = max(base_hits, _count_occurrences(normalized_corpus, normalized))
        in_title = _count_occurrences(normalized_title, normalized) > 0
        candidate = TopicCandidate(
            slug=slug,
            label=label,
            topic_type=detect_topic_type(label),
            occurrences=occurrences,
            confidence=min(0.84, 0.5 + 0.14 * in_title + 0.03 * min(occurrences, 6)),
            is_primary=in_title or occurrences >= 4,
            matched_by="ner",
        )

        existing = merged.get(slug)
        if existing is None:
            merged[slug] = candidate
            continue
        existing.occurrences = max(existing.occurrences, candidate.occurrences)
        existing.confidence = max(existing.confidence, candidate.confidence)
        existing.is_primary = existing.is_primary or candidate.is_primary
        if len(candidate.label) > len(existing.label):
            existing.label = candidate.label

    return list(merged.values())


def _sort_key(topic: TopicCandidate):
    return (not topic.is_primary, -topic.confidence, -topic.occurrences, topic.label)


def extract_topics(
    article: TopicExtractionInput,
    registry: Optional[SourceRegistry] = None,
    include_ner: bool = True,
) -> list[TopicCandidate]:
    """Extract ranked topic candidates for a single article.

    Args:
        article: Title, summary, full text and source metadata
        registry: Source registry used for defense-context and official-source checks
        include_ner: Whether to add heuristic NER candidates to taxonomy matches

    Returns:
        Up to 24 candidates, primary first, then by confidence, occurrences and label
    """
    title = (article.title or "").strip()
    summary = (article.summary or "").strip()
    full_text = (article.full_text or "").strip()

    if is_official_guidance_source(article, registry):
        summary = strip_noise_lines(summary)
        full_text = strip_noise_lines(full_text)

    corpus = " ".join(part for part in (title, summary, full_text) if part)
    normalized_corpus = normalize_topic_label(corpus)
    if not normalized_corpus:
        return []
    normalized_title = normalize_topic_label(title)

    defense_context = has_defense_context(article, registry)
    topics = extract_from_taxonomy(normalized_corpus, normalized_title, defense_context)
    if include_ner:
        taken = {topic.slug for topic in topics}
        topics.extend(
            candidate
            for candidate in extract_with_heuristic_ner(title, summary, full_text, normalized_corpus, normalized_title)
            if candidate.slug not in taken
        )

    topics.sort(key=_sort_key)
    return topics[:MAX_TOPICS_PER_ARTICLE]


def to_extraction_input(article: Any) -> TopicExtractionInput:
    return TopicExtractionInput(
        title=get_value(article, "title") or "",
        summary=get_value(article, "summary"),
        full_text=get_value(article, "full_text"),
        source_id=get_value(article, "source_id"),
        source_name=get_value(article, "source_name"),
        source_category=get_value(article, "source_category"),
        source_badge=get_value(article, "source_badge"),
    )


def extract_article_topics(
    articles: list[Any],
    registry: Optional[SourceRegistry] = None,
) -> list[ArticleTopics]:
    """Extract topics for a batch of article rows or dicts."""
    if not articles:
        logger.warning("No articles to extract topics from")
        return []

    results = []
    total_topics = 0
    for article in articles:
        article_id = get_value(article, "id")
        if not article_id:
            logger.warning("Skipping article with missing id")
            continue
        topics = extract_topics(to_extraction_input(article), registry)
        total_topics += len(topics)
        results.append(ArticleTopics(article_id=article_id, topics=topics))

    logger.info("Extracted %d topics from %d articles", total_topics, len(results))
    return results
