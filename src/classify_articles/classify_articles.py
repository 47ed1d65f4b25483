"""Core article classification logic."""

import logging
from typing import Any, Iterable

from classify_articles.models import ArticleTags, ClassifiedArticle, KeywordRule
from classify_articles.rules import (
    CONTENT_TYPE_KEYWORDS,
    CONTENT_TYPE_TRACKS,
    DEFAULT_CONTENT_TYPE,
    DEFAULT_DOMAIN_TAG,
    DEFAULT_TRACK,
    DOMAIN_RULES,
    HIGH_IMPACT_KEYWORDS,
    MAX_DOMAIN_TAGS,
    MAX_MISSION_TAGS,
    MAX_TECHNOLOGY_TAGS,
    MISSION_RULES,
    OFFICIAL_DEFAULT_MISSION_TAG,
    TECHNOLOGY_RULES,
)
from common.utils import get_value

logger = logging.getLogger(__name__)


def _build_corpus(article: Any) -> str:
    """Join title, summary, URL and source name into one lowercased corpus."""
    url = get_value(article, "url") or get_value(article, "article_url")
    parts = [
        get_value(article, "title") or "",
        get_value(article, "summary") or "",
        url or "",
        get_value(article, "source_name") or "",
    ]
    return " ".join(parts).strip().lower()


def score_keywords(corpus: str, keywords: Iterable[str]) -> int:
    """Number of keywords that occur in the corpus as substrings."""
    score = 0
    for keyword in keywords:
        keyword = keyword.strip().lower()
        if keyword and keyword in corpus:
            score += 1
    return score


def rank_rules(corpus: str, rules: Iterable[KeywordRule]) -> list[str]:
    """Labels of matching rules, by score desc then label asc."""
    scored = [(rule.label, score_keywords(corpus, rule.keywords)) for rule in rules]
    matched = [(label, score) for label, score in scored if score > 0]
    matched.sort(key=lambda entry: (-entry[1], entry[0]))
    return [label for label, _ in matched]


def resolve_content_type(corpus: str) -> str:
    best_type = DEFAULT_CONTENT_TYPE
    best_score = 0
    for content_type, keywords in CONTENT_TYPE_KEYWORDS.items():
        score = score_keywords(corpus, keywords)
        if score > best_score:
            best_type, best_score = content_type, score
    return best_type


def resolve_track(content_type: str) -> str:
    return CONTENT_TYPE_TRACKS.get(content_type, DEFAULT_TRACK)


def classify_article(article: Any) -> ArticleTags:
    """Classify a single article (dict or object) into tags."""
    corpus = _build_corpus(article)

    mission_tags = rank_rules(corpus, MISSION_RULES)[:MAX_MISSION_TAGS]
    domain_tags = rank_rules(corpus, DOMAIN_RULES)[:MAX_DOMAIN_TAGS]
    technology_tags = rank_rules(corpus, TECHNOLOGY_RULES)[:MAX_TECHNOLOGY_TAGS]

    content_type = resolve_content_type(corpus)
    high_impact = any(keyword in corpus for keyword in HIGH_IMPACT_KEYWORDS)

    if not domain_tags:
        domain_tags = [DEFAULT_DOMAIN_TAG]
    if not mission_tags and get_value(article, "source_category") == "official":
        mission_tags = [OFFICIAL_DEFAULT_MISSION_TAG]

    return ArticleTags(
        mission_tags=mission_tags,
        domain_tags=domain_tags,
        technology_tags=technology_tags,
        track=resolve_track(content_type),
        content_type=content_type,
        high_impact=high_impact,
    )


def classify_articles(articles: list[Any]) -> list[ClassifiedArticle]:
    """Classify articles by keyword rules.

    Args:
        articles: List of article objects or dicts with id, title, summary,
            url (or article_url), source_name and source_category fields

    Returns:
        List of ClassifiedArticle objects, one per article with an id
    """
    if not articles:
        logger.warning("No articles to classify")
        return []

    results = []
    for article in articles:
        article_id = get_value(article, "id")
        if not article_id:
            logger.warning("Skipping article with missing id")
            continue
        results.append(ClassifiedArticle(article_id=article_id, tags=classify_article(article)))

    logger.info("Classified %d articles", len(results))
    return results
