"""Catalog of defense news feeds and the registry built from it."""

from __future__ import annotations

from typing import Iterable, Iterator, Optional

from ingest_articles.models import FeedSource

DEFENSE_FEEDS: tuple[FeedSource, ...] = (
    # Journalism
    FeedSource(
        id="breaking-defense",
        name="Breaking Defense",
        category="journalism",
        source_badge="Reporting",
        feed_url="https://breakingdefense.com/feed/",
        homepage_url="https://breakingdefense.com/",
        weight=5,
        quality_tier="high",
        cadence="daily",
        story_role="reporting",
        topic_focus=("programs", "procurement", "space", "airpower"),
    ),
    FeedSource(
        id="defense-news",
        name="Defense News",
        category="journalism",
        source_badge="Reporting",
        feed_url="https://www.defensenews.com/arc/outboundfeeds/rss/?outputType=xml",
        homepage_url="https://www.defensenews.com/",
        weight=5,
        quality_tier="high",
        cadence="hourly",
        story_role="reporting",
        topic_focus=("operations", "programs", "budget", "policy"),
    ),
    FeedSource(
        id="c4isrnet",
        name="C4ISRNET",
        category="journalism",
        source_badge="Reporting",
        feed_url="https://www.c4isrnet.com/arc/outboundfeeds/rss/?outputType=xml",
        homepage_url="https://www.c4isrnet.com/",
        weight=4,
        quality_tier="high",
        cadence="daily",
        story_role="reporting",
        topic_focus=("cyber", "intelligence", "space", "technology"),
    ),
    FeedSource(
        id="defense-one",
        name="Defense One",
        category="journalism",
        source_badge="Reporting",
        feed_url="https://www.defenseone.com/rss/all/",
        homepage_url="https://www.defenseone.com/",
        weight=4,
        quality_tier="high",
        cadence="daily",
        story_role="reporting",
        topic_focus=("policy", "technology", "global-security"),
    ),
    FeedSource(
        id="the-war-zone",
        name="The War Zone",
        category="journalism",
        source_badge="Reporting",
        feed_url="https://www.twz.com/feed",
        homepage_url="https://www.twz.com/",
        weight=4,
        quality_tier="medium",
        cadence="daily",
        story_role="reporting",
        topic_focus=("operations", "systems", "airpower"),
    ),
    FeedSource(
        id="defense-scoop",
        name="DefenseScoop",
        category="journalism",
        source_badge="Reporting",
        feed_url="https://defensescoop.com/feed/",
        homepage_url="https://defensescoop.com/",
        weight=4,
        quality_tier="high",
        cadence="daily",
        story_role="reporting",
        topic_focus=("cyber", "government-tech", "ai"),
    ),
    FeedSource(
        id="usni-news",
        name="USNI News",
        category="journalism",
        source_badge="Reporting",
        feed_url="https://news.usni.org/feed",
        homepage_url="https://news.usni.org/",
        weight=4,
        quality_tier="medium",
        cadence="daily",
        story_role="reporting",
        topic_focus=("naval", "maritime", "operations"),
    ),
    FeedSource(
        id="naval-news",
        name="Naval News",
        category="journalism",
        source_badge="Reporting",
        feed_url="https://www.navalnews.com/feed/",
        homepage_url="https://www.navalnews.com/",
        weight=3,
        quality_tier="medium",
        cadence="daily",
        story_role="reporting",
        topic_focus=("naval", "procurement", "maritime"),
    ),
    # Analysis
    FeedSource(
        id="war-on-the-rocks",
        name="War on the Rocks",
        category="analysis",
        source_badge="Analysis",
        feed_url="https://warontherocks.com/feed/",
        homepage_url="https://warontherocks.com/",
        weight=4,
        quality_tier="high",
        cadence="daily",
        story_role="analysis",
        topic_focus=("strategy", "policy", "deterrence"),
    ),
    FeedSource(
        id="real-clear-defense",
        name="RealClearDefense",
        category="analysis",
        source_badge="Opinion",
        feed_url="https://www.realcleardefense.com/index.xml",
        homepage_url="https://www.realcleardefense.com/",
        weight=2,
        quality_tier="baseline",
        cadence="daily",
        story_role="opinion",
        topic_focus=("opinion", "commentary", "policy"),
    ),
    FeedSource(
        id="csis",
        name="CSIS",
        category="analysis",
        source_badge="Analysis",
        feed_url="https://www.csis.org/rss.xml",
        homepage_url="https://www.csis.org/",
        weight=3,
        quality_tier="high",
        cadence="weekly",
        story_role="analysis",
        topic_focus=("policy", "strategy", "regional-analysis"),
    ),
    # Official
    FeedSource(
        id="dod-news",
        name="U.S. Department of Defense News",
        category="official",
        source_badge="DoD release",
        feed_url="https://www.defense.gov/DesktopModules/ArticleCS/RSS.ashx?ContentType=1&Site=945&max=25",
        homepage_url="https://www.defense.gov/News/",
        weight=5,
        quality_tier="high",
        cadence="daily",
        story_role="official",
        topic_focus=("official-statements", "operations", "policy"),
    ),
    FeedSource(
        id="dod-releases",
        name="U.S. Department of Defense Releases",
        category="official",
        source_badge="DoD release",
        feed_url="https://www.defense.gov/DesktopModules/ArticleCS/RSS.ashx?ContentType=400&Site=945&max=25",
        homepage_url="https://www.defense.gov/News/Releases/",
        weight=5,
        quality_tier="high",
        cadence="daily",
        story_role="official",
        topic_focus=("press-release", "budget", "statements"),
    ),
    FeedSource(
        id="us-air-force",
        name="U.S. Air Force",
        category="official",
        source_badge="DoD release",
        feed_url="https://www.af.mil/DesktopModules/ArticleCS/RSS.ashx?ContentType=1&Site=1&max=25",
        homepage_url="https://www.af.mil/News/",
        weight=3,
        quality_tier="medium",
        cadence="daily",
        story_role="official",
        topic_focus=("service-updates", "operations", "programs"),
    ),
    FeedSource(
        id="us-marines",
        name="U.S. Marine Corps",
        category="official",
        source_badge="DoD release",
        feed_url="https://www.marines.mil/DesktopModules/ArticleCS/RSS.ashx?ContentType=1&Site=1&max=25",
        homepage_url="https://www.marines.mil/News/",
        weight=3,
        quality_tier="medium",
        cadence="daily",
        story_role="official",
        topic_focus=("service-updates", "operations", "readiness"),
    ),
    FeedSource(
        id="uk-mod",
        name="UK Ministry of Defence",
        category="official",
        source_badge="Policy doc",
        feed_url="https://www.gov.uk/government/organisations/ministry-of-defence.atom",
        homepage_url="https://www.gov.uk/government/organisations/ministry-of-defence",
        weight=3,
        quality_tier="medium",
        cadence="daily",
        story_role="official",
        topic_focus=("policy", "procurement", "official-statements"),
    ),
)

WEEKLY_SOURCE_CAP = 18
DAILY_SOURCE_CAP = 42


class SourceRegistry:
    """Immutable lookup over a catalog of feed sources, kept in catalog order."""

    def __init__(self, sources: Iterable[FeedSource]):
        self._sources = tuple(sources)
        self._by_id = {source.id: source for source in self._sources}

    def __iter__(self) -> Iterator[FeedSource]:
        return iter(self._sources)

    def __len__(self) -> int:
        return len(self._sources)

    def __contains__(self, source_id: object) -> bool:
        return source_id in self._by_id

    @property
    def ids(self) -> list[str]:
        return [source.id for source in self._sources]

    def get(self, source_id: Optional[str]) -> Optional[FeedSource]:
        if not source_id:
            return None
        return self._by_id.get(source_id)

    def resolve(self, source_ids: Optional[Iterable[str]] = None) -> list[FeedSource]:
        """Filter the catalog by id, case-insensitively. An empty selection returns all sources."""
        wanted = {s.strip().lower() for s in (source_ids or []) if s and s.strip()}
        if not wanted:
            return list(self._sources)
        return [source for source in self._sources if source.id.lower() in wanted]


def default_registry() -> SourceRegistry:
    return SourceRegistry(DEFENSE_FEEDS)


def per_source_cap(source: FeedSource, max_per_source: int) -> int:
    """Cap items per source by how often the feed updates."""
    if source.cadence == "weekly":
        return min(max_per_source, WEEKLY_SOURCE_CAP)
    if source.cadence == "daily":
        return min(max_per_source, DAILY_SOURCE_CAP)
    return max_per_source


def _normalize(value: Optional[str]) -> str:
    if not value:
        return ""
    return " ".join(value.lower().split())


def resolve_story_role(
    registry: SourceRegistry,
    source_id: Optional[str] = None,
    source_name: Optional[str] = None,
    source_badge: Optional[str] = None,
    source_category: Optional[str] = None,
) -> str:
    """Story role for a source, falling back to badge/category/name heuristics for unknown sources."""
    known = registry.get(source_id)
    if known:
        return known.story_role

    badge = _normalize(source_badge)
    category = _normalize(source_category)
    name = _normalize(source_name)

    if "opinion" in badge or "op-ed" in badge or "commentary" in badge:
        return "opinion"
    if "policy doc" in badge or "release" in badge or category == "official":
        return "official"
    if category == "analysis":
        return "analysis"
    if "realcleardefense" in name:
        return "opinion"
    if "war on the rocks" in name or "csis" in name:
        return "analysis"
    return "reporting"
