"""Tests for persistence.topics against SQLite."""

from unittest.mock import Mock

import pytest
from sqlalchemy import create_engine, insert, select
from sqlalchemy.exc import OperationalError

from extract_topics.models import TopicCandidate
from persistence.connection import get_session
from persistence.models import ArticleTopic, Base, Topic
from persistence.topics import build_link_row, cleanup_orphan_topics, persist_article_topics


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'topics.db'}")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


def _candidate(
    slug: str,
    label: str,
    topic_type: str = "organization",
    confidence: float = 0.9,
    occurrences: int = 1,
    is_primary: bool = False,
    matched_by: str = "taxonomy",
) -> TopicCandidate:
    return TopicCandidate(
        slug=slug,
        label=label,
        topic_type=topic_type,
        occurrences=occurrences,
        confidence=confidence,
        is_primary=is_primary,
        matched_by=matched_by,
    )


DOD = _candidate("department-of-defense", "Department of Defense", confidence=0.98, occurrences=4, is_primary=True)
ANDURIL = _candidate("anduril-industries", "Anduril Industries", topic_type="company", confidence=0.82)
NER_ONLY = _candidate("vendorx-systems", "VendorX Systems", topic_type="company", confidence=0.61, matched_by="ner")


def _links(session, article_id: str) -> dict:
    rows = session.execute(
        select(Topic.slug, ArticleTopic.confidence, ArticleTopic.occurrences, ArticleTopic.is_primary)
        .join(Topic, Topic.id == ArticleTopic.topic_id)
        .where(ArticleTopic.article_id == article_id)
    ).all()
    return {row.slug: row for row in rows}


class TestBuildLinkRow:
    def test_caps_and_rounds_confidence(self) -> None:
        row = build_link_row("a1", 7, _candidate("x", "X", confidence=1.0, occurrences=0))
        assert row["confidence"] == 0.999
        assert row["occurrences"] == 1

    def test_rounds_to_three_places(self) -> None:
        row = build_link_row("a1", 7, _candidate("x", "X", confidence=0.87654))
        assert row["confidence"] == pytest.approx(0.877)


class TestPersistArticleTopics:
    def test_stores_only_taxonomy_topics(self, engine) -> None:
        with get_session(engine) as session:
            written = persist_article_topics(session, "a1", [DOD, ANDURIL, NER_ONLY])
            links = _links(session, "a1")
            slugs = set(session.execute(select(Topic.slug)).scalars())

        assert written == 2
        assert set(links) == {"department-of-defense", "anduril-industries"}
        assert slugs == {"department-of-defense", "anduril-industries"}
        assert links["department-of-defense"].occurrences == 4
        assert links["department-of-defense"].is_primary is True
        assert links["department-of-defense"].confidence == pytest.approx(0.98)

    def test_refresh_replaces_previous_links(self, engine) -> None:
        with get_session(engine) as session:
            persist_article_topics(session, "a1", [DOD, ANDURIL])
            persist_article_topics(session, "a1", [ANDURIL])
            assert set(_links(session, "a1")) == {"anduril-industries"}

    def test_topics_are_shared_across_articles(self, engine) -> None:
        with get_session(engine) as session:
            persist_article_topics(session, "a1", [DOD])
            persist_article_topics(session, "a2", [DOD, ANDURIL])

            topic_count = len(session.execute(select(Topic.id)).all())
            assert topic_count == 2
            assert set(_links(session, "a1")) == {"department-of-defense"}
            assert set(_links(session, "a2")) == {"department-of-defense", "anduril-industries"}

    def test_duplicate_slugs_keep_first_candidate(self, engine) -> None:
        duplicate = _candidate("department-of-defense", "Department of Defense", confidence=0.5)
        with get_session(engine) as session:
            assert persist_article_topics(session, "a1", [DOD, duplicate]) == 1
            assert _links(session, "a1")["department-of-defense"].confidence == pytest.approx(0.98)

    def test_empty_candidates_clear_links(self, engine) -> None:
        with get_session(engine) as session:
            persist_article_topics(session, "a1", [DOD])
            assert persist_article_topics(session, "a1", [NER_ONLY]) == 0
            assert _links(session, "a1") == {}

    def test_retries_transient_failures(self) -> None:
        session = Mock()
        session.execute.side_effect = [OperationalError("DELETE", {}, Exception("database is locked")), None]
        sleep = Mock()

        assert persist_article_topics(session, "a1", [], sleep=sleep) == 0
        sleep.assert_called_once()
        session.commit.assert_called_once()


class TestCleanupOrphanTopics:
    def test_removes_unlinked_and_non_taxonomy_topics(self, engine) -> None:
        with get_session(engine) as session:
            persist_article_topics(session, "a1", [DOD])
            session.execute(
                insert(Topic),
                [
                    {"slug": "anduril-industries", "label": "Anduril Industries", "topic_type": "company"},
                    {"slug": "vendorx-systems", "label": "VendorX Systems", "topic_type": "company"},
                ],
            )
            stale_id = session.execute(select(Topic.id).where(Topic.slug == "vendorx-systems")).scalar_one()
            session.execute(
                insert(ArticleTopic).values(
                    article_id="a1", topic_id=stale_id, confidence=0.6, occurrences=1, is_primary=False
                )
            )
            session.commit()

            removed = cleanup_orphan_topics(session)

            assert removed == 2
            assert session.execute(select(Topic.slug)).scalars().all() == ["department-of-defense"]
            assert set(_links(session, "a1")) == {"department-of-defense"}

    def test_nothing_to_remove(self, engine) -> None:
        with get_session(engine) as session:
            persist_article_topics(session, "a1", [DOD])
            assert cleanup_orphan_topics(session) == 0
