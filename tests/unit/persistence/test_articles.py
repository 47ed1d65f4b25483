"""Tests for persistence.articles against SQLite."""

from datetime import datetime, timezone
from unittest.mock import Mock, patch

import pytest
from sqlalchemy import create_engine, func, select, text

from classify_articles.classify_articles import classify_article
from classify_articles.models import ArticleTags
from common.hashing import generate_article_id
from extract_content.models import STATUS_FAILED, STATUS_FETCHED, ExtractedContent
from ingest_articles.models import PulledItem, PullResult
from persistence.articles import (
    ArticleStore,
    SchemaCapabilities,
    build_article_row,
    legacy_row,
)
from persistence.connection import get_session
from persistence.models import TAG_COLUMNS, Base, IngestedArticle, NewsSource

FETCHED_AT = datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'articles.db'}")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def legacy_engine(engine):
    with engine.begin() as conn:
        for column in TAG_COLUMNS:
            conn.execute(text(f"ALTER TABLE ingested_articles DROP COLUMN {column}"))
    return engine


def _item(url: str, title: str = "Navy awards hypersonic missile contract", source_id: str = "defense-news"):
    return PulledItem(
        source_id=source_id,
        source_name="Defense News",
        source_category="journalism",
        source_badge="Reporting",
        source_weight=5,
        title=title,
        url=url,
        summary="The Navy awarded a contract for hypersonic missile work.",
        published_at=datetime(2024, 3, 10, 9, 0, tzinfo=timezone.utc),
        guid=url,
    )


def _result(*items) -> PullResult:
    return PullResult(fetched_at=FETCHED_AT, source_count=2, articles=list(items))


def _article_count(session) -> int:
    return session.execute(select(func.count()).select_from(IngestedArticle)).scalar_one()


class TestBuildArticleRow:
    def test_id_derives_from_canonical_url(self) -> None:
        row = build_article_row(_item("https://Example.com/story?utm_source=rss&id=4"), FETCHED_AT)

        assert row["canonical_url"] == "https://example.com/story?id=4"
        assert row["id"] == generate_article_id("https://example.com/story?id=4")
        assert row["article_url"] == "https://Example.com/story?utm_source=rss&id=4"
        assert "track" not in row

    def test_includes_tag_values(self) -> None:
        tags = ArticleTags(mission_tags=["Contracts"], track="programs", high_impact=True)
        row = build_article_row(_item("https://example.com/a"), FETCHED_AT, tags)

        assert row["mission_tags"] == ["Contracts"]
        assert row["high_impact"] is True

    def test_legacy_row_drops_tag_columns(self) -> None:
        row = build_article_row(_item("https://example.com/a"), FETCHED_AT, ArticleTags())
        assert not set(TAG_COLUMNS) & set(legacy_row(row))
        assert legacy_row(row)["title"] == row["title"]


class TestPersistPullResult:
    def test_writes_sources_and_tagged_articles(self, engine) -> None:
        item_a = _item("https://example.com/a")
        item_b = _item("https://example.com/b", title="Army tests counter drone laser", source_id="breaking-defense")

        with get_session(engine) as session:
            result = ArticleStore(session).persist_pull_result(_result(item_a, item_b))

            assert result.upserted_source_count == 2
            assert result.upserted_article_count == 2
            assert result.used_legacy_schema is False

            stored = session.execute(
                select(IngestedArticle.id, IngestedArticle.track, IngestedArticle.mission_tags)
                .where(IngestedArticle.canonical_url == "https://example.com/a")
            ).one()
            assert stored.id == generate_article_id("https://example.com/a")
            assert stored.track == classify_article(item_a).track
            assert stored.mission_tags == classify_article(item_a).mission_tags

            source_ids = session.execute(select(NewsSource.id).order_by(NewsSource.id)).scalars().all()
            assert source_ids == ["breaking-defense", "defense-news"]

    def test_rerun_is_idempotent(self, engine) -> None:
        with get_session(engine) as session:
            store = ArticleStore(session)
            store.persist_pull_result(_result(_item("https://example.com/a"), _item("https://example.com/b")))
            ids_before = session.execute(select(IngestedArticle.id).order_by(IngestedArticle.id)).scalars().all()

            store.persist_pull_result(
                _result(_item("https://example.com/a", title="Updated headline"), _item("https://example.com/b"))
            )
            ids_after = session.execute(select(IngestedArticle.id).order_by(IngestedArticle.id)).scalars().all()

            assert ids_after == ids_before
            assert _article_count(session) == 2
            title = session.execute(
                select(IngestedArticle.title).where(IngestedArticle.canonical_url == "https://example.com/a")
            ).scalar_one()
            assert title == "Updated headline"

    def test_same_canonical_url_written_once(self, engine) -> None:
        with get_session(engine) as session:
            result = ArticleStore(session).persist_pull_result(
                _result(_item("https://example.com/a?utm_medium=rss"), _item("https://example.com/a"))
            )
            assert result.upserted_article_count == 1
            assert _article_count(session) == 1

    def test_precomputed_tags_are_used(self, engine) -> None:
        item = _item("https://example.com/a")
        tags = ArticleTags(domain_tags=["Space"], track="ops", content_type="operations")

        with get_session(engine) as session:
            ArticleStore(session).persist_pull_result(_result(item), tags_by_url={item.url: tags})
            stored = session.execute(select(IngestedArticle.track, IngestedArticle.domain_tags)).one()

        assert stored.track == "ops"
        assert stored.domain_tags == ["Space"]

    def test_unknown_sources_are_skipped(self, engine) -> None:
        with get_session(engine) as session:
            count = ArticleStore(session).upsert_sources(["defense-news", "not-a-feed", "defense-news"], FETCHED_AT)
            assert count == 1
            assert session.execute(select(NewsSource.id)).scalars().all() == ["defense-news"]

    def test_empty_result(self, engine) -> None:
        with get_session(engine) as session:
            result = ArticleStore(session).persist_pull_result(_result())
        assert result.upserted_source_count == 0
        assert result.upserted_article_count == 0
        assert result.used_legacy_schema is False


class TestLegacySchemaFallback:
    def test_falls_back_to_legacy_rows(self, legacy_engine) -> None:
        with get_session(legacy_engine) as session:
            store = ArticleStore(session, sleep=Mock())
            result = store.persist_pull_result(_result(_item("https://example.com/a"), _item("https://example.com/b")))

            assert result.used_legacy_schema is True
            assert result.upserted_article_count == 2
            assert store.supports_tag_columns is False
            assert _article_count(session) == 2

    def test_later_chunks_skip_the_full_shape(self, legacy_engine) -> None:
        original = ArticleStore._upsert_article_rows
        items = [_item(f"https://example.com/{n}") for n in range(3)]

        with patch.object(ArticleStore, "_upsert_article_rows", autospec=True, side_effect=original) as spy:
            with get_session(legacy_engine) as session:
                ArticleStore(session, chunk_size=1, sleep=Mock()).persist_pull_result(_result(*items))
                assert _article_count(session) == 3

        shapes = ["track" in call.args[1][0] for call in spy.call_args_list]
        assert shapes == [True, False, False, False]

    def test_capabilities_are_shared_between_stores(self, legacy_engine) -> None:
        capabilities = SchemaCapabilities()
        with get_session(legacy_engine) as session:
            ArticleStore(session, capabilities=capabilities).persist_pull_result(_result(_item("https://example.com/a")))

        with get_session(legacy_engine) as session:
            store = ArticleStore(session, capabilities=capabilities)
            assert store.supports_tag_columns is False
            assert store.update_tags(generate_article_id("https://example.com/a"), ArticleTags()) is False

    def test_update_tags_detects_missing_columns(self, legacy_engine) -> None:
        with get_session(legacy_engine) as session:
            store = ArticleStore(session)
            assert store.update_tags("0123456789abcdef", ArticleTags()) is False
            assert store.supports_tag_columns is False


class TestUpdateContent:
    def _stored_id(self, session) -> str:
        ArticleStore(session).persist_pull_result(_result(_item("https://example.com/a")))
        return generate_article_id("https://example.com/a")

    def test_fetched_content_is_written(self, engine) -> None:
        content = ExtractedContent(
            status=STATUS_FETCHED,
            fetched_at=FETCHED_AT,
            full_text="Body text",
            excerpt="Body text",
            lead_image_url="https://example.com/lead.jpg",
            word_count=2,
            reading_minutes=1,
        )
        with get_session(engine) as session:
            article_id = self._stored_id(session)
            ArticleStore(session).update_content(article_id, content)
            stored = session.get(IngestedArticle, article_id)

        assert stored.content_fetch_status == STATUS_FETCHED
        assert stored.full_text == "Body text"
        assert stored.lead_image_url == "https://example.com/lead.jpg"
        assert stored.word_count == 2
        assert stored.content_fetch_error is None

    def test_failed_content_keeps_existing_text(self, engine) -> None:
        fetched = ExtractedContent(status=STATUS_FETCHED, fetched_at=FETCHED_AT, full_text="Old body", word_count=2)
        failed = ExtractedContent(status=STATUS_FAILED, fetched_at=FETCHED_AT, error="Article request failed with status 503.")

        with get_session(engine) as session:
            article_id = self._stored_id(session)
            store = ArticleStore(session)
            store.update_content(article_id, fetched)
            store.update_content(article_id, failed)
            session.expire_all()
            stored = session.get(IngestedArticle, article_id)

        assert stored.content_fetch_status == STATUS_FAILED
        assert stored.content_fetch_error == "Article request failed with status 503."
        assert stored.full_text == "Old body"


class TestUpdateTags:
    def test_writes_tags(self, engine) -> None:
        tags = ArticleTags(mission_tags=["Readiness"], technology_tags=["Autonomy"], track="ops", content_type="operations")
        with get_session(engine) as session:
            ArticleStore(session).persist_pull_result(_result(_item("https://example.com/a")))
            article_id = generate_article_id("https://example.com/a")
            store = ArticleStore(session)

            assert store.update_tags(article_id, tags) is True
            assert store.supports_tag_columns is True
            stored = session.execute(
                select(IngestedArticle.track, IngestedArticle.technology_tags).where(IngestedArticle.id == article_id)
            ).one()

        assert stored.track == "ops"
        assert stored.technology_tags == ["Autonomy"]
