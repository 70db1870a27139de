"""Tests for QueryEngine: filters, ordering, pagination and projection."""

from datetime import timedelta

import pytest
from sqlalchemy.exc import OperationalError

from docshelf.core.errors import StorageFailure
from docshelf.db.repositories.user_repository import UserRepository
from docshelf.domains.documents.entities import CategoryScope, SearchCriteria
from docshelf.domains.documents.query_engine import QueryEngine

from tests.conftest import BASE_TIME
from tests.helpers import tag_id_of


async def search_titles(session, **kwargs):
    page = await QueryEngine(session).search(SearchCriteria(**kwargs))
    return [doc.title for doc in page.items]


class TestTagFilter:

    async def test_scenario_go_guide(self, session, make_document):
        go_guide = await make_document("Go Guide", tags=["go", "tutorial"])
        await make_document("Rust Intro", tags=["rust"])

        go_id = await tag_id_of(session, "go")
        page = await QueryEngine(session).search(SearchCriteria(tag_ids={go_id}))

        assert [doc.id for doc in page.items] == [go_guide]
        assert page.total_count == 1

    async def test_matches_any_of_requested_tags(self, session, make_document):
        await make_document("Go Guide", tags=["go"])
        await make_document("Rust Intro", tags=["rust"])
        await make_document("Cooking", tags=["food"])

        requested = {await tag_id_of(session, "go"), await tag_id_of(session, "rust")}
        page = await QueryEngine(session).search(SearchCriteria(tag_ids=requested))

        assert sorted(doc.title for doc in page.items) == ["Go Guide", "Rust Intro"]
        for doc in page.items:
            assert {"go", "rust"} & set(doc.tag_names)

    async def test_document_with_several_matching_tags_listed_once(self, session, make_document):
        await make_document("Polyglot", tags=["go", "rust"])

        requested = {await tag_id_of(session, "go"), await tag_id_of(session, "rust")}
        page = await QueryEngine(session).search(SearchCriteria(tag_ids=requested))

        assert page.total_count == 1
        assert [doc.title for doc in page.items] == ["Polyglot"]

    async def test_unknown_tag_id_matches_nothing(self, session, make_document):
        await make_document("Go Guide", tags=["go"])
        assert await search_titles(session, tag_ids={9999}) == []


class TestTextFilter:

    async def test_matches_title_or_content_case_insensitive(self, session, make_document):
        await make_document("Python Tips", content="nothing here")
        await make_document("Misc", content="Learn PYTHON fast")
        await make_document("Other", content="unrelated")

        titles = await search_titles(session, query="  python ")

        assert sorted(titles) == ["Misc", "Python Tips"]

    async def test_case_folding_beyond_ascii(self, session, make_document):
        await make_document("Привет мир", content="Ärger im Büro")
        await make_document("Other", content="unrelated")

        assert await search_titles(session, query="привет") == ["Привет мир"]
        assert await search_titles(session, query="ärger") == ["Привет мир"]

    @pytest.mark.parametrize("query", ["ПРИВЕТ", "пРиВеТ", "BÜRO"])
    async def test_upper_case_non_ascii_query(self, session, make_document, query):
        await make_document("привет мир", content="ärger im büro")

        assert await search_titles(session, query=query) == ["привет мир"]

    @pytest.mark.parametrize("query", [None, "", "   "])
    async def test_blank_query_is_noop(self, session, make_document, query):
        await make_document("One")
        await make_document("Two")

        with_blank = await QueryEngine(session).search(SearchCriteria(query=query))
        without = await QueryEngine(session).search(SearchCriteria())

        assert [d.id for d in with_blank.items] == [d.id for d in without.items]
        assert with_blank.total_count == without.total_count == 2

    async def test_like_wildcards_are_literal(self, session, make_document):
        await make_document("100% coverage")
        await make_document("1000 coverage")

        assert await search_titles(session, query="100%") == ["100% coverage"]
        assert await search_titles(session, query="_") == []


class TestCategoryFilter:

    async def test_specific_category(self, session, make_document, make_category):
        work = await make_category("Work")
        home = await make_category("Home")
        await make_document("Report", category_id=work)
        await make_document("Groceries", category_id=home)
        await make_document("Loose note")

        assert await search_titles(session, category=work) == ["Report"]

    async def test_uncategorized_is_distinct_from_any(self, session, make_document, make_category):
        work = await make_category("Work")
        await make_document("Report", category_id=work)
        await make_document("Loose note")

        assert await search_titles(session, category=CategoryScope.UNCATEGORIZED) == ["Loose note"]
        assert sorted(await search_titles(session, category=CategoryScope.ANY)) == ["Loose note", "Report"]

    async def test_filters_combine_with_and(self, session, make_document, make_category):
        work = await make_category("Work")
        await make_document("Go at work", category_id=work, tags=["go"])
        await make_document("Go at home", tags=["go"])
        await make_document("Rust at work", category_id=work, tags=["rust"])

        go_id = await tag_id_of(session, "go")
        titles = await search_titles(session, query="go", category=work, tag_ids={go_id})

        assert titles == ["Go at work"]


class TestOrdering:

    async def test_default_is_updated_at_descending(self, session, make_document):
        await make_document("old", updated_at=BASE_TIME + timedelta(days=1))
        await make_document("newest", updated_at=BASE_TIME + timedelta(days=3))
        await make_document("middle", updated_at=BASE_TIME + timedelta(days=2))

        assert await search_titles(session) == ["newest", "middle", "old"]

    @pytest.mark.parametrize("sort_by", ["relevance", "updatedAt", None])
    async def test_unrecognized_key_falls_back_even_when_ascending(self, session, make_document, sort_by):
        await make_document("old", updated_at=BASE_TIME + timedelta(days=1))
        await make_document("new", updated_at=BASE_TIME + timedelta(days=2))

        titles = await search_titles(session, sort_by=sort_by, sort_descending=False)

        assert titles == ["new", "old"]

    async def test_title_both_directions(self, session, make_document):
        for title in ["Banana", "apple", "Cherry"]:
            await make_document(title)

        ascending = await search_titles(session, sort_by="TITLE", sort_descending=False)
        descending = await search_titles(session, sort_by="title", sort_descending=True)

        assert ascending == sorted(["Banana", "apple", "Cherry"])
        assert descending == list(reversed(ascending))

    async def test_created_at_both_directions(self, session, make_document):
        await make_document("second", created_at=BASE_TIME + timedelta(hours=2))
        await make_document("first", created_at=BASE_TIME + timedelta(hours=1))
        await make_document("third", created_at=BASE_TIME + timedelta(hours=3))

        assert await search_titles(session, sort_by="createdAt", sort_descending=False) == [
            "first", "second", "third"
        ]
        assert await search_titles(session, sort_by="createdat") == ["third", "second", "first"]

    async def test_ties_broken_by_id_ascending(self, session, make_document):
        ids = []
        for title in ["same", "same", "same"]:
            ids.append(await make_document(title, created_at=BASE_TIME, updated_at=BASE_TIME))

        for sort_by in ["title", "createdAt", None]:
            page = await QueryEngine(session).search(SearchCriteria(sort_by=sort_by))
            assert [doc.id for doc in page.items] == sorted(ids)


class TestPagination:

    async def test_twelve_documents_two_pages(self, session, make_document):
        for i in range(12):
            await make_document(f"Doc {i:02d}")

        engine = QueryEngine(session)
        first = await engine.search(SearchCriteria(page_number=1, page_size=10))
        second = await engine.search(SearchCriteria(page_number=2, page_size=10))

        assert len(first.items) == 10
        assert first.total_count == 12
        assert first.has_next_page is True
        assert first.has_previous_page is False

        assert len(second.items) == 2
        assert second.has_next_page is False
        assert second.has_previous_page is True

        seen = [d.id for d in first.items] + [d.id for d in second.items]
        assert len(set(seen)) == 12

    async def test_page_past_the_end_is_empty_but_counted(self, session, make_document):
        for i in range(3):
            await make_document(f"Doc {i}")

        page = await QueryEngine(session).search(SearchCriteria(page_number=5, page_size=2))

        assert page.items == []
        assert page.total_count == 3
        assert page.total_pages == 2

    async def test_total_counts_filtered_set(self, session, make_document):
        for i in range(5):
            await make_document(f"match {i}")
        await make_document("other")

        page = await QueryEngine(session).search(SearchCriteria(query="match", page_size=2))

        assert page.total_count == 5
        assert len(page.items) == 2


class TestProjection:

    async def test_summary_fields(self, session, make_document, make_category):
        work = await make_category("Work")
        long_content = "x" * 200
        document_id = await make_document(
            "Report", content=long_content, category_id=work, tags=["beta", "Alpha"]
        )

        page = await QueryEngine(session).search(SearchCriteria())
        summary = page.items[0]

        assert summary.id == document_id
        assert summary.title == "Report"
        assert summary.content_preview == "x" * 150 + "..."
        assert summary.user_name == "alice"
        assert summary.category_id == work
        assert summary.category_name == "Work"
        assert summary.tag_names == ["Alpha", "beta"]

    async def test_user_name_falls_back_to_email(self, session, make_document):
        anonymous = await UserRepository(session).create("bob@example.com")
        await session.commit()
        await make_document("Untitled", user_id=anonymous.id)

        page = await QueryEngine(session).search(SearchCriteria())

        assert page.items[0].user_name == "bob@example.com"
        assert page.items[0].category_name is None
        assert page.items[0].tag_names == []


async def test_storage_error_surfaces_as_storage_failure(session, monkeypatch):
    async def broken_execute(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    monkeypatch.setattr(session, "execute", broken_execute)

    with pytest.raises(StorageFailure) as exc_info:
        await QueryEngine(session).search(SearchCriteria())
    assert isinstance(exc_info.value.__cause__, OperationalError)
