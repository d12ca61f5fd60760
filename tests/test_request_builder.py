"""명령 -> wire request 변환, 검색 body 정규화, 문서 변환 테스트."""

from __future__ import annotations

import re

import pytest

from core.errors import MissingTypeError
from schemas.command import CommandKind, LogicalCommand
from searchindex.config import SearchOptions
from searchindex.documents import matches_skip_filter, project_fields, to_index_document
from searchindex.request import build_request
from searchindex.search import normalize_search_body, scope_to_type


# ========================================================================
# build_request
# ========================================================================


class TestBuildRequest:
    def test_explicit_type_and_default_index(self, options):
        command = LogicalCommand(kind="load", type="foo", id="e1")

        request = build_request(command, options)

        assert request.index == "test-index"
        assert request.type == "foo"
        assert request.id == "e1"
        assert request.refresh is False

    def test_type_derived_from_data(self, options):
        command = LogicalCommand(kind="save", data={"entity$": "bar", "name": "x"})
        assert build_request(command, options).type == "bar"

    def test_explicit_type_wins(self, options):
        command = LogicalCommand(kind="save", type="foo", data={"entity$": "bar"})
        assert build_request(command, options).type == "foo"

    def test_missing_type(self, options):
        with pytest.raises(MissingTypeError, match="entity\\$"):
            build_request(LogicalCommand(kind="save", data={"name": "x"}), options)

    def test_type_optional_for_search(self, options):
        request = build_request(LogicalCommand(kind="search"), options, require_type=False)
        assert request.type is None

    def test_explicit_index_and_global_refresh(self, connection):
        opts = SearchOptions(connection=connection, refresh_on_save=True)
        command = LogicalCommand(kind="remove", index="other", type="foo", id="1")

        request = build_request(command, opts)

        assert request.index == "other"
        assert request.refresh is True

    def test_deterministic(self, options):
        command = LogicalCommand(kind="load", type="foo", id="e1")
        assert build_request(command, options) == build_request(command, options)


class TestCommandSchema:
    def test_role_and_cmd(self):
        assert CommandKind.ENTITY_SAVE.role == "entity"
        assert CommandKind.ENTITY_SAVE.cmd == "save"
        assert CommandKind.HAS_INDEX.role == "search"
        assert CommandKind.HAS_INDEX.cmd == "has-index"

    def test_unknown_field_rejected(self):
        with pytest.raises(ValueError):
            LogicalCommand(kind="save", typo="foo")


# ========================================================================
# Search body
# ========================================================================


class TestNormalizeSearchBody:
    def test_structured_search_passthrough(self):
        search = {"query": {"term": {"jobTitle": "engineer"}}, "size": 5}

        body = normalize_search_body(query="ignored", search=search)

        assert body == search
        assert body is not search

    def test_free_text(self):
        assert normalize_search_body(query="engineer") == {
            "query": {"query_string": {"query": "engineer"}}
        }

    def test_match_all_fallback(self):
        expected = {"query": {"match_all": {}}}
        assert normalize_search_body() == expected
        assert normalize_search_body(query="   ") == expected

    def test_scope_to_type_wraps_query(self):
        body = scope_to_type({"query": {"match_all": {}}, "size": 3}, "entity$", "foo")

        assert body["size"] == 3
        bool_query = body["query"]["bool"]
        assert bool_query["must"] == [{"match_all": {}}]
        should = bool_query["filter"][0]["bool"]["should"]
        assert {"term": {"entity$": "foo"}} in should
        assert {"term": {"entity$.keyword": "foo"}} in should

    def test_scope_without_type_is_noop(self):
        body = {"query": {"match_all": {}}}
        assert scope_to_type(body, "entity$", None) is body


# ========================================================================
# Documents
# ========================================================================


class TestProjectFields:
    def test_keeps_id_and_allowed_only(self):
        data = {"id": "e1", "jobTitle": "Engineer", "secret": "x"}
        assert project_fields(data, ["jobTitle"]) == {"id": "e1", "jobTitle": "Engineer"}

    def test_absent_fields_not_added(self):
        assert project_fields({"id": "e1"}, ["jobTitle"]) == {"id": "e1"}


class TestToIndexDocument:
    def test_sets_id_and_type(self):
        doc = to_index_document(
            {"jobTitle": "Engineer", "_id": "e1", "note": None},
            doc_id="e1",
            entity_type="foo",
            type_field="entity$",
        )
        assert doc == {"jobTitle": "Engineer", "id": "e1", "entity$": "foo"}


class TestSkipFilter:
    def test_all_predicates_must_match(self):
        predicates = {"status": "draft", "owner": "bot"}

        assert matches_skip_filter({"status": "draft", "owner": "bot"}, predicates)
        assert not matches_skip_filter({"status": "draft", "owner": "alice"}, predicates)

    def test_regex_predicate(self):
        assert matches_skip_filter({"email": "ci@test.local"}, {"email": r"@test\.local$"})
        assert matches_skip_filter({"name": "tmp-1"}, {"name": re.compile(r"^tmp-")})

    def test_invalid_regex_falls_back_to_equality(self):
        assert matches_skip_filter({"lang": "C++"}, {"lang": "C++"})
        assert not matches_skip_filter({"lang": "Python"}, {"lang": "C++"})

    def test_missing_field_never_matches(self):
        assert not matches_skip_filter({"other": 1}, {"status": "draft"})

    def test_empty_predicates(self):
        assert not matches_skip_filter({"status": "draft"}, {})
        assert not matches_skip_filter({"status": "draft"}, None)
