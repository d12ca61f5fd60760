"""레코드 save/load/remove/search 테스트."""

from __future__ import annotations

import pytest
from elasticsearch import ConnectionError as ESConnectionError

from core.errors import DocumentNotFoundError, MissingArgumentError, MissingTypeError
from core.types import WireRequest
from searchindex.config import SearchOptions
from searchindex.repository import RecordRepository, parse_total

from conftest import not_found


@pytest.fixture
def repo(mock_es, options):
    return RecordRepository(mock_es, options)


def _request(**kwargs) -> WireRequest:
    return WireRequest(**{"index": "test-index", "type": "foo", **kwargs})


class TestSave:
    def test_indexes_document_with_type_field(self, repo, mock_es):
        mock_es.index.return_value = {"_id": "e1", "result": "created"}
        request = _request(id="e1")

        result = repo.save(request, {"jobTitle": "Engineer"})

        assert result["result"] == "created"
        mock_es.index.assert_called_once_with(
            index="test-index",
            id="e1",
            document={"jobTitle": "Engineer", "id": "e1", "entity$": "foo"},
            refresh=False,
        )
        assert request.body["entity$"] == "foo"

    def test_id_from_data(self, repo, mock_es):
        repo.save(_request(), {"_id": "x9", "name": "n"})

        assert mock_es.index.call_args.kwargs["id"] == "x9"
        assert "_id" not in mock_es.index.call_args.kwargs["document"]

    def test_refresh_waits_for(self, mock_es, connection):
        repo = RecordRepository(mock_es, SearchOptions(connection=connection, refresh_on_save=True))

        repo.save(_request(id="e1", refresh=True), {"name": "n"})

        assert mock_es.index.call_args.kwargs["refresh"] == "wait_for"

    def test_skip_filter_leaves_index_untouched(self, mock_es, connection):
        opts = SearchOptions(connection=connection, filters={"foo": {"status": "draft"}})
        repo = RecordRepository(mock_es, opts)

        result = repo.save(_request(id="e1"), {"status": "draft"})

        assert result == {"_id": "e1", "result": "noop", "skipped": True}
        mock_es.index.assert_not_called()

    def test_partial_filter_match_is_indexed(self, mock_es, connection):
        opts = SearchOptions(
            connection=connection, filters={"foo": {"status": "draft", "owner": "bot"}}
        )
        repo = RecordRepository(mock_es, opts)

        repo.save(_request(id="e1"), {"status": "draft", "owner": "alice"})

        mock_es.index.assert_called_once()

    def test_filter_of_other_type_ignored(self, mock_es, connection):
        opts = SearchOptions(connection=connection, filters={"bar": {"status": "draft"}})
        repo = RecordRepository(mock_es, opts)

        repo.save(_request(id="e1"), {"status": "draft"})

        mock_es.index.assert_called_once()

    def test_missing_type(self, repo):
        with pytest.raises(MissingTypeError):
            repo.save(_request(type=None), {"name": "n"})


class TestLoad:
    def test_found(self, repo, mock_es):
        mock_es.get.return_value = {"_id": "e1", "found": True, "_source": {"jobTitle": "Engineer"}}

        result = repo.load(_request(id="e1"))

        assert result.exists is True
        assert result.source == {"jobTitle": "Engineer"}

    def test_not_found_is_distinct_error(self, repo, mock_es):
        mock_es.get.side_effect = not_found()

        with pytest.raises(DocumentNotFoundError) as exc_info:
            repo.load(_request(id="nope"))

        assert exc_info.value.doc_id == "nope"

    def test_transport_failure_propagates(self, repo, mock_es):
        mock_es.get.side_effect = ESConnectionError("down")

        with pytest.raises(ESConnectionError):
            repo.load(_request(id="e1"))

    def test_requires_id(self, repo):
        with pytest.raises(MissingArgumentError):
            repo.load(_request())


class TestRemove:
    def test_deletes(self, repo, mock_es):
        mock_es.delete.return_value = {"_id": "e1", "result": "deleted"}
        assert repo.remove(_request(id="e1"))["result"] == "deleted"

    def test_not_found_is_success(self, repo, mock_es):
        mock_es.delete.side_effect = not_found()
        assert repo.remove(_request(id="gone")) == {"_id": "gone", "result": "not_found"}

    def test_other_errors_propagate(self, repo, mock_es):
        mock_es.delete.side_effect = ESConnectionError("down")

        with pytest.raises(ESConnectionError):
            repo.remove(_request(id="e1"))


class TestSearch:
    def test_parses_hits(self, repo, mock_es):
        mock_es.search.return_value = {
            "hits": {
                "total": {"value": 2, "relation": "eq"},
                "hits": [
                    {"_id": "a", "_index": "test-index", "_score": 2.0,
                     "_source": {"id": "a", "entity$": "foo"}},
                    {"_id": "c", "_index": "test-index", "_score": 1.0,
                     "_source": {"id": "c", "entity$": "bar"}},
                ],
            }
        }
        request = _request(type=None, body={"query": {"match_all": {}}})

        results = repo.search(request)

        assert [(h.id, h.type, h.score) for h in results.hits] == [("a", "foo", 2.0), ("c", "bar", 1.0)]
        assert results.total == 2
        mock_es.search.assert_called_once_with(index="test-index", body={"query": {"match_all": {}}})

    def test_parse_total(self):
        assert parse_total({"value": 7, "relation": "eq"}) == 7
        assert parse_total(4) == 4
        assert parse_total(None) == 0
