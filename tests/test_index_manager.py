"""인덱스 lifecycle 테스트."""

from __future__ import annotations

import pytest
from elasticsearch import BadRequestError, ConnectionError as ESConnectionError

from core.errors import MissingArgumentError
from searchindex.index_manager import IndexManager

from conftest import already_exists, api_error, not_found


@pytest.fixture
def manager(mock_es):
    return IndexManager(mock_es, "test-index")


class TestHasIndex:
    def test_uses_default_index(self, manager, mock_es):
        mock_es.indices.exists.return_value = True

        assert manager.has_index() is True
        mock_es.indices.exists.assert_called_once_with(index="test-index")

    def test_missing_index_is_false(self, manager, mock_es):
        mock_es.indices.exists.return_value = False
        assert manager.has_index("other") is False

    def test_no_index_name(self, mock_es):
        with pytest.raises(MissingArgumentError):
            IndexManager(mock_es, "").has_index()


class TestCreateIndex:
    def test_creates(self, manager, mock_es):
        assert manager.create_index() is True
        mock_es.indices.create.assert_called_once_with(index="test-index")

    def test_already_exists_is_success(self, manager, mock_es):
        mock_es.indices.create.side_effect = already_exists()
        assert manager.create_index() is False

    def test_other_bad_request_propagates(self, manager, mock_es):
        mock_es.indices.create.side_effect = api_error(
            BadRequestError, 400, "invalid_index_name_exception"
        )
        with pytest.raises(BadRequestError):
            manager.create_index("Bad Name")


class TestEnsureIndex:
    def test_existing_index_not_recreated(self, manager, mock_es):
        mock_es.indices.exists.return_value = True

        assert manager.ensure_index() == "test-index"
        mock_es.indices.create.assert_not_called()

    def test_repeated_ensure_is_idempotent(self, fake_es):
        manager = IndexManager(fake_es, "test-index")

        manager.ensure_index()
        manager.ensure_index()

        assert list(fake_es.docs) == ["test-index"]

    def test_concurrent_creator_race(self, manager, mock_es):
        # 존재 확인과 생성 사이에 다른 호출자가 먼저 생성한 경우
        mock_es.indices.exists.return_value = False
        mock_es.indices.create.side_effect = already_exists()

        assert manager.ensure_index() == "test-index"

    def test_existence_check_failure_falls_back_to_create(self, manager, mock_es):
        mock_es.indices.exists.side_effect = ESConnectionError("timeout")

        assert manager.ensure_index() == "test-index"
        mock_es.indices.create.assert_called_once_with(index="test-index")

    def test_create_failure_after_check_failure_propagates(self, manager, mock_es):
        mock_es.indices.exists.side_effect = ESConnectionError("timeout")
        mock_es.indices.create.side_effect = ESConnectionError("still down")

        with pytest.raises(ESConnectionError):
            manager.ensure_index()


class TestDeleteIndex:
    def test_deletes(self, manager, mock_es):
        assert manager.delete_index() is True
        mock_es.indices.delete.assert_called_once_with(index="test-index")

    def test_missing_index_is_false(self, manager, mock_es):
        mock_es.indices.delete.side_effect = not_found()
        assert manager.delete_index() is False


class TestIndexInfo:
    def test_reads_primary_stats(self, manager, mock_es):
        mock_es.indices.exists.return_value = True
        mock_es.indices.stats.return_value = {
            "indices": {
                "test-index": {
                    "primaries": {"docs": {"count": 3}, "store": {"size_in_bytes": 2048}}
                }
            }
        }

        info = manager.get_index_info()

        assert info.exists is True
        assert info.doc_count == 3
        assert info.size_bytes == 2048

    def test_missing_index(self, manager, mock_es):
        mock_es.indices.exists.return_value = False

        info = manager.get_index_info()

        assert info.exists is False
        mock_es.indices.stats.assert_not_called()
