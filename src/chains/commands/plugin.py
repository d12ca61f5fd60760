"""
검색 플러그인.

명령별 stage pipeline을 만들고 CommandRegistry에 등록합니다.

    create-index  = ensure_index
    has-index     = has_index
    delete-index  = ensure_index → delete_index
    save          = populate_request → populate_body → save_record
    load          = populate_request → load_record
    search        = populate_search_request → populate_search_body → do_search → reconcile
    remove        = populate_request → remove_record
    entity-save   = (EntityCommandAdapter, prior: store save)
    entity-remove = (EntityCommandAdapter, prior: store remove)

ES 클라이언트와 store 핸들은 외부에서 만들어 주입합니다.
"""

from __future__ import annotations

import logging
from typing import Any

from elasticsearch import Elasticsearch

from chains.commands.registry import CommandRegistry
from chains.core.pipeline import Pipeline, Stage
from chains.core.state import CommandState
from chains.entity.adapter import EntityCommandAdapter
from chains.reconcile.engine import ReconciliationEngine
from chains.runnables.logging import command_record, tap
from core.errors import DocumentNotFoundError
from core.protocols import RecordReaderProtocol
from core.types import LoadResult
from schemas.command import CommandKind, LogicalCommand
from searchindex.config import SearchOptions
from searchindex.index_manager import IndexManager
from searchindex.repository import RecordRepository
from searchindex.request import build_request
from searchindex.search import normalize_search_body, scope_to_type

logger = logging.getLogger(__name__)


class SearchPlugin:
    """
    검색 인덱스 façade.

    entity 명령을 가로채려면 registry에 store의 entity handler가 먼저
    등록되어 있어야 합니다 (register_entity_store).

    Example:
        >>> registry = CommandRegistry()
        >>> register_entity_store(registry, store)
        >>> plugin = SearchPlugin(es, store, options, registry)
        >>> plugin.init()
        >>> plugin.act(kind="search", query="engineer")
    """

    name = "search"

    def __init__(
        self,
        es: Elasticsearch,
        reader: RecordReaderProtocol,
        options: SearchOptions | None = None,
        registry: CommandRegistry | None = None,
    ):
        self.es = es
        self.options = options or SearchOptions()
        self.registry = registry or CommandRegistry()

        self.indices = IndexManager(es, self.options.index)
        self.records = RecordRepository(es, self.options)
        self.reconciler = ReconciliationEngine(reader, self.options)
        self.entities = EntityCommandAdapter(self.options, self.registry.act)

        self.pipelines = self._build_pipelines()
        self._register()

    @property
    def native(self) -> Elasticsearch:
        """주입된 Elasticsearch 클라이언트."""
        return self.es

    def init(self) -> str:
        """시작 시 기본 인덱스 보장."""
        return self.registry.act(kind=CommandKind.INIT)

    def act(self, command: LogicalCommand | None = None, **kwargs: Any) -> Any:
        return self.registry.act(command, **kwargs)

    # =========================================================================
    # Registration
    # =========================================================================

    def _pipeline(self, kind: CommandKind, *stages: Stage) -> Pipeline:
        if self.options.trace_path is not None:
            stages = (*stages, tap(self.options.trace_path, command_record))
        return Pipeline(kind.value, *stages)

    def _build_pipelines(self) -> dict[CommandKind, Pipeline]:
        return {
            CommandKind.INIT: self._pipeline(CommandKind.INIT, self._ensure_index),
            CommandKind.CREATE_INDEX: self._pipeline(CommandKind.CREATE_INDEX, self._ensure_index),
            CommandKind.HAS_INDEX: self._pipeline(CommandKind.HAS_INDEX, self._has_index),
            CommandKind.DELETE_INDEX: self._pipeline(
                CommandKind.DELETE_INDEX, self._ensure_index, self._delete_index
            ),
            CommandKind.SAVE: self._pipeline(
                CommandKind.SAVE, self._populate_request, self._populate_body, self._save_record
            ),
            CommandKind.LOAD: self._pipeline(
                CommandKind.LOAD, self._populate_request, self._load_record
            ),
            CommandKind.SEARCH: self._pipeline(
                CommandKind.SEARCH,
                self._populate_search_request,
                self._populate_search_body,
                self._do_search,
                self._reconcile,
            ),
            CommandKind.REMOVE: self._pipeline(
                CommandKind.REMOVE, self._populate_request, self._remove_record
            ),
        }

    def _register(self) -> None:
        for kind, pipeline in self.pipelines.items():
            self.registry.add(kind, pipeline.invoke)

        for kind, handler in (
            (CommandKind.ENTITY_SAVE, self.entities.save),
            (CommandKind.ENTITY_REMOVE, self.entities.remove),
        ):
            if kind in self.registry:
                self.registry.wrap(kind, handler, when=self.entities.intercepts)
            else:
                logger.warning(f"'{kind.value}' prior handler가 없어 entity 명령을 가로채지 않습니다.")

    # =========================================================================
    # Index stages
    # =========================================================================

    def _ensure_index(self, state: CommandState) -> CommandState:
        state["result"] = self.indices.ensure_index(state["command"].index)
        return state

    def _has_index(self, state: CommandState) -> CommandState:
        state["result"] = self.indices.has_index(state["command"].index)
        return state

    def _delete_index(self, state: CommandState) -> CommandState:
        state["result"] = self.indices.delete_index(state["command"].index)
        return state

    # =========================================================================
    # Request stages
    # =========================================================================

    def _populate_request(self, state: CommandState) -> CommandState:
        state["request"] = build_request(state["command"], self.options)
        return state

    def _populate_body(self, state: CommandState) -> CommandState:
        state["request"].body = dict(state["command"].data or {})
        return state

    def _populate_search_request(self, state: CommandState) -> CommandState:
        state["request"] = build_request(state["command"], self.options, require_type=False)
        return state

    def _populate_search_body(self, state: CommandState) -> CommandState:
        command = state["command"]
        request = state["request"]
        body = normalize_search_body(command.query, command.search)
        request.body = scope_to_type(body, self.options.type_field, request.type)
        return state

    # =========================================================================
    # Record stages
    # =========================================================================

    def _save_record(self, state: CommandState) -> CommandState:
        request = state["request"]
        state["result"] = self.records.save(request, request.body or {})
        return state

    def _load_record(self, state: CommandState) -> CommandState:
        request = state["request"]
        try:
            state["result"] = self.records.load(request)
        except DocumentNotFoundError:
            state["result"] = LoadResult(exists=False, id=request.id)
        return state

    def _remove_record(self, state: CommandState) -> CommandState:
        state["result"] = self.records.remove(state["request"])
        return state

    def _do_search(self, state: CommandState) -> CommandState:
        state["results"] = self.records.search(state["request"])
        return state

    def _reconcile(self, state: CommandState) -> CommandState:
        state["result"] = self.reconciler.reconcile(state["results"])
        return state
