"""Command pipeline 계층.

stage pipeline, 명령 등록/디스패치, 검색 결과 reconciliation, entity 명령 adapter.
"""
