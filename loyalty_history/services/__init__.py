"""
Business logic services for the loyalty history service.
"""
from .record_store import RecordStore
from .history_merge import HistoryKind, MergedHistoryEntry, merge_and_sort
from .mutations import HistoryTable, UpdateStatement, DeleteStatement, build_update, build_delete
from .history_service import HistoryService

__all__ = [
    'RecordStore',
    'HistoryKind',
    'MergedHistoryEntry',
    'merge_and_sort',
    'HistoryTable',
    'UpdateStatement',
    'DeleteStatement',
    'build_update',
    'build_delete',
    'HistoryService',
]
