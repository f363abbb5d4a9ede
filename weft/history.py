"""Recent search queries, most recent first, persisted to a small JSON store."""
import json
import os
import sys
from typing import Dict, List, Optional

from .errors import PersistenceFailure

SEARCH_HISTORY_KEY = "weft_search_history"
MAX_SEARCH_HISTORY = 8


def read_store(path: str) -> Dict:
    if not os.path.exists(path):
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as exc:
        raise PersistenceFailure(f"Could not read {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise PersistenceFailure(f"{path} does not hold a key/value store")
    return data


def write_store(path: str, data: Dict) -> None:
    try:
        dir_name = os.path.dirname(path)
        if dir_name:
            os.makedirs(dir_name, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
    except OSError as exc:
        raise PersistenceFailure(f"Could not write {path}: {exc}") from exc


class SearchHistory:
    """Bounded MRU list of submitted queries.

    With no ``path`` the history is kept in memory only; otherwise the store
    is read on construction.
    Storage problems are reported as warnings and never interrupt searching.
    """

    def __init__(self, path: Optional[str] = None, capacity: int = MAX_SEARCH_HISTORY) -> None:
        self.path = path
        self.capacity = capacity
        self._entries: List[str] = []
        if path:
            self.load()

    def load(self) -> List[str]:
        self._entries = []
        if not self.path:
            return []
        try:
            stored = read_store(self.path).get(SEARCH_HISTORY_KEY)
        except PersistenceFailure as exc:
            print(f"[WARN] Failed to load search history: {exc}", file=sys.stderr)
            return []
        if not isinstance(stored, list) or not all(isinstance(q, str) for q in stored):
            return []
        for query in stored:
            if query.strip() and query not in self._entries:
                self._entries.append(query)
        del self._entries[self.capacity:]
        return self.entries()

    def entries(self) -> List[str]:
        return list(self._entries)

    def add(self, query: str) -> None:
        if not query or not query.strip():
            return
        self._entries = [q for q in self._entries if q != query]
        self._entries.insert(0, query)
        del self._entries[self.capacity:]
        self._save()

    def clear(self) -> None:
        self._entries = []
        self._save()

    def __len__(self) -> int:
        return len(self._entries)

    def _save(self) -> None:
        if not self.path:
            return
        try:
            try:
                store = read_store(self.path)
            except PersistenceFailure:
                # unreadable store is rewritten from scratch
                store = {}
            store[SEARCH_HISTORY_KEY] = list(self._entries)
            write_store(self.path, store)
        except PersistenceFailure as exc:
            print(f"[WARN] Failed to save search history: {exc}", file=sys.stderr)
