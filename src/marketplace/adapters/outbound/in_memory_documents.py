from __future__ import annotations

import copy
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping, Sequence

from returns.result import Failure, Result, Success

from marketplace.core.domain.model.errors import MarketplaceError, PersistenceError
from marketplace.core.domain.model.order import now_iso
from marketplace.core.ports.outbound.documents import (
    Document,
    DocumentName,
    DocumentStore,
)


@dataclass
class InMemoryDocumentStore(DocumentStore):
    fail_writes: bool = False
    writes: int = 0
    _store: dict[DocumentName, Document] = field(default_factory=dict)
    _lock: threading.RLock = field(default_factory=threading.RLock)

    def load(self, name: DocumentName) -> Document:
        document = self._store.get(name)
        if document is None:
            return Document(updated_at=None, items=())
        # callers get copies so they cannot mutate stored state
        return Document(document.updated_at, copy.deepcopy(document.items))

    def save(
        self, name: DocumentName, items: Sequence[Mapping[str, Any]]
    ) -> Result[Document, MarketplaceError]:
        if self.fail_writes:
            return Failure(PersistenceError(message=f"failed to write {name.value}"))
        document = Document(updated_at=now_iso(), items=copy.deepcopy(tuple(items)))
        self._store[name] = document
        self.writes += 1
        return Success(document)

    def ensure(
        self, name: DocumentName, items: Sequence[Mapping[str, Any]]
    ) -> Document:
        if name not in self._store:
            self.save(name, items)
        return self.load(name)

    @contextmanager
    def lock(self, name: DocumentName) -> Iterator[None]:
        with self._lock:
            yield
