from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator, Mapping, Sequence

from returns.result import Failure, Result, Success

from marketplace.core.domain.model.errors import MarketplaceError, PersistenceError
from marketplace.core.domain.model.order import now_iso, to_iso
from marketplace.core.ports.outbound.documents import (
    Document,
    DocumentName,
    DocumentStore,
)

logger = logging.getLogger(__name__)


@dataclass
class JsonFileDocumentStore(DocumentStore):
    """One pretty-printed JSON file per document under ``data_dir``."""

    data_dir: Path
    _locks: dict[DocumentName, threading.Lock] = field(
        default_factory=lambda: {name: threading.Lock() for name in DocumentName}
    )

    def path_of(self, name: DocumentName) -> Path:
        return self.data_dir / f"{name.value}.json"

    def load(self, name: DocumentName) -> Document:
        path = self.path_of(name)
        if not path.exists():
            return Document(updated_at=None, items=())

        try:
            raw = path.read_text(encoding="utf-8")
            if not raw.strip():
                return _empty(path)
            payload = json.loads(raw)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning("unreadable document %s, using empty: %s", path, e)
            return _empty(path)

        return _coerce(payload, path)

    def save(
        self, name: DocumentName, items: Sequence[Mapping[str, Any]]
    ) -> Result[Document, MarketplaceError]:
        document = Document(updated_at=now_iso(), items=tuple(items))
        path = self.path_of(name)
        try:
            _write_atomic(path, document.to_dict())
        except OSError:
            logger.exception("failed to write document %s", path)
            return Failure(PersistenceError(message=f"failed to write {name.value}"))
        return Success(document)

    def ensure(
        self, name: DocumentName, items: Sequence[Mapping[str, Any]]
    ) -> Document:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        with self.lock(name):
            if self.path_of(name).exists():
                return self.load(name)
            saved = self.save(name, items)
        logger.info("initialized %s with %d item(s)", self.path_of(name), len(items))
        return saved.unwrap()

    @contextmanager
    def lock(self, name: DocumentName) -> Iterator[None]:
        with self._locks[name]:
            yield


def _modified_at(path: Path) -> str | None:
    try:
        mtime = path.stat().st_mtime
    except OSError:
        return None
    return to_iso(datetime.fromtimestamp(mtime, timezone.utc))


def _empty(path: Path) -> Document:
    return Document(updated_at=_modified_at(path), items=())


def _coerce(payload: Any, path: Path) -> Document:
    if not isinstance(payload, dict):
        logger.warning("document %s is not a JSON object, using empty", path)
        return _empty(path)

    items = payload.get("items")
    if not isinstance(items, list):
        items = []
    updated_at = payload.get("updatedAt")
    if not isinstance(updated_at, str) or not updated_at:
        updated_at = _modified_at(path)

    return Document(
        updated_at=updated_at,
        items=tuple(it for it in items if isinstance(it, dict)),
    )


def _write_atomic(path: Path, payload: Mapping[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(payload, fh, ensure_ascii=False, indent=2)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise
