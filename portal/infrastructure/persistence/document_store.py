from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, ContextManager, Dict, List, Optional

from ...domain.errors import ConflictError, NotFoundError
from ...domain.ports.persistence import Document, Predicate, StorageBackend

logger = logging.getLogger(__name__)


class DocumentStore:
    """
    Collection of JSON documents keyed by a unique string ``id``.

    Every operation reads the whole collection; every mutation writes it back.
    Mutations on one store are serialised by an in-process lock. Writers in
    other processes are not coordinated: the last full write wins.
    """

    def __init__(self, backend: StorageBackend, name: str) -> None:
        self._backend = backend
        self._name = name
        self._lock = threading.RLock()
        self._last_generated_id = 0

    def describe(self) -> str:
        return self._backend.describe()

    def write_lock(self) -> ContextManager[bool]:
        """Hold across a check and the writes that depend on it; re-entrant."""
        return self._lock

    # ------------------------------------------------------------------
    def read_all(self) -> List[Document]:
        return self._backend.load()

    def write_all(self, documents: List[Document]) -> bool:
        with self._lock:
            self._backend.save(documents)
        return True

    def find_by_id(self, document_id: str) -> Document:
        for document in self.read_all():
            if document.get("id") == document_id:
                return document
        raise NotFoundError(f"Document {document_id} not found in {self._name}")

    def find_where(self, predicate: Predicate) -> List[Document]:
        return [document for document in self.read_all() if predicate(document)]

    def find_one(self, predicate: Predicate) -> Document:
        for document in self.read_all():
            if predicate(document):
                return document
        raise NotFoundError(f"No matching document in {self._name}")

    def count(self, predicate: Optional[Predicate] = None) -> int:
        documents = self.read_all()
        if predicate is None:
            return len(documents)
        return sum(1 for document in documents if predicate(document))

    # ------------------------------------------------------------------
    def create(self, document: Document, document_id: Optional[str] = None) -> Document:
        with self._lock:
            documents = self.read_all()
            new_id = str(document_id or document.get("id") or self._generate_id())
            if any(existing.get("id") == new_id for existing in documents):
                raise ConflictError(f"Document with ID {new_id} already exists in {self._name}")
            created = {**document, "id": new_id}
            documents.append(created)
            self._backend.save(documents)
        logger.debug("Created document %s in %s", created["id"], self._name)
        return created

    def update(self, document_id: str, fields: Dict[str, Any]) -> Document:
        """Shallow merge: nested objects are replaced, not merged."""
        return self.modify(document_id, lambda _existing: fields)

    def modify(self, document_id: str, mutator: Callable[[Document], Dict[str, Any]]) -> Document:
        """Apply the fields returned by ``mutator`` while holding the write lock."""
        with self._lock:
            documents = self.read_all()
            for index, existing in enumerate(documents):
                if existing.get("id") == document_id:
                    changes = {key: value for key, value in mutator(existing).items() if key != "id"}
                    updated = {**existing, **changes}
                    documents[index] = updated
                    self._backend.save(documents)
                    return updated
        raise NotFoundError(f"Document {document_id} not found in {self._name}")

    def delete(self, document_id: str) -> bool:
        with self._lock:
            documents = self.read_all()
            remaining = [document for document in documents if document.get("id") != document_id]
            if len(remaining) == len(documents):
                raise NotFoundError(f"Document {document_id} not found in {self._name}")
            self._backend.save(remaining)
        logger.debug("Deleted document %s from %s", document_id, self._name)
        return True

    def delete_where(self, predicate: Predicate) -> int:
        with self._lock:
            documents = self.read_all()
            remaining = [document for document in documents if not predicate(document)]
            removed = len(documents) - len(remaining)
            if removed:
                self._backend.save(remaining)
        return removed

    def _generate_id(self) -> str:
        candidate = time.time_ns() // 1000
        if candidate <= self._last_generated_id:
            candidate = self._last_generated_id + 1
        self._last_generated_id = candidate
        return str(candidate)
