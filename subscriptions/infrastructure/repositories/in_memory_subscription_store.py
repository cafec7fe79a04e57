"""
In-memory implementation of SubscriptionStore port.

Used by unit tests and local experiments; nothing survives a restart.
"""
import copy
from typing import Dict, List, Optional, Tuple

from subscriptions.ports.subscription_store import Document, SubscriptionStore


class InMemorySubscriptionStore(SubscriptionStore):
    """Dict-backed document store keyed by (scope, subject id)."""

    def __init__(self):
        """Initialize an empty store."""
        self._collections: Dict[str, Dict[str, Document]] = {}

    def _collection(self, scope: str) -> Dict[str, Document]:
        return self._collections.setdefault(scope, {})

    async def get(self, scope: str, subject_id: str) -> Optional[Document]:
        document = self._collection(scope).get(subject_id)
        return copy.deepcopy(document) if document is not None else None

    async def put(self, scope: str, subject_id: str, document: Document) -> None:
        self._collection(scope)[subject_id] = copy.deepcopy(document)

    async def patch(self, scope: str, subject_id: str, fields: Document) -> bool:
        collection = self._collection(scope)
        if subject_id not in collection:
            return False
        collection[subject_id].update(copy.deepcopy(fields))
        return True

    async def delete(self, scope: str, subject_id: str) -> bool:
        return self._collection(scope).pop(subject_id, None) is not None

    async def scan(self, scope: str) -> List[Tuple[str, Document]]:
        return [
            (subject_id, copy.deepcopy(document))
            for subject_id, document in self._collection(scope).items()
        ]
