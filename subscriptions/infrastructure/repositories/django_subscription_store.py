"""
Django implementation of SubscriptionStore port.

This adapter maps product scopes to collections and stores each
subscription as a JSON document row.
"""
import logging
from typing import List, Mapping, Optional, Tuple

from asgiref.sync import sync_to_async
from django.db import DatabaseError, transaction

from core.domain.exceptions import StoreUnavailableError, UnknownProductScopeError
from subscriptions.infrastructure.models import SubscriptionDocument
from subscriptions.ports.subscription_store import Document, SubscriptionStore

logger = logging.getLogger(__name__)


class DjangoSubscriptionStore(SubscriptionStore):
    """
    Django ORM implementation of SubscriptionStore.

    This adapter:
    1. Resolves a product scope to its collection name
    2. Reads and writes SubscriptionDocument rows
    3. Converts database failures into StoreUnavailableError
    """

    def __init__(self, collections: Mapping[str, str]):
        """
        Initialize store.

        Args:
            collections: Product scope -> collection name
        """
        self.collections = dict(collections)

    def collection_for(self, scope: str) -> str:
        """
        Resolve the collection backing a product scope.

        Raises:
            UnknownProductScopeError: If the scope is not configured
        """
        try:
            return self.collections[scope]
        except KeyError:
            raise UnknownProductScopeError(f"Unknown product scope: {scope}") from None

    def _query(self, scope: str):
        # pylint: disable=no-member
        return SubscriptionDocument.objects.filter(collection=self.collection_for(scope))

    @sync_to_async
    def get(self, scope: str, subject_id: str) -> Optional[Document]:
        """
        Read a document.

        Args:
            scope: Product scope
            subject_id: Document key

        Returns:
            Stored fields or None if absent
        """
        try:
            model = self._query(scope).filter(document_id=subject_id).first()
        except DatabaseError as e:
            raise _unavailable("get", e) from e
        return dict(model.data) if model else None

    @sync_to_async
    def put(self, scope: str, subject_id: str, document: Document) -> None:
        """
        Create or fully overwrite a document.

        Args:
            scope: Product scope
            subject_id: Document key
            document: Fields to store
        """
        collection = self.collection_for(scope)
        try:
            # pylint: disable=no-member
            SubscriptionDocument.objects.update_or_create(
                collection=collection,
                document_id=subject_id,
                defaults={"data": dict(document)},
            )
        except DatabaseError as e:
            raise _unavailable("put", e) from e

    @sync_to_async
    def patch(self, scope: str, subject_id: str, fields: Document) -> bool:
        """
        Merge fields into an existing document.

        Returns:
            False if the document does not exist
        """
        try:
            with transaction.atomic():
                model = (
                    self._query(scope)
                    .select_for_update()
                    .filter(document_id=subject_id)
                    .first()
                )
                if model is None:
                    return False
                data = dict(model.data)
                data.update(fields)
                model.data = data
                model.save(update_fields=["data", "updated_at"])
                return True
        except DatabaseError as e:
            raise _unavailable("patch", e) from e

    @sync_to_async
    def delete(self, scope: str, subject_id: str) -> bool:
        """
        Delete a document.

        Returns:
            False if the document does not exist
        """
        try:
            deleted, _ = self._query(scope).filter(document_id=subject_id).delete()
        except DatabaseError as e:
            raise _unavailable("delete", e) from e
        return deleted > 0

    @sync_to_async
    def scan(self, scope: str) -> List[Tuple[str, Document]]:
        """
        Read every document in a scope.

        Returns:
            List of (subject id, fields) pairs
        """
        try:
            rows = list(self._query(scope).values_list("document_id", "data"))
        except DatabaseError as e:
            raise _unavailable("scan", e) from e
        return [(document_id, dict(data)) for document_id, data in rows]


def _unavailable(operation: str, error: Exception) -> StoreUnavailableError:
    logger.error("Subscription store %s failed: %s", operation, error, exc_info=True)
    return StoreUnavailableError(f"Subscription store {operation} failed")
