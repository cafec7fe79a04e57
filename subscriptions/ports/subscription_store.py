"""
Subscription store port (interface).

This defines the contract for the document store holding subscription
records. Records are addressed by (product scope, subject id); every
operation touches a single key except ``scan``.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

Document = Dict[str, Any]


class SubscriptionStore(ABC):
    """
    Abstract document store for subscription records.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    Implementations raise StoreUnavailableError when the backend fails.
    """

    @abstractmethod
    async def get(self, scope: str, subject_id: str) -> Optional[Document]:
        """
        Read a document.

        Args:
            scope: Product scope
            subject_id: Document key

        Returns:
            Stored fields or None if absent
        """

    @abstractmethod
    async def put(self, scope: str, subject_id: str, document: Document) -> None:
        """
        Create or fully overwrite a document.

        Args:
            scope: Product scope
            subject_id: Document key
            document: Fields to store
        """

    @abstractmethod
    async def patch(self, scope: str, subject_id: str, fields: Document) -> bool:
        """
        Merge fields into an existing document.

        Args:
            scope: Product scope
            subject_id: Document key
            fields: Fields to merge

        Returns:
            False if the document does not exist
        """

    @abstractmethod
    async def delete(self, scope: str, subject_id: str) -> bool:
        """
        Delete a document.

        Args:
            scope: Product scope
            subject_id: Document key

        Returns:
            False if the document does not exist
        """

    @abstractmethod
    async def scan(self, scope: str) -> List[Tuple[str, Document]]:
        """
        Read every document in a scope.

        Args:
            scope: Product scope

        Returns:
            List of (subject id, fields) pairs
        """
