"""Document store ABC: the capability boundary with the personal data store.

The catalog core only needs whole-document reads and writes plus container
listing. There are no transactions, no queries and no conditional writes;
every call is one-shot and never retried here.

Implementations:
- ``InMemoryDocumentStore`` for dev and tests.
- ``HttpDocumentStore`` for pods reachable over HTTP (LDP containers).
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from podcatalog.models.document import Document


class DocumentStore(ABC):
    """Whole-document access to a container-organised store."""

    @abstractmethod
    async def get(self, uri: str) -> Document:
        """Fetch and parse the document at ``uri``.

        Raises:
            NotFoundError: If nothing is stored at ``uri``.
            ReadError: If the store fails to serve the read.
            ParseError: If the stored content is not a valid document.
        """

    @abstractmethod
    async def put(self, uri: str, doc: Document) -> None:
        """Create or replace the document at ``uri``.

        Raises:
            WriteError: If the store rejects the write.
        """

    @abstractmethod
    async def delete(self, uri: str) -> None:
        """Remove the document at ``uri``.

        Raises:
            NotFoundError: If nothing is stored at ``uri``.
            WriteError: If the store rejects the delete.
        """

    @abstractmethod
    async def list(self, container_uri: str) -> list[str]:
        """Absolute URIs of the direct children of a container.

        Raises:
            NotFoundError: If the container does not exist.
            ReadError: If the store fails to serve the listing.
        """

    @abstractmethod
    async def read_raw(self, uri: str) -> str:
        """Raw textual representation of a resource or container.

        Used only by degraded-mode fallbacks that pattern-match content when
        structured listing yields nothing.

        Raises:
            NotFoundError: If nothing is stored at ``uri``.
            ReadError: If the store fails to serve the read.
        """

    async def aclose(self) -> None:
        """Release transport resources. No-op by default."""
        return None
