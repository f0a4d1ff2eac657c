# src/qbank/stores/base.py
"""Abstract base class for vector storage.

``VectorStore`` owns the behaviour every backend shares: dimension checks,
batching, error accumulation, pagination limits and the never-raise contract
of the delete and stats calls. Backends implement the underscore primitives,
which may raise whatever their client library raises.
"""

from abc import ABC, abstractmethod

from qbank.errors import DimensionMismatchError, StoreError
from qbank.log import get_logger
from qbank.models import IndexStats, MetadataFilter, QueryMatch, UpsertResult, VectorRecord

logger = get_logger(__name__)

DEFAULT_UPSERT_BATCH_SIZE = 100
DEFAULT_LIST_PAGE_SIZE = 99
DEFAULT_MAX_LIST_PAGES = 1000


class VectorStore(ABC):
    """Namespace-scoped vector storage."""

    def __init__(
        self,
        dimension: int | None = None,
        upsert_batch_size: int = DEFAULT_UPSERT_BATCH_SIZE,
        list_page_size: int = DEFAULT_LIST_PAGE_SIZE,
        max_list_pages: int = DEFAULT_MAX_LIST_PAGES,
    ) -> None:
        """Initialize shared store settings.

        Args:
            dimension: Required vector length. None disables the check.
            upsert_batch_size: Records per upsert call.
            list_page_size: Ids requested per listing page.
            max_list_pages: Upper bound on listing pages before giving up.
        """
        self.dimension = dimension
        self.upsert_batch_size = upsert_batch_size
        self.list_page_size = list_page_size
        self.max_list_pages = max_list_pages

    # -- backend primitives -------------------------------------------------

    @abstractmethod
    def _upsert(self, records: list[VectorRecord], namespace: str) -> None:
        """Write one batch of records, overwriting existing ids."""
        ...

    @abstractmethod
    def _query(
        self,
        embedding: list[float],
        top_k: int,
        namespace: str,
        filter: MetadataFilter | None,
    ) -> list[QueryMatch]:
        """Return up to top_k matches, best first."""
        ...

    @abstractmethod
    def _fetch(self, ids: list[str], namespace: str) -> dict[str, VectorRecord]:
        """Return the records that exist among ids."""
        ...

    @abstractmethod
    def _delete_ids(self, ids: list[str], namespace: str) -> None: ...

    @abstractmethod
    def _delete_all(self, namespace: str) -> None: ...

    @abstractmethod
    def _list_page(
        self, namespace: str, limit: int, token: str | None
    ) -> tuple[list[str], str | None]:
        """Return one page of ids and the token for the next page (None at the end)."""
        ...

    @abstractmethod
    def _describe_stats(self) -> IndexStats: ...

    # -- public API ---------------------------------------------------------

    def check_dimension(self, record_id: str, embedding: list[float]) -> None:
        """Raise DimensionMismatchError if embedding has the wrong length."""
        if self.dimension is not None and len(embedding) != self.dimension:
            raise DimensionMismatchError(record_id, self.dimension, len(embedding))

    def upsert_batch(self, records: list[VectorRecord], namespace: str) -> UpsertResult:
        """Upsert records in sequential batches.

        A failing batch is recorded in the result and the remaining batches
        still run.

        Raises:
            DimensionMismatchError: If any record has the wrong vector length.
                Nothing is written in that case.
        """
        for record in records:
            self.check_dimension(record.id, record.embedding)

        result = UpsertResult()
        if not records:
            return result

        total_batches = (len(records) + self.upsert_batch_size - 1) // self.upsert_batch_size
        for start in range(0, len(records), self.upsert_batch_size):
            batch = records[start : start + self.upsert_batch_size]
            batch_num = start // self.upsert_batch_size + 1
            try:
                self._upsert(batch, namespace)
            except Exception as e:
                result.failed += len(batch)
                result.errors.append(f"Batch {batch_num}: {e}")
                logger.error("Upsert batch %d/%d failed: %s", batch_num, total_batches, e)
                continue
            result.succeeded += len(batch)
            logger.info(
                "Upserted batch %d/%d (%d records) to '%s'",
                batch_num,
                total_batches,
                len(batch),
                namespace,
            )

        return result

    def query(
        self,
        embedding: list[float],
        top_k: int,
        namespace: str,
        filter: MetadataFilter | None = None,
    ) -> list[QueryMatch]:
        """Similarity search within a namespace.

        Matches keep the store's order and are cut to top_k.

        Raises:
            DimensionMismatchError: If embedding has the wrong length.
            StoreError: If the backend call fails.
        """
        if top_k < 1:
            return []
        self.check_dimension("<query>", embedding)
        if filter is not None and filter.is_empty():
            filter = None

        try:
            matches = self._query(embedding, top_k, namespace, filter)
        except StoreError:
            raise
        except Exception as e:
            raise StoreError(f"Query failed in namespace '{namespace}': {e}") from e
        return matches[:top_k]

    def fetch(self, ids: list[str], namespace: str) -> dict[str, VectorRecord]:
        """Fetch records by id. Missing ids are absent from the result.

        Raises:
            StoreError: If the backend call fails.
        """
        if not ids:
            return {}
        try:
            return self._fetch(ids, namespace)
        except Exception as e:
            raise StoreError(f"Fetch failed in namespace '{namespace}': {e}") from e

    def fetch_one(self, record_id: str, namespace: str) -> VectorRecord | None:
        return self.fetch([record_id], namespace).get(record_id)

    def delete_one(self, record_id: str, namespace: str) -> bool:
        return self.delete_many([record_id], namespace)

    def delete_many(self, ids: list[str], namespace: str) -> bool:
        """Delete records by id. Returns False (and logs) on failure."""
        if not ids:
            return True
        try:
            self._delete_ids(ids, namespace)
        except Exception as e:
            logger.error("Failed to delete %d records from '%s': %s", len(ids), namespace, e)
            return False
        logger.info("Deleted %d records from '%s'", len(ids), namespace)
        return True

    def delete_all(self, namespace: str) -> bool:
        """Delete every record in a namespace. Returns False (and logs) on failure."""
        try:
            self._delete_all(namespace)
        except Exception as e:
            logger.error("Failed to clear namespace '%s': %s", namespace, e)
            return False
        logger.info("Cleared namespace '%s'", namespace)
        return True

    def list_all_ids(self, namespace: str) -> list[str]:
        """List every id in a namespace, following continuation tokens.

        Raises:
            StoreError: If a page request fails or more than max_list_pages
                pages are returned.
        """
        ids: list[str] = []
        token: str | None = None
        for _ in range(self.max_list_pages):
            try:
                page, token = self._list_page(namespace, self.list_page_size, token)
            except Exception as e:
                raise StoreError(f"Listing ids in '{namespace}' failed: {e}") from e
            ids.extend(page)
            if not token:
                return ids
        raise StoreError(
            f"Listing ids in '{namespace}' exceeded {self.max_list_pages} pages"
        )

    def describe_stats(self) -> IndexStats | None:
        """Index statistics, or None if they could not be read."""
        try:
            return self._describe_stats()
        except Exception as e:
            logger.warning("Could not read index stats: %s", e)
            return None
