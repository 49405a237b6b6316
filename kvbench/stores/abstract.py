"""
Store contract for KV Throughput Bench.

Every backend the driver measures implements the `Store` protocol. The
`AbstractStore` ABC is an optional helper: concrete backends implement the
underscored engine calls and inherit the failure policy, iteration capping and
no-op lifecycle.

Pagination protocol
-------------------
`scan_page(cursor, page_size)` returns up to `page_size` entries whose keys are
strictly greater than `cursor` (or from the first key when `cursor` is None),
in ascending lexicographic key order, without duplicates or gaps. A page
shorter than `page_size` means the scan is exhausted; callers resume with the
last returned key as the next cursor.
"""

from __future__ import annotations

import abc
from typing import ClassVar, List, Literal, Optional, Protocol, Tuple, Type, runtime_checkable

from kvbench.domain.exceptions import BackendOperationError
from kvbench.domain.models import Entry
from kvbench.utils.logging import get_logger

FailurePolicy = Literal["tolerant", "strict"]

log = get_logger(__name__)


@runtime_checkable
class Store(Protocol):
    """
    Common interface all benchmarked backends must implement.
    """

    def kind(self) -> str:
        """Stable label used in reports."""
        ...

    def put(self, key: str, value: str) -> None:
        """Insert or overwrite `key`."""
        ...

    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None when the key is absent."""
        ...

    def delete(self, key: str) -> None:
        """Remove `key`; deleting an absent key is not an error."""
        ...

    def scan_page(self, cursor: Optional[str], page_size: int) -> List[Entry]:
        """Return the next page of entries after `cursor`."""
        ...

    def constrain_iterations(self, requested: int) -> int:
        """Cap the iteration count for backends too slow for the full run."""
        ...


class AbstractStore(abc.ABC):
    """
    ABC helper for class-based backends.

    Subclasses set `name` (the reported kind) and `backend_errors` (the engine
    exception types an individual operation may raise), and implement the
    underscored engine calls. Under the ``tolerant`` policy a failed operation
    is logged and counted, then the run continues; under ``strict`` it is
    re-raised as `BackendOperationError`.
    """

    name: ClassVar[str]
    backend_errors: ClassVar[Tuple[Type[BaseException], ...]] = ()
    # Stores that cannot read back what they were given by construction.
    verify: ClassVar[bool] = True

    def __init__(
        self,
        failure_policy: FailurePolicy = "tolerant",
        max_iterations: Optional[int] = None,
    ) -> None:
        self.failure_policy = failure_policy
        self.max_iterations = max_iterations
        self.failures = 0

    def kind(self) -> str:
        return self.name

    def constrain_iterations(self, requested: int) -> int:
        if self.max_iterations is None:
            return requested
        return min(requested, self.max_iterations)

    def put(self, key: str, value: str) -> None:
        try:
            self._put(key, value)
        except self.backend_errors as exc:
            self._handle_failure("put", key, exc)

    def get(self, key: str) -> Optional[str]:
        try:
            return self._get(key)
        except self.backend_errors as exc:
            self._handle_failure("get", key, exc)
            return None

    def delete(self, key: str) -> None:
        try:
            self._delete(key)
        except self.backend_errors as exc:
            self._handle_failure("delete", key, exc)

    def scan_page(self, cursor: Optional[str], page_size: int) -> List[Entry]:
        try:
            return self._scan_page(cursor, page_size)
        except self.backend_errors as exc:
            self._handle_failure("scan_page", cursor, exc)
            return []

    def close(self) -> None:
        """Release engine resources; called once at shutdown."""

    def _handle_failure(self, operation: str, key: Optional[str], exc: BaseException) -> None:
        if self.failure_policy == "strict":
            raise BackendOperationError(self.kind(), operation, key) from exc
        self.failures += 1
        log.exception(
            f"[BACKEND ERROR] {self.kind()} {operation} failed; continuing",
            extra={"kind": self.kind(), "operation": operation, "key": key},
        )

    @abc.abstractmethod
    def _put(self, key: str, value: str) -> None:  # pragma: no cover - interface only
        raise NotImplementedError

    @abc.abstractmethod
    def _get(self, key: str) -> Optional[str]:  # pragma: no cover - interface only
        raise NotImplementedError

    @abc.abstractmethod
    def _delete(self, key: str) -> None:  # pragma: no cover - interface only
        raise NotImplementedError

    @abc.abstractmethod
    def _scan_page(
        self, cursor: Optional[str], page_size: int
    ) -> List[Entry]:  # pragma: no cover - interface only
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind()!r}, failure_policy={self.failure_policy!r})"


__all__ = [
    "AbstractStore",
    "FailurePolicy",
    "Store",
]
