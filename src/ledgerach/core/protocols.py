"""Protocol interfaces for the collaborators around the NACHA builder.

Structural typing, no inheritance required, easy to test with isinstance().
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from ledgerach.core.types import BatchId

if TYPE_CHECKING:
    from ledgerach.models.payments import NachaFileResult, PaymentBatch


# ---------------------------------------------------------------------------
# Payment Batch Store
# ---------------------------------------------------------------------------

@runtime_checkable
class IPaymentBatchStore(Protocol):
    """Supplies approved payment batches and records processing results."""

    def get_batch(self, batch_id: BatchId) -> PaymentBatch: ...

    def mark_processed(self, batch_id: BatchId, result: NachaFileResult) -> None: ...


# ---------------------------------------------------------------------------
# File Store
# ---------------------------------------------------------------------------

@runtime_checkable
class IFileStore(Protocol):
    """S3-compatible file storage interface."""

    def read(self, path: str) -> bytes: ...

    def write(self, path: str, data: bytes, content_type: str = "text/plain") -> str: ...

    def list_files(self, prefix: str) -> list[str]: ...


# ---------------------------------------------------------------------------
# Lock Backend
# ---------------------------------------------------------------------------

@runtime_checkable
class ILockBackend(Protocol):
    """Per-key mutual exclusion with expiry (Redis SET NX EX semantics)."""

    def acquire(self, key: str, token: str, ttl: int) -> bool: ...

    def release(self, key: str, token: str) -> bool: ...
