"""In-memory backends for unit tests and local runs: dict-backed fakes."""

from __future__ import annotations

from datetime import datetime

from ledgerach.core.exceptions import (
    BatchNotFoundError,
    BatchStatusConflictError,
    StoredFileNotFoundError,
)
from ledgerach.models.payments import BatchStatus, NachaFileResult, PaymentBatch


class MemoryPaymentBatchStore:
    """Dict-backed IPaymentBatchStore."""

    def __init__(self) -> None:
        self._batches: dict[str, PaymentBatch] = {}

    def put_batch(self, batch: PaymentBatch) -> None:
        self._batches[batch.batch_id] = batch.model_copy(deep=True)

    def get_batch(self, batch_id: str) -> PaymentBatch:
        try:
            return self._batches[batch_id].model_copy(deep=True)
        except KeyError:
            raise BatchNotFoundError(f"No payment batch {batch_id!r}") from None

    def mark_processed(self, batch_id: str, result: NachaFileResult) -> None:
        current = self.get_batch(batch_id)
        if current.status is not BatchStatus.APPROVED:
            raise BatchStatusConflictError(
                f"Batch {batch_id} is {current.status.value!r}, cannot mark processed"
            )
        self._batches[batch_id] = current.model_copy(update={
            "status": BatchStatus.PROCESSED,
            "file_name": result.file_name,
            "storage_path": result.storage_path,
            "total_amount_cents": result.total_amount_cents,
            "item_count": result.item_count,
            "trace_numbers": dict(result.trace_numbers),
            "processed_at": datetime.now(),
        })


class MemoryFileStore:
    """Dict-backed IFileStore."""

    def __init__(self) -> None:
        self._files: dict[str, bytes] = {}

    def read(self, path: str) -> bytes:
        try:
            return self._files[path]
        except KeyError:
            raise StoredFileNotFoundError(f"No file at {path!r}") from None

    def write(self, path: str, data: bytes, content_type: str = "text/plain") -> str:
        self._files[path] = data
        return path

    def list_files(self, prefix: str) -> list[str]:
        return [k for k in self._files if k.startswith(prefix)]


class MemoryLockBackend:
    """Dict-backed ILockBackend; ttl is ignored."""

    def __init__(self) -> None:
        self._locks: dict[str, str] = {}

    def acquire(self, key: str, token: str, ttl: int) -> bool:
        if key in self._locks:
            return False
        self._locks[key] = token
        return True

    def release(self, key: str, token: str) -> bool:
        if self._locks.get(key) != token:
            return False
        del self._locks[key]
        return True
