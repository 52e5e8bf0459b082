"""ACH file generation use case: approved payment batch -> stored NACHA file."""

from __future__ import annotations

import string
from datetime import datetime
from typing import Callable
from uuid import uuid4

import structlog

from ledgerach.core.config import AppSettings, NachaConfig
from ledgerach.core.exceptions import (
    BatchLockedError,
    BatchNotApprovedError,
    BatchNotProcessedError,
    FileIdModifierExhausted,
    LockError,
    NachaInputError,
)
from ledgerach.core.protocols import IFileStore, ILockBackend, IPaymentBatchStore
from ledgerach.models.payments import BatchInput, BatchStatus, NachaFileResult
from ledgerach.nacha.builder import BatchParams, EntryParams, NachaFileBuilder

logger = structlog.get_logger(__name__)

FILE_ID_MODIFIERS = string.ascii_uppercase + string.digits
TEST_REFERENCE_CODE = "TEST"


def build_nacha_file(
    batch: BatchInput,
    config: NachaConfig,
    *,
    created_at: datetime | None = None,
    file_id_modifier: str | None = None,
) -> NachaFileResult:
    """Build the NACHA file for one batch input. Pure apart from the clock.

    The file holds a single batch under one originating DFI, so the trace
    numbers returned per item id strictly increase in item order.
    """
    kwargs: dict = {
        "created_at": created_at,
        "reference_code": "" if batch.is_production else TEST_REFERENCE_CODE,
    }
    if file_id_modifier is not None:
        kwargs["file_id_modifier"] = file_id_modifier
    builder = NachaFileBuilder.from_config(config, **kwargs)

    handle = builder.create_batch(BatchParams(
        company_name=batch.company_name,
        company_identification=batch.company_identification,
        originating_dfi_id=batch.originating_dfi_id,
        company_entry_description=batch.company_entry_description,
        company_descriptive_date=batch.company_descriptive_date,
        effective_entry_date=batch.effective_entry_date,
        standard_entry_class=batch.standard_entry_class,
    ))

    trace_numbers: dict[str, str] = {}
    for item in batch.items:
        if item.item_id in trace_numbers:
            raise NachaInputError(f"Duplicate payment item id {item.item_id!r}")
        entry = builder.add_entry(handle, EntryParams(
            transaction_code=item.transaction_code,
            routing_number=item.routing_number,
            account_number=item.account_number,
            amount_cents=item.amount_cents,
            receiving_name=item.vendor_name,
            vendor_id=item.vendor_id,
            addenda=item.memo or None,
        ))
        trace_numbers[item.item_id] = entry.trace_number

    content = builder.generate_file()
    summary = builder.summary
    modifier = builder.file_id_modifier
    created = builder.created_at
    return NachaFileResult(
        batch_id=batch.batch_id,
        file_name=f"ACH_{batch.batch_id}_{created:%Y%m%d_%H%M%S}_{modifier}.txt",
        content=content,
        created_at=created,
        is_production=batch.is_production,
        total_amount_cents=summary.total_amount_cents,
        total_debit_cents=summary.total_debit_cents,
        total_credit_cents=summary.total_credit_cents,
        item_count=summary.item_count,
        entry_hash=summary.entry_hash,
        trace_numbers=trace_numbers,
    )


class AchFileService:
    """Generates, stores and serves NACHA files for approved payment batches.

    Generation runs at most once per batch: a per-batch lock rejects
    concurrent requests and the approved -> processed transition is a
    conditional write in the batch store.
    """

    LOCK_PREFIX = "ach:lock:"

    def __init__(
        self,
        *,
        settings: AppSettings,
        batch_store: IPaymentBatchStore,
        file_store: IFileStore,
        locks: ILockBackend,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._settings = settings
        self._batches = batch_store
        self._files = file_store
        self._locks = locks
        self._clock = clock

    def generate_for_batch(self, batch_id: str) -> NachaFileResult:
        log = logger.bind(batch_id=batch_id)
        key = f"{self.LOCK_PREFIX}{batch_id}"
        token = uuid4().hex
        if not self._locks.acquire(key, token, self._settings.redis.lock_ttl_seconds):
            log.warning("ach_generation_rejected_locked")
            raise BatchLockedError(batch_id)
        try:
            batch = self._batches.get_batch(batch_id)
            if batch.status is not BatchStatus.APPROVED:
                raise BatchNotApprovedError(batch_id, batch.status.value)

            created_at = self._clock()
            day_prefix = self._day_prefix(batch.payload.is_production, created_at)
            modifier = self._next_file_id_modifier(day_prefix)
            result = build_nacha_file(
                batch.payload, self._settings.nacha,
                created_at=created_at, file_id_modifier=modifier,
            )
            result.storage_path = self._files.write(
                f"{day_prefix}{result.file_name}", result.content.encode("ascii"), "text/plain",
            )
            self._batches.mark_processed(batch_id, result)
            log.info(
                "ach_file_stored",
                file_name=result.file_name,
                item_count=result.item_count,
                total_amount_cents=result.total_amount_cents,
                production=batch.payload.is_production,
            )
            return result
        finally:
            self._release(key, token)

    def _release(self, key: str, token: str) -> None:
        # a failed release must not replace the error raised inside the lock;
        # the lock then expires with its TTL
        try:
            self._locks.release(key, token)
        except LockError as exc:
            logger.warning("ach_lock_release_failed", lock_key=key, error=str(exc))

    def download_for_batch(self, batch_id: str) -> tuple[str, bytes]:
        """Return ``(file_name, file bytes)`` for a processed batch."""
        batch = self._batches.get_batch(batch_id)
        if batch.status is not BatchStatus.PROCESSED or not batch.storage_path:
            raise BatchNotProcessedError(batch_id, batch.status.value)
        return batch.file_name, self._files.read(batch.storage_path)

    def _day_prefix(self, production: bool, created_at: datetime) -> str:
        env = "" if production else "test/"
        return f"{self._settings.nacha.storage_prefix}{env}{created_at:%Y%m%d}/"

    def _next_file_id_modifier(self, day_prefix: str) -> str:
        used = len(self._files.list_files(day_prefix))
        if used >= len(FILE_ID_MODIFIERS):
            raise FileIdModifierExhausted(f"All file id modifiers used under {day_prefix!r}")
        return FILE_ID_MODIFIERS[used]
