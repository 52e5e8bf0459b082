"""Shared test doubles: memory backends and sample payment batches."""

from __future__ import annotations

from datetime import date

from ledgerach.models.payments import BatchInput, BatchStatus, PaymentBatch, PaymentItem
from ledgerach.persistence.memory_backend import (
    MemoryFileStore,
    MemoryLockBackend,
    MemoryPaymentBatchStore,
)

# Valid ABA routing numbers
CHASE = "021000021"
BOSTON_FED = "011000015"
BOFA = "026009593"


def make_item(item_id: str = "ITEM-1", **overrides) -> PaymentItem:
    fields = {
        "item_id": item_id,
        "vendor_id": "V-100",
        "vendor_name": "Acme Office Supply",
        "routing_number": BOSTON_FED,
        "account_number": "123456789",
        "account_type": "checking",
        "amount_cents": 10000,
    }
    fields.update(overrides)
    return PaymentItem(**fields)


def make_batch_input(batch_id: str = "B-1", items: list[PaymentItem] | None = None,
                     **overrides) -> BatchInput:
    fields = {
        "batch_id": batch_id,
        "company_name": "Principle Foundation",
        "company_identification": "1234567890",
        "originating_dfi_id": "02100002",
        "company_entry_description": "VENDOR PAY",
        "effective_entry_date": date(2024, 3, 18),
        "is_production": True,
        "items": [make_item()] if items is None else items,
    }
    fields.update(overrides)
    return BatchInput(**fields)


def make_batch(batch_id: str = "B-1", status: BatchStatus = BatchStatus.APPROVED,
               **input_overrides) -> PaymentBatch:
    return PaymentBatch(
        batch_id=batch_id,
        entity_id="TPF",
        status=status,
        payload=make_batch_input(batch_id, **input_overrides),
    )


__all__ = [
    "BOFA",
    "BOSTON_FED",
    "CHASE",
    "MemoryFileStore",
    "MemoryLockBackend",
    "MemoryPaymentBatchStore",
    "make_batch",
    "make_batch_input",
    "make_item",
]
