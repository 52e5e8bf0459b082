"""Payment batch models exchanged with the batch store, the service and the API."""

from __future__ import annotations

from datetime import date, datetime
from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, Field, StrictInt, field_validator

from ledgerach.core.types import BatchId, Cents, ItemId, JsonDict, RoutingNumber, TraceNumber
from ledgerach.nacha.records import AccountType, StandardEntryClass, TransactionCode
from ledgerach.nacha.routing import validate_routing_number


class BatchStatus(StrEnum):
    DRAFT = "draft"
    APPROVED = "approved"
    PROCESSED = "processed"


class VendorBankAccount(BaseModel):
    """Bank account registered for a vendor; routing number checked on entry."""

    vendor_id: str
    routing_number: RoutingNumber
    account_number: str = Field(..., min_length=1, max_length=17)
    account_type: AccountType = AccountType.CHECKING

    @field_validator("routing_number")
    @classmethod
    def check_routing_number(cls, v: str) -> str:
        if not validate_routing_number(v):
            raise ValueError(f"routing number {v!r} fails the ABA checksum")
        return v


class PaymentItem(BaseModel):
    """One approved vendor payment line."""

    item_id: ItemId
    vendor_id: str
    vendor_name: str
    routing_number: RoutingNumber
    account_number: str
    account_type: AccountType = AccountType.CHECKING
    amount_cents: StrictInt
    memo: str = ""
    debit: bool = False  # vendor payments are credits; debits reverse a prior payment

    @property
    def transaction_code(self) -> TransactionCode:
        return TransactionCode.for_account(self.account_type, debit=self.debit)


class BatchInput(BaseModel):
    """Everything needed to generate the NACHA file for one approved batch."""

    batch_id: BatchId
    company_name: str
    company_identification: str  # 10 chars, usually "1" + EIN
    originating_dfi_id: str  # first 8 digits of the ODFI routing number
    company_entry_description: str = Field(..., max_length=10)
    company_descriptive_date: str = ""
    effective_entry_date: date
    is_production: bool = False
    standard_entry_class: StandardEntryClass = StandardEntryClass.CCD
    items: list[PaymentItem] = Field(default_factory=list)


class PaymentBatch(BaseModel):
    """Batch record as kept by the payment batch store."""

    batch_id: BatchId
    entity_id: str = ""
    status: BatchStatus = BatchStatus.DRAFT
    payload: BatchInput

    # --- set when processed ---
    file_name: str = ""
    storage_path: str = ""
    total_amount_cents: Cents = 0
    item_count: int = 0
    trace_numbers: dict[ItemId, TraceNumber] = Field(default_factory=dict)
    processed_at: Optional[datetime] = None


class NachaFileResult(BaseModel):
    """Generated file text plus the metadata the caller persists."""

    batch_id: BatchId
    file_name: str
    content: str
    created_at: datetime
    is_production: bool = False
    storage_path: str = ""
    total_amount_cents: Cents
    total_debit_cents: int
    total_credit_cents: int
    item_count: int
    entry_hash: int
    trace_numbers: dict[ItemId, TraceNumber] = Field(default_factory=dict)

    def metadata(self) -> JsonDict:
        """Result without the file body, for API responses and logs."""
        return self.model_dump(mode="json", exclude={"content"})
