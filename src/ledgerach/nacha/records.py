"""NACHA record models.

One model per record type. ``render()`` lays the fields out in file order
and returns exactly 94 characters (enforced by ``assemble_record``).
"""

from __future__ import annotations

from datetime import date, datetime
from enum import StrEnum

from pydantic import BaseModel

from ledgerach.nacha.fields import (
    BLOCKING_FACTOR,
    RECORD_SIZE,
    alpha,
    assemble_record,
    blank,
    hhmm,
    numeric,
    yymmdd,
)


class AccountType(StrEnum):
    CHECKING = "checking"
    SAVINGS = "savings"


class TransactionCode(StrEnum):
    """Entry transaction codes supported for vendor payments."""

    CHECKING_CREDIT = "22"
    CHECKING_DEBIT = "27"
    SAVINGS_CREDIT = "32"
    SAVINGS_DEBIT = "37"

    @property
    def is_debit(self) -> bool:
        return self in (TransactionCode.CHECKING_DEBIT, TransactionCode.SAVINGS_DEBIT)

    @classmethod
    def for_account(cls, account_type: AccountType | str, debit: bool = False) -> TransactionCode:
        account_type = AccountType(account_type)
        if account_type is AccountType.CHECKING:
            return cls.CHECKING_DEBIT if debit else cls.CHECKING_CREDIT
        return cls.SAVINGS_DEBIT if debit else cls.SAVINGS_CREDIT


class ServiceClassCode(StrEnum):
    MIXED = "200"
    CREDITS_ONLY = "220"
    DEBITS_ONLY = "225"

    @classmethod
    def for_codes(cls, codes: list[TransactionCode]) -> ServiceClassCode:
        debits = {code.is_debit for code in codes}
        if debits == {False}:
            return cls.CREDITS_ONLY
        if debits == {True}:
            return cls.DEBITS_ONLY
        return cls.MIXED


class StandardEntryClass(StrEnum):
    CCD = "CCD"  # corporate credit or debit
    PPD = "PPD"  # prearranged payment and deposit


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

class FileHeaderRecord(BaseModel):
    """Record type 1."""

    immediate_destination: str
    immediate_origin: str
    created_at: datetime
    file_id_modifier: str = "A"
    destination_name: str = ""
    origin_name: str = ""
    reference_code: str = ""

    def render(self) -> str:
        return assemble_record(
            "1",
            "01",
            self.immediate_destination.rjust(10),
            self.immediate_origin.rjust(10),
            yymmdd(self.created_at),
            hhmm(self.created_at),
            alpha(self.file_id_modifier, 1),
            numeric(RECORD_SIZE, 3),
            numeric(BLOCKING_FACTOR, 2),
            "1",
            alpha(self.destination_name, 23),
            alpha(self.origin_name, 23),
            alpha(self.reference_code, 8),
        )


class BatchHeaderRecord(BaseModel):
    """Record type 5."""

    service_class_code: ServiceClassCode
    company_name: str
    company_discretionary_data: str = ""
    company_identification: str
    standard_entry_class: StandardEntryClass = StandardEntryClass.CCD
    company_entry_description: str
    company_descriptive_date: str = ""
    effective_entry_date: date
    originating_dfi_id: str
    batch_number: int

    def render(self) -> str:
        return assemble_record(
            "5",
            self.service_class_code.value,
            alpha(self.company_name, 16),
            alpha(self.company_discretionary_data, 20),
            alpha(self.company_identification, 10),
            self.standard_entry_class.value,
            alpha(self.company_entry_description, 10),
            alpha(self.company_descriptive_date, 6),
            yymmdd(self.effective_entry_date),
            blank(3),  # settlement date, inserted by the ACH operator
            "1",
            numeric(self.originating_dfi_id, 8),
            numeric(self.batch_number, 7),
        )


class EntryDetailRecord(BaseModel):
    """Record type 6."""

    transaction_code: TransactionCode
    routing_number: str
    account_number: str
    amount_cents: int
    individual_id: str = ""
    individual_name: str = ""
    discretionary_data: str = ""
    addenda_indicator: int = 0
    trace_number: str

    def render(self) -> str:
        return assemble_record(
            "6",
            self.transaction_code.value,
            numeric(self.routing_number[:8], 8),
            numeric(self.routing_number[8:], 1),
            alpha(self.account_number, 17),
            numeric(self.amount_cents, 10),
            alpha(self.individual_id, 15),
            alpha(self.individual_name, 22),
            alpha(self.discretionary_data, 2),
            numeric(self.addenda_indicator, 1),
            numeric(self.trace_number, 15),
        )


class AddendaRecord(BaseModel):
    """Record type 7, addenda type 05 (payment related information)."""

    payment_related_info: str
    entry_detail_sequence: str
    addenda_type_code: str = "05"
    sequence_number: int = 1

    def render(self) -> str:
        return assemble_record(
            "7",
            numeric(self.addenda_type_code, 2),
            alpha(self.payment_related_info, 80),
            numeric(self.sequence_number, 4),
            numeric(self.entry_detail_sequence, 7),
        )


class BatchControlRecord(BaseModel):
    """Record type 8."""

    service_class_code: ServiceClassCode
    entry_addenda_count: int
    entry_hash: int
    total_debit_cents: int
    total_credit_cents: int
    company_identification: str
    originating_dfi_id: str
    batch_number: int

    def render(self) -> str:
        return assemble_record(
            "8",
            self.service_class_code.value,
            numeric(self.entry_addenda_count, 6),
            numeric(self.entry_hash, 10),
            numeric(self.total_debit_cents, 12),
            numeric(self.total_credit_cents, 12),
            alpha(self.company_identification, 10),
            blank(19),  # message authentication code
            blank(6),
            numeric(self.originating_dfi_id, 8),
            numeric(self.batch_number, 7),
        )


class FileControlRecord(BaseModel):
    """Record type 9."""

    batch_count: int
    block_count: int
    entry_addenda_count: int
    entry_hash: int
    total_debit_cents: int
    total_credit_cents: int

    def render(self) -> str:
        return assemble_record(
            "9",
            numeric(self.batch_count, 6),
            numeric(self.block_count, 6),
            numeric(self.entry_addenda_count, 8),
            numeric(self.entry_hash, 10),
            numeric(self.total_debit_cents, 12),
            numeric(self.total_credit_cents, 12),
            blank(39),
        )
