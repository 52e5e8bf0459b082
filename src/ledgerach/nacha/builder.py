"""NachaFileBuilder: assembles batches of entries into a NACHA ACH file.

Lifecycle::

    CREATED -> BATCH_OPEN -> ENTRIES_ADDED -> BATCH_CLOSED (-> BATCH_OPEN ...)
            -> FILE_SERIALIZED

Trace numbers are the originating DFI's 8 digits followed by a 7-digit
sequence that starts at 1 and runs across the whole file; it is not reset
per batch. Only the sequence part is ordered across batches: when batches use
different originating DFIs the full 15-digit values need not increase.
Control totals are accumulated as entries are added and then
recomputed from the stored entries before serialization; any disagreement
aborts generation with ``ControlTotalMismatch``.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from enum import StrEnum
from typing import Optional

import structlog
from pydantic import BaseModel, ConfigDict, field_validator

from ledgerach.core.config import NachaConfig
from ledgerach.core.exceptions import (
    BuilderStateError,
    ControlTotalMismatch,
    EmptyBatch,
    EmptyFile,
    FileCapacityExceeded,
    InvalidAccountNumber,
    InvalidAmount,
    InvalidBatchParams,
    InvalidFileHeader,
    InvalidRoutingNumber,
)
from ledgerach.nacha.fields import block_count, filler_records
from ledgerach.nacha.records import (
    AddendaRecord,
    BatchControlRecord,
    BatchHeaderRecord,
    EntryDetailRecord,
    FileControlRecord,
    FileHeaderRecord,
    ServiceClassCode,
    StandardEntryClass,
    TransactionCode,
)
from ledgerach.nacha.routing import validate_routing_number

logger = structlog.get_logger(__name__)

ENTRY_HASH_MODULUS = 10**10
MAX_AMOUNT_CENTS = 9_999_999_999  # 10-digit amount field
MAX_TRACE_SEQUENCE = 9_999_999
MAX_TOTAL_CENTS = 10**12 - 1  # 12-digit debit/credit totals
MAX_BATCH_ENTRY_ADDENDA = 999_999
MAX_FILE_ENTRY_ADDENDA = 99_999_999
MAX_BATCHES = 999_999
MAX_BLOCKS = 999_999

_MODIFIER_RE = re.compile(r"[A-Z0-9]")


class BuilderState(StrEnum):
    CREATED = "CREATED"
    BATCH_OPEN = "BATCH_OPEN"
    ENTRIES_ADDED = "ENTRIES_ADDED"
    BATCH_CLOSED = "BATCH_CLOSED"
    FILE_SERIALIZED = "FILE_SERIALIZED"


class BatchParams(BaseModel):
    """Company/batch metadata for one batch header."""

    company_name: str
    company_identification: str
    originating_dfi_id: str
    company_entry_description: str
    effective_entry_date: date
    company_descriptive_date: str = ""
    company_discretionary_data: str = ""
    standard_entry_class: StandardEntryClass = StandardEntryClass.CCD


class EntryParams(BaseModel):
    """One payment line item to be turned into an entry detail record."""

    transaction_code: TransactionCode
    routing_number: str
    account_number: str
    amount_cents: int
    receiving_name: str
    vendor_id: str = ""
    addenda: Optional[str] = None
    discretionary_data: str = ""

    @field_validator("amount_cents", mode="before")
    @classmethod
    def check_amount_is_int(cls, v: object) -> object:
        # runs before lax coercion so True, 100.0 and "100" are refused
        if isinstance(v, bool) or not isinstance(v, int):
            raise InvalidAmount(v)
        return v


class BatchHandle(BaseModel):
    """Opaque reference to a batch opened by ``create_batch``."""

    model_config = ConfigDict(frozen=True)

    batch_number: int


class NachaEntry(BaseModel):
    """An entry as placed in the file, with its assigned trace number."""

    batch_number: int
    detail: EntryDetailRecord
    addenda: Optional[AddendaRecord] = None

    @property
    def trace_number(self) -> str:
        return self.detail.trace_number

    @property
    def amount_cents(self) -> int:
        return self.detail.amount_cents

    @property
    def is_debit(self) -> bool:
        return self.detail.transaction_code.is_debit

    @property
    def hash_component(self) -> int:
        return int(self.detail.routing_number[:8])

    def render(self) -> list[str]:
        lines = [self.detail.render()]
        if self.addenda is not None:
            lines.append(self.addenda.render())
        return lines


class ControlTotals(BaseModel):
    """Counts, hash and amounts for a batch or the whole file."""

    entry_count: int = 0
    addenda_count: int = 0
    entry_hash: int = 0  # unreduced; reduce with ENTRY_HASH_MODULUS when rendering
    total_debit_cents: int = 0
    total_credit_cents: int = 0

    @property
    def entry_addenda_count(self) -> int:
        return self.entry_count + self.addenda_count

    def add(self, entry: NachaEntry) -> None:
        self.entry_count += 1
        self.addenda_count += 1 if entry.addenda is not None else 0
        self.entry_hash += entry.hash_component
        if entry.is_debit:
            self.total_debit_cents += entry.amount_cents
        else:
            self.total_credit_cents += entry.amount_cents

    def merge(self, other: ControlTotals) -> None:
        for name in type(self).model_fields:
            setattr(self, name, getattr(self, name) + getattr(other, name))

    @classmethod
    def from_entries(cls, entries: list[NachaEntry]) -> ControlTotals:
        totals = cls()
        for entry in entries:
            totals.add(entry)
        return totals


class FileSummary(BaseModel):
    """Metadata the caller persists alongside the generated file."""

    total_amount_cents: int
    total_debit_cents: int
    total_credit_cents: int
    item_count: int
    entry_addenda_count: int
    entry_hash: int
    batch_count: int
    block_count: int


class _Batch:
    def __init__(self, number: int, params: BatchParams) -> None:
        self.number = number
        self.params = params
        self.entries: list[NachaEntry] = []
        self.totals = ControlTotals()
        self.closed = False

    def header(self, service_class: ServiceClassCode) -> BatchHeaderRecord:
        p = self.params
        return BatchHeaderRecord(
            service_class_code=service_class,
            company_name=p.company_name,
            company_discretionary_data=p.company_discretionary_data,
            company_identification=p.company_identification,
            standard_entry_class=p.standard_entry_class,
            company_entry_description=p.company_entry_description,
            company_descriptive_date=p.company_descriptive_date,
            effective_entry_date=p.effective_entry_date,
            originating_dfi_id=p.originating_dfi_id,
            batch_number=self.number,
        )

    def control(self, service_class: ServiceClassCode, totals: ControlTotals) -> BatchControlRecord:
        return BatchControlRecord(
            service_class_code=service_class,
            entry_addenda_count=totals.entry_addenda_count,
            entry_hash=totals.entry_hash % ENTRY_HASH_MODULUS,
            total_debit_cents=totals.total_debit_cents,
            total_credit_cents=totals.total_credit_cents,
            company_identification=self.params.company_identification,
            originating_dfi_id=self.params.originating_dfi_id,
            batch_number=self.number,
        )


class NachaFileBuilder:
    """Builds one NACHA file. Single owner, single use."""

    def __init__(
        self,
        immediate_destination: str,
        immediate_origin: str,
        *,
        destination_name: str = "",
        origin_name: str = "",
        file_id_modifier: str = "A",
        reference_code: str = "",
        created_at: datetime | None = None,
        line_separator: str = "\n",
    ) -> None:
        if not re.fullmatch(r"[0-9]{9}", immediate_destination or ""):
            raise InvalidFileHeader(
                f"Immediate destination must be 9 digits, got {immediate_destination!r}"
            )
        if not re.fullmatch(r"[0-9]{9,10}", immediate_origin or ""):
            raise InvalidFileHeader(
                f"Immediate origin must be 9 or 10 digits, got {immediate_origin!r}"
            )
        if not _MODIFIER_RE.fullmatch(file_id_modifier or ""):
            raise InvalidFileHeader(f"File id modifier must be A-Z or 0-9, got {file_id_modifier!r}")

        self._header = FileHeaderRecord(
            immediate_destination=immediate_destination,
            immediate_origin=immediate_origin,
            created_at=created_at or datetime.now(),
            file_id_modifier=file_id_modifier,
            destination_name=destination_name,
            origin_name=origin_name,
            reference_code=reference_code,
        )
        self._line_separator = line_separator
        self._batches: list[_Batch] = []
        self._sequence = 0
        self._state = BuilderState.CREATED
        self._content: str | None = None
        self._summary: FileSummary | None = None

    @classmethod
    def from_config(cls, config: NachaConfig, **kwargs) -> NachaFileBuilder:
        """Create a builder with the ODFI identity from ``NachaConfig``."""
        kwargs.setdefault("file_id_modifier", config.default_file_id_modifier)
        kwargs.setdefault("line_separator", config.line_terminator)
        return cls(
            config.immediate_destination,
            config.immediate_origin,
            destination_name=config.immediate_destination_name,
            origin_name=config.immediate_origin_name,
            **kwargs,
        )

    # ---- properties ----

    @property
    def state(self) -> BuilderState:
        return self._state

    @property
    def created_at(self) -> datetime:
        return self._header.created_at

    @property
    def file_id_modifier(self) -> str:
        return self._header.file_id_modifier

    @property
    def entries(self) -> list[NachaEntry]:
        return [entry for batch in self._batches for entry in batch.entries]

    @property
    def summary(self) -> FileSummary:
        if self._summary is None:
            raise BuilderStateError("File has not been generated yet")
        return self._summary

    # ---- batch builder ----

    def create_batch(self, params: BatchParams) -> BatchHandle:
        """Open a new batch, closing the currently open one first."""
        self._require_not_serialized()
        if not re.fullmatch(r"[0-9]{8}", params.originating_dfi_id):
            raise InvalidBatchParams(
                f"Originating DFI id must be 8 digits, got {params.originating_dfi_id!r}"
            )
        if not params.company_identification.strip():
            raise InvalidBatchParams("Company identification is required")
        if not params.company_name.strip():
            raise InvalidBatchParams("Company name is required")

        if len(self._batches) >= MAX_BATCHES:
            raise FileCapacityExceeded("batch count", MAX_BATCHES)

        current = self._current_batch()
        if current is not None:
            self._close(current)

        batch = _Batch(len(self._batches) + 1, params)
        self._batches.append(batch)
        self._state = BuilderState.BATCH_OPEN
        logger.debug("nacha_batch_opened", batch_number=batch.number,
                     sec_code=params.standard_entry_class.value)
        return BatchHandle(batch_number=batch.number)

    def add_entry(self, handle: BatchHandle, params: EntryParams) -> NachaEntry:
        """Validate ``params``, assign the next trace number and append the entry."""
        self._require_not_serialized()
        batch = self._batch_for(handle)
        if batch.closed:
            raise BuilderStateError(f"Batch {batch.number} is closed")

        if not validate_routing_number(params.routing_number):
            raise InvalidRoutingNumber(params.routing_number)
        amount = params.amount_cents
        if isinstance(amount, bool) or not isinstance(amount, int) or not 0 < amount <= MAX_AMOUNT_CENTS:
            raise InvalidAmount(amount)
        if not params.account_number or not params.account_number.strip():
            raise InvalidAccountNumber("Receiving account number is required")
        sequence = self._sequence + 1
        if sequence > MAX_TRACE_SEQUENCE:
            raise FileCapacityExceeded("trace sequence", MAX_TRACE_SEQUENCE)

        trace_number = f"{batch.params.originating_dfi_id}{sequence:07d}"
        addenda = None
        if params.addenda and params.addenda.strip():
            addenda = AddendaRecord(
                payment_related_info=params.addenda.strip(),
                entry_detail_sequence=trace_number[-7:],
            )
        entry = NachaEntry(
            batch_number=batch.number,
            detail=EntryDetailRecord(
                transaction_code=params.transaction_code,
                routing_number=params.routing_number,
                account_number=params.account_number.strip(),
                amount_cents=amount,
                individual_id=params.vendor_id,
                individual_name=params.receiving_name,
                discretionary_data=params.discretionary_data,
                addenda_indicator=1 if addenda is not None else 0,
                trace_number=trace_number,
            ),
            addenda=addenda,
        )
        self._check_capacity(batch, entry)
        self._sequence = sequence
        batch.entries.append(entry)
        batch.totals.add(entry)
        self._state = BuilderState.ENTRIES_ADDED
        logger.debug(
            "nacha_entry_added",
            batch_number=batch.number,
            trace_number=trace_number,
            transaction_code=params.transaction_code.value,
            amount_cents=amount,
        )
        return entry

    def close_batch(self, handle: BatchHandle) -> None:
        self._require_not_serialized()
        batch = self._batch_for(handle)
        if not batch.closed:
            self._close(batch)

    # ---- serializer ----

    def generate_file(self) -> str:
        """Render the file: header, batches, control, then '9' filler."""
        if self._content is not None:
            return self._content
        if not any(batch.entries for batch in self._batches):
            raise EmptyFile("Cannot generate a NACHA file without entries")
        current = self._current_batch()
        if current is not None:
            self._close(current)

        lines = [self._header.render()]
        file_totals = ControlTotals()
        for batch in self._batches:
            totals = self._verified_totals(batch)
            service_class = ServiceClassCode.for_codes(
                [entry.detail.transaction_code for entry in batch.entries]
            )
            lines.append(batch.header(service_class).render())
            for entry in batch.entries:
                lines.extend(entry.render())
            lines.append(batch.control(service_class, totals).render())
            file_totals.merge(totals)

        record_count = len(lines) + 1
        blocks = block_count(record_count)
        lines.append(
            FileControlRecord(
                batch_count=len(self._batches),
                block_count=blocks,
                entry_addenda_count=file_totals.entry_addenda_count,
                entry_hash=file_totals.entry_hash % ENTRY_HASH_MODULUS,
                total_debit_cents=file_totals.total_debit_cents,
                total_credit_cents=file_totals.total_credit_cents,
            ).render()
        )
        lines.extend(filler_records(record_count))

        sep = self._line_separator
        self._content = sep.join(lines) + sep
        self._summary = FileSummary(
            total_amount_cents=file_totals.total_debit_cents + file_totals.total_credit_cents,
            total_debit_cents=file_totals.total_debit_cents,
            total_credit_cents=file_totals.total_credit_cents,
            item_count=file_totals.entry_count,
            entry_addenda_count=file_totals.entry_addenda_count,
            entry_hash=file_totals.entry_hash % ENTRY_HASH_MODULUS,
            batch_count=len(self._batches),
            block_count=blocks,
        )
        self._state = BuilderState.FILE_SERIALIZED
        logger.info(
            "nacha_file_generated",
            batch_count=len(self._batches),
            item_count=file_totals.entry_count,
            record_count=len(lines),
            total_amount_cents=self._summary.total_amount_cents,
        )
        return self._content

    # ---- internals ----

    def _require_not_serialized(self) -> None:
        if self._state is BuilderState.FILE_SERIALIZED:
            raise BuilderStateError("File has already been generated")

    def _batch_for(self, handle: BatchHandle) -> _Batch:
        number = handle.batch_number
        if not 1 <= number <= len(self._batches):
            raise BuilderStateError(f"Unknown batch handle {number}")
        return self._batches[number - 1]

    def _current_batch(self) -> _Batch | None:
        if self._batches and not self._batches[-1].closed:
            return self._batches[-1]
        return None

    def _close(self, batch: _Batch) -> None:
        if not batch.entries:
            raise EmptyBatch(batch.number)
        batch.closed = True
        self._state = BuilderState.BATCH_CLOSED

    def _verified_totals(self, batch: _Batch) -> ControlTotals:
        recomputed = ControlTotals.from_entries(batch.entries)
        for name in ControlTotals.model_fields:
            accumulated = getattr(batch.totals, name)
            expected = getattr(recomputed, name)
            if accumulated != expected:
                raise ControlTotalMismatch(batch.number, name, accumulated, expected)
        return recomputed

    def _record_count(self) -> int:
        return 2 + sum(2 + batch.totals.entry_addenda_count for batch in self._batches)

    def _check_capacity(self, batch: _Batch, entry: NachaEntry) -> None:
        """Refuse an entry whose totals would not fit the control record fields."""
        batch_totals = batch.totals.model_copy()
        batch_totals.add(entry)
        file_totals = ControlTotals()
        for existing in self._batches:
            file_totals.merge(existing.totals)
        file_totals.add(entry)

        if batch_totals.entry_addenda_count > MAX_BATCH_ENTRY_ADDENDA:
            raise FileCapacityExceeded("batch entry/addenda count", MAX_BATCH_ENTRY_ADDENDA)
        if file_totals.entry_addenda_count > MAX_FILE_ENTRY_ADDENDA:
            raise FileCapacityExceeded("file entry/addenda count", MAX_FILE_ENTRY_ADDENDA)
        # file totals bound the batch totals
        for name in ("total_debit_cents", "total_credit_cents"):
            if getattr(file_totals, name) > MAX_TOTAL_CENTS:
                raise FileCapacityExceeded(name, MAX_TOTAL_CENTS)
        added = 2 if entry.addenda is not None else 1
        if block_count(self._record_count() + added) > MAX_BLOCKS:
            raise FileCapacityExceeded("block count", MAX_BLOCKS)
