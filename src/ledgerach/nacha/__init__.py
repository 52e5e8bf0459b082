"""NACHA ACH file generation: routing validation, field formatting, records, builder."""

from __future__ import annotations

from ledgerach.nacha.builder import (
    BatchHandle,
    BatchParams,
    BuilderState,
    EntryParams,
    FileSummary,
    NachaEntry,
    NachaFileBuilder,
)
from ledgerach.nacha.records import (
    AccountType,
    ServiceClassCode,
    StandardEntryClass,
    TransactionCode,
)
from ledgerach.nacha.routing import routing_check_digit, validate_routing_number

__all__ = [
    "AccountType",
    "BatchHandle",
    "BatchParams",
    "BuilderState",
    "EntryParams",
    "FileSummary",
    "NachaEntry",
    "NachaFileBuilder",
    "ServiceClassCode",
    "StandardEntryClass",
    "TransactionCode",
    "routing_check_digit",
    "validate_routing_number",
]
