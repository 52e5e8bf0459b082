"""Tests for payment batch models."""

from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from ledgerach.models.payments import BatchInput, NachaFileResult, VendorBankAccount
from ledgerach.nacha.records import TransactionCode
from tests.fakes import CHASE, make_item


def test_vendor_bank_account_accepts_valid_routing():
    account = VendorBankAccount(vendor_id="V-1", routing_number=CHASE, account_number="42")
    assert account.routing_number == CHASE


def test_vendor_bank_account_rejects_bad_checksum():
    with pytest.raises(ValidationError):
        VendorBankAccount(vendor_id="V-1", routing_number="021000020", account_number="42")


def test_item_transaction_code_follows_account_type():
    assert make_item().transaction_code is TransactionCode.CHECKING_CREDIT
    assert make_item(account_type="savings").transaction_code is TransactionCode.SAVINGS_CREDIT
    assert make_item(debit=True).transaction_code is TransactionCode.CHECKING_DEBIT


def test_entry_description_limited_to_ten_characters():
    with pytest.raises(ValidationError):
        BatchInput(
            batch_id="B", company_name="X", company_identification="1",
            originating_dfi_id="02100002", company_entry_description="VENDORPAYMT",
            effective_entry_date=date(2024, 1, 2),
        )


def test_result_metadata_excludes_file_body():
    result = NachaFileResult(
        batch_id="B-1", file_name="f.txt", content="1" * 94, created_at="2024-03-15T09:30:00",
        total_amount_cents=1, total_debit_cents=0, total_credit_cents=1, item_count=1,
        entry_hash=1100001, trace_numbers={"ITEM-1": "021000020000001"},
    )
    meta = result.metadata()
    assert "content" not in meta
    assert meta["trace_numbers"] == {"ITEM-1": "021000020000001"}
