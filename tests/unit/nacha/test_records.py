"""Tests for NACHA record layouts."""

from __future__ import annotations

from datetime import date, datetime

from ledgerach.nacha.records import (
    AccountType,
    AddendaRecord,
    BatchControlRecord,
    BatchHeaderRecord,
    EntryDetailRecord,
    FileControlRecord,
    FileHeaderRecord,
    ServiceClassCode,
    TransactionCode,
)


def test_file_header_layout():
    line = FileHeaderRecord(
        immediate_destination="021000021",
        immediate_origin="1234567890",
        created_at=datetime(2024, 3, 15, 9, 30),
        file_id_modifier="b",
        destination_name="Chase",
        origin_name="Principle Foundation",
        reference_code="TEST",
    ).render()
    assert len(line) == 94
    assert line[:3] == "101"
    assert line[3:13] == " 021000021"
    assert line[13:23] == "1234567890"
    assert line[23:33] == "2403150930"
    assert line[33] == "B"
    assert line[34:40] == "094101"
    assert line[40:63] == "CHASE".ljust(23)
    assert line[86:94] == "TEST    "


def test_nine_digit_origin_is_space_padded():
    line = FileHeaderRecord(
        immediate_destination="021000021",
        immediate_origin="123456789",
        created_at=datetime(2024, 3, 15, 9, 30),
    ).render()
    assert line[13:23] == " 123456789"


def test_batch_header_layout():
    line = BatchHeaderRecord(
        service_class_code=ServiceClassCode.CREDITS_ONLY,
        company_name="Principle Foundation Inc",
        company_identification="1234567890",
        company_entry_description="Vendor Pay",
        company_descriptive_date="MAR 24",
        effective_entry_date=date(2024, 3, 18),
        originating_dfi_id="02100002",
        batch_number=1,
    ).render()
    assert len(line) == 94
    assert line[:4] == "5220"
    assert line[4:20] == "PRINCIPLE FOUNDA"
    assert line[40:50] == "1234567890"
    assert line[50:53] == "CCD"
    assert line[53:63] == "VENDOR PAY"
    assert line[63:69] == "MAR 24"
    assert line[69:75] == "240318"
    assert line[75:78] == "   "
    assert line[78] == "1"
    assert line[79:87] == "02100002"
    assert line[87:94] == "0000001"


def test_entry_detail_layout():
    line = EntryDetailRecord(
        transaction_code=TransactionCode.SAVINGS_CREDIT,
        routing_number="011000015",
        account_number="9876543210",
        amount_cents=48050,
        individual_id="V-200",
        individual_name="Greenway Janitorial",
        addenda_indicator=1,
        trace_number="021000020000007",
    ).render()
    assert len(line) == 94
    assert line[:3] == "632"
    assert line[3:11] == "01100001"
    assert line[11] == "5"
    assert line[12:29] == "9876543210".ljust(17)
    assert line[29:39] == "0000048050"
    assert line[39:54] == "V-200".ljust(15)
    assert line[54:76] == "GREENWAY JANITORIAL".ljust(22)
    assert line[78] == "1"
    assert line[79:94] == "021000020000007"


def test_addenda_layout():
    line = AddendaRecord(payment_related_info="inv 118", entry_detail_sequence="0000007").render()
    assert len(line) == 94
    assert line[:3] == "705"
    assert line[3:83] == "INV 118".ljust(80)
    assert line[83:87] == "0001"
    assert line[87:94] == "0000007"


def test_control_records_layout():
    batch = BatchControlRecord(
        service_class_code=ServiceClassCode.MIXED,
        entry_addenda_count=3,
        entry_hash=3200003,
        total_debit_cents=500,
        total_credit_cents=10000,
        company_identification="1234567890",
        originating_dfi_id="02100002",
        batch_number=2,
    ).render()
    assert len(batch) == 94
    assert batch[:4] == "8200"
    assert batch[4:10] == "000003"
    assert batch[10:20] == "0003200003"
    assert batch[20:32] == "000000000500"
    assert batch[32:44] == "000000010000"
    assert batch[54:79] == " " * 25
    assert batch[87:94] == "0000002"

    file_control = FileControlRecord(
        batch_count=2, block_count=1, entry_addenda_count=3, entry_hash=3200003,
        total_debit_cents=500, total_credit_cents=10000,
    ).render()
    assert len(file_control) == 94
    assert file_control[:13] == "9000002000001"
    assert file_control[13:21] == "00000003"
    assert file_control[55:] == " " * 39


def test_transaction_code_for_account():
    assert TransactionCode.for_account(AccountType.CHECKING) is TransactionCode.CHECKING_CREDIT
    assert TransactionCode.for_account("savings") is TransactionCode.SAVINGS_CREDIT
    assert TransactionCode.for_account("checking", debit=True) is TransactionCode.CHECKING_DEBIT
    assert TransactionCode.SAVINGS_DEBIT.is_debit
    assert not TransactionCode.CHECKING_CREDIT.is_debit


def test_service_class_follows_entry_polarity():
    credit, debit = TransactionCode.CHECKING_CREDIT, TransactionCode.SAVINGS_DEBIT
    assert ServiceClassCode.for_codes([credit, credit]) is ServiceClassCode.CREDITS_ONLY
    assert ServiceClassCode.for_codes([debit]) is ServiceClassCode.DEBITS_ONLY
    assert ServiceClassCode.for_codes([credit, debit]) is ServiceClassCode.MIXED
