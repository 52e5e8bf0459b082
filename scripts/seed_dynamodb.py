"""Create the payment batch table and seed a sample approved batch.

Usage:
    python scripts/seed_dynamodb.py --endpoint-url http://localhost:4566
"""

from __future__ import annotations

import argparse
from datetime import date
from typing import Any

import boto3

from ledgerach.models.payments import BatchInput, BatchStatus, PaymentBatch, PaymentItem
from ledgerach.persistence.dynamodb_backend import TABLE_BASE, DynamoDBPaymentBatchStore

SAMPLE_BATCH_ID = "SAMPLE-0001"


def create_tables(ddb: Any, suffix: str = "") -> None:
    """Create the payment batch table. Skips if it already exists."""
    client = ddb.meta.client
    existing = client.list_tables().get("TableNames", [])

    table_name = f"{TABLE_BASE}{suffix}"
    if table_name in existing:
        print(f"  Table {table_name} already exists, skipping")
        return
    client.create_table(
        TableName=table_name,
        KeySchema=[
            {"AttributeName": "PK", "KeyType": "HASH"},
            {"AttributeName": "SK", "KeyType": "RANGE"},
        ],
        AttributeDefinitions=[
            {"AttributeName": "PK", "AttributeType": "S"},
            {"AttributeName": "SK", "AttributeType": "S"},
        ],
        BillingMode="PAY_PER_REQUEST",
    )
    print(f"  Created table {table_name}")


def sample_batch() -> PaymentBatch:
    """An approved two-vendor batch for local end-to-end runs."""
    return PaymentBatch(
        batch_id=SAMPLE_BATCH_ID,
        entity_id="TPF",
        status=BatchStatus.APPROVED,
        payload=BatchInput(
            batch_id=SAMPLE_BATCH_ID,
            company_name="PRINCIPLE FOUNDATION",
            company_identification="1234567890",
            originating_dfi_id="02100002",
            company_entry_description="VENDOR PAY",
            effective_entry_date=date.today(),
            is_production=False,
            items=[
                PaymentItem(
                    item_id="ITEM-1", vendor_id="V-100", vendor_name="Acme Office Supply",
                    routing_number="021000021", account_number="000123456789",
                    amount_cents=125000, memo="INV 2024-118",
                ),
                PaymentItem(
                    item_id="ITEM-2", vendor_id="V-200", vendor_name="Greenway Janitorial",
                    routing_number="011000015", account_number="9876543210",
                    account_type="savings", amount_cents=48050,
                ),
            ],
        ),
    )


def seed_sample_batch(suffix: str = "", region: str = "us-east-1",
                      endpoint_url: str | None = None) -> None:
    store = DynamoDBPaymentBatchStore(table_suffix=suffix, region=region, endpoint_url=endpoint_url)
    store.put_batch(sample_batch())
    print(f"  Seeded approved batch {SAMPLE_BATCH_ID}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed DynamoDB tables for ledgerach")
    parser.add_argument("--endpoint-url", default=None, help="DynamoDB endpoint (e.g. http://localhost:4566)")
    parser.add_argument("--table-suffix", default="", help="Table name suffix (e.g. -dev)")
    parser.add_argument("--region", default="us-east-1", help="AWS region")
    args = parser.parse_args()

    kwargs: dict[str, Any] = {"region_name": args.region}
    if args.endpoint_url:
        kwargs["endpoint_url"] = args.endpoint_url

    ddb = boto3.resource("dynamodb", **kwargs)

    print("Creating tables...")
    create_tables(ddb, suffix=args.table_suffix)

    print("Seeding data...")
    seed_sample_batch(args.table_suffix, args.region, args.endpoint_url)

    print("Done!")


if __name__ == "__main__":
    main()
