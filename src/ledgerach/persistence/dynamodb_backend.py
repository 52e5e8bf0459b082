"""DynamoDB backend implementing IPaymentBatchStore."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

import boto3
from botocore.exceptions import ClientError

from ledgerach.core.exceptions import (
    BatchNotFoundError,
    BatchStatusConflictError,
    BatchStoreError,
)
from ledgerach.models.payments import BatchInput, BatchStatus, NachaFileResult, PaymentBatch

TABLE_BASE = "ledgerach-payment-batches"


def _decode_decimals(item: dict[str, Any]) -> dict[str, Any]:
    """Convert Decimal values in a DynamoDB item to int/float."""
    out: dict[str, Any] = {}
    for k, v in item.items():
        if isinstance(v, Decimal):
            out[k] = int(v) if v == int(v) else float(v)
        elif isinstance(v, dict):
            out[k] = _decode_decimals(v)
        else:
            out[k] = v
    return out


def _batch_key(batch_id: str) -> dict[str, str]:
    return {"PK": f"BATCH#{batch_id}", "SK": "META"}


class DynamoDBPaymentBatchStore:
    """Production IPaymentBatchStore backed by a single PK/SK DynamoDB table.

    The batch payload is stored as a JSON document in ``payloadJson``; status
    transitions use conditional updates so a batch is processed at most once.
    """

    def __init__(self, table_suffix: str = "", region: str = "us-east-1",
                 endpoint_url: str | None = None) -> None:
        kwargs: dict = {"region_name": region}
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url
        self._ddb = boto3.resource("dynamodb", **kwargs)
        self._table = self._ddb.Table(f"{TABLE_BASE}{table_suffix}")

    def put_batch(self, batch: PaymentBatch) -> None:
        item = {
            **_batch_key(batch.batch_id),
            "batchId": batch.batch_id,
            "entityId": batch.entity_id,
            "status": batch.status.value,
            "payloadJson": batch.payload.model_dump_json(),
        }
        try:
            self._table.put_item(Item=item)
        except ClientError as exc:
            raise BatchStoreError(f"DynamoDB put failed for batch {batch.batch_id}: {exc}") from exc

    def get_batch(self, batch_id: str) -> PaymentBatch:
        try:
            resp = self._table.get_item(Key=_batch_key(batch_id))
        except ClientError as exc:
            raise BatchStoreError(f"DynamoDB get failed for batch {batch_id}: {exc}") from exc
        item = resp.get("Item")
        if item is None:
            raise BatchNotFoundError(f"No payment batch {batch_id!r}")
        item = _decode_decimals(item)
        processed_at = item.get("processedAt")
        return PaymentBatch(
            batch_id=item["batchId"],
            entity_id=item.get("entityId", ""),
            status=BatchStatus(item["status"]),
            payload=BatchInput.model_validate_json(item["payloadJson"]),
            file_name=item.get("fileName", ""),
            storage_path=item.get("storagePath", ""),
            total_amount_cents=item.get("totalAmountCents", 0),
            item_count=item.get("itemCount", 0),
            trace_numbers=item.get("traceNumbers", {}),
            processed_at=datetime.fromisoformat(processed_at) if processed_at else None,
        )

    def mark_processed(self, batch_id: str, result: NachaFileResult) -> None:
        """Transition approved -> processed, recording file metadata and trace numbers."""
        try:
            self._table.update_item(
                Key=_batch_key(batch_id),
                UpdateExpression=(
                    "SET #s = :processed, fileName = :file, storagePath = :path, "
                    "totalAmountCents = :total, itemCount = :count, entryHash = :hash, "
                    "traceNumbers = :traces, processedAt = :at"
                ),
                ConditionExpression="#s = :approved",
                ExpressionAttributeNames={"#s": "status"},
                ExpressionAttributeValues={
                    ":processed": BatchStatus.PROCESSED.value,
                    ":approved": BatchStatus.APPROVED.value,
                    ":file": result.file_name,
                    ":path": result.storage_path,
                    ":total": result.total_amount_cents,
                    ":count": result.item_count,
                    ":hash": result.entry_hash,
                    ":traces": dict(result.trace_numbers),
                    ":at": datetime.now().isoformat(),
                },
            )
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException":
                raise BatchStatusConflictError(
                    f"Batch {batch_id} is no longer approved, cannot mark processed"
                ) from exc
            raise BatchStoreError(f"DynamoDB update failed for batch {batch_id}: {exc}") from exc
