"""Pluggable persistence backends behind Protocol interfaces."""

from __future__ import annotations

from ledgerach.core.config import AppSettings
from ledgerach.persistence.dynamodb_backend import DynamoDBPaymentBatchStore
from ledgerach.persistence.redis_backend import RedisLockBackend
from ledgerach.persistence.s3_backend import S3FileStore


def create_persistence(settings: AppSettings | None = None):
    """Create wired-up persistence backends from application settings.

    Returns:
        Tuple of (batch_store, file_store, locks).
    """
    if settings is None:
        settings = AppSettings()

    batch_store = DynamoDBPaymentBatchStore(
        table_suffix=settings.dynamodb.table_suffix,
        region=settings.dynamodb.region,
        endpoint_url=settings.dynamodb.endpoint_url,
    )

    file_store = S3FileStore(
        bucket=settings.s3.bucket,
        region=settings.s3.region,
        endpoint_url=settings.s3.endpoint_url,
    )

    locks = RedisLockBackend(
        host=settings.redis.host,
        port=settings.redis.port,
        db=settings.redis.db,
    )

    return batch_store, file_store, locks
