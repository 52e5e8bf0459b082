"""Integration tests for the DynamoDB batch store and S3 file store against LocalStack."""

from __future__ import annotations

from datetime import datetime

import pytest

from ledgerach.core.config import NachaConfig
from ledgerach.core.exceptions import BatchStatusConflictError
from ledgerach.models.payments import BatchStatus
from ledgerach.persistence.dynamodb_backend import DynamoDBPaymentBatchStore
from ledgerach.persistence.s3_backend import S3FileStore
from ledgerach.services.ach_file_service import build_nacha_file
from tests.fakes import make_batch
from tests.integration.conftest import LOCALSTACK_URL, skip_no_localstack


@skip_no_localstack
class TestDynamoDBIntegration:
    @pytest.fixture
    def store(self, seeded_tables):
        return DynamoDBPaymentBatchStore(
            table_suffix=seeded_tables,
            region="us-east-1",
            endpoint_url=LOCALSTACK_URL,
        )

    def test_sample_batch_from_seed(self, store):
        batch = store.get_batch("SAMPLE-0001")
        assert batch.payload.items[0].vendor_name == "Acme Office Supply"

    def test_mark_processed_once(self, store):
        batch_id = f"INT-{datetime.now():%H%M%S%f}"
        store.put_batch(make_batch(batch_id))
        result = build_nacha_file(store.get_batch(batch_id).payload, NachaConfig(line_separator="lf"))

        store.mark_processed(batch_id, result)
        assert store.get_batch(batch_id).status is BatchStatus.PROCESSED
        with pytest.raises(BatchStatusConflictError):
            store.mark_processed(batch_id, result)


@skip_no_localstack
class TestS3Integration:
    def test_write_then_list(self, localstack_bucket):
        files = S3FileStore(bucket=localstack_bucket, region="us-east-1", endpoint_url=LOCALSTACK_URL)
        path = f"ach-files/test/{datetime.now():%Y%m%d%H%M%S%f}/ACH.txt"
        files.write(path, b"9" * 94 + b"\n")
        assert path in files.list_files(path.rsplit("/", 1)[0] + "/")
        assert files.read(path) == b"9" * 94 + b"\n"
