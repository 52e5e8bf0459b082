"""ledgerach exception hierarchy.

Input errors (``NachaInputError``) mean the caller's data must be fixed.
Internal errors (``NachaInternalError``) mean the serializer itself is wrong
and the file must not be emitted.
"""

from __future__ import annotations


class LedgerAchError(Exception):
    """Base exception for all ledgerach errors."""


# ---------------------------------------------------------------------------
# Input validation errors
# ---------------------------------------------------------------------------

class NachaInputError(LedgerAchError):
    """Caller-supplied data cannot be turned into a NACHA file."""


class InvalidRoutingNumber(NachaInputError):
    """Routing number is not 9 digits or fails the ABA checksum."""

    def __init__(self, routing_number: object) -> None:
        self.routing_number = routing_number
        super().__init__(f"Invalid routing number: {routing_number!r}")


class InvalidAmount(NachaInputError):
    """Entry amount is not a positive integer number of cents."""

    def __init__(self, amount: object) -> None:
        self.amount = amount
        super().__init__(f"Amount must be a positive integer of cents, got {amount!r}")


class InvalidAccountNumber(NachaInputError):
    """Receiving account number is missing."""


class InvalidFileHeader(NachaInputError):
    """Immediate destination/origin or file id modifier is malformed."""


class InvalidBatchParams(NachaInputError):
    """Originating DFI, company identification or batch text is malformed."""


class EmptyBatch(NachaInputError):
    """A batch was closed without any entries."""

    def __init__(self, batch_number: int) -> None:
        self.batch_number = batch_number
        super().__init__(f"Batch {batch_number} has no entries")


class EmptyFile(NachaInputError):
    """File generation was requested with no batches."""


class BuilderStateError(NachaInputError):
    """Operation not allowed in the builder's current lifecycle state."""


class FileCapacityExceeded(NachaInputError):
    """Adding the entry or batch would overflow a fixed-width control field."""

    def __init__(self, field: str, limit: int) -> None:
        self.field = field
        self.limit = limit
        super().__init__(f"{field} would exceed {limit}, split the payments across files")


# ---------------------------------------------------------------------------
# Internal consistency errors
# ---------------------------------------------------------------------------

class NachaInternalError(LedgerAchError):
    """Defect in the file serializer; the file must not be emitted."""


class ControlTotalMismatch(NachaInternalError):
    """Accumulated control totals disagree with totals recomputed from entries."""

    def __init__(self, batch_number: int, field: str, accumulated: int, recomputed: int) -> None:
        self.batch_number = batch_number
        self.field = field
        self.accumulated = accumulated
        self.recomputed = recomputed
        super().__init__(
            f"Batch {batch_number} {field} mismatch: "
            f"accumulated={accumulated} recomputed={recomputed}"
        )


class RecordLengthError(NachaInternalError):
    """A rendered record is not exactly 94 characters."""

    def __init__(self, record_type: str, length: int) -> None:
        self.record_type = record_type
        self.length = length
        super().__init__(f"Record type {record_type!r} rendered {length} characters, expected 94")


class FieldOverflowError(NachaInternalError):
    """A numeric value does not fit its fixed-width field."""


# ---------------------------------------------------------------------------
# Batch lifecycle (collaborator) errors
# ---------------------------------------------------------------------------

class BatchNotFoundError(LedgerAchError):
    """Payment batch does not exist in the batch store."""


class BatchStatusError(LedgerAchError):
    """Payment batch is not in the status the operation requires."""

    def __init__(self, batch_id: str, status: str, expected: str) -> None:
        self.batch_id = batch_id
        self.status = status
        self.expected = expected
        super().__init__(f"Batch {batch_id} is {status!r}, expected {expected!r}")


class BatchNotApprovedError(BatchStatusError):
    def __init__(self, batch_id: str, status: str) -> None:
        super().__init__(batch_id, status, "approved")


class BatchNotProcessedError(BatchStatusError):
    def __init__(self, batch_id: str, status: str) -> None:
        super().__init__(batch_id, status, "processed")


class BatchLockedError(LedgerAchError):
    """Another request is already generating a file for this batch."""

    def __init__(self, batch_id: str) -> None:
        self.batch_id = batch_id
        super().__init__(f"ACH file generation already in progress for batch {batch_id}")


class BatchStatusConflictError(LedgerAchError):
    """Batch status changed between the check and the conditional update."""


class FileIdModifierExhausted(LedgerAchError):
    """All 36 file id modifiers are used for the creation date."""


# ---------------------------------------------------------------------------
# Backend errors
# ---------------------------------------------------------------------------

class FileStoreError(LedgerAchError):
    """File store (S3) operation failed."""


class StoredFileNotFoundError(FileStoreError):
    """Requested file does not exist in the file store."""


class LockError(LedgerAchError):
    """Lock backend (Redis) operation failed."""


class BatchStoreError(LedgerAchError):
    """Payment batch store (DynamoDB) operation failed."""
