"""ACH file generation and download endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import Response

from ledgerach.services.ach_file_service import AchFileService

router = APIRouter(tags=["ach"])


def _service(request: Request) -> AchFileService:
    return request.app.state.ach_service


@router.post("/batches/{batch_id}/ach-file", status_code=201)
def generate_ach_file(batch_id: str, request: Request) -> dict:
    """Generate and store the NACHA file for an approved batch."""
    result = _service(request).generate_for_batch(batch_id)
    return result.metadata()


@router.get("/batches/{batch_id}/ach-file")
def download_ach_file(batch_id: str, request: Request) -> Response:
    file_name, data = _service(request).download_for_batch(batch_id)
    return Response(
        content=data,
        media_type="text/plain",
        headers={"Content-Disposition": f'attachment; filename="{file_name}"'},
    )
