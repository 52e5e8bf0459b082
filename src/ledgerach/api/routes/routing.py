"""Routing number check used when vendors register bank accounts."""

from __future__ import annotations

from fastapi import APIRouter

from ledgerach.nacha.routing import validate_routing_number

router = APIRouter(tags=["routing"])


@router.get("/routing-numbers/{routing_number}")
async def check_routing_number(routing_number: str) -> dict:
    return {"routing_number": routing_number, "valid": validate_routing_number(routing_number)}
