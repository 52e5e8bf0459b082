"""Type aliases used across ledgerach."""

from __future__ import annotations

from typing import Any

JsonDict = dict[str, Any]
BatchId = str
ItemId = str
RoutingNumber = str
TraceNumber = str
Cents = int
