"""
Application layer for sniview.

Contains use cases that orchestrate domain logic with infrastructure.
Use cases depend on ports (interfaces), not concrete implementations.
"""

from sniview.application.ports import (
    LineSourcePort,
    LineStorePort,
    RulesApiPort,
    SetsApiPort,
)
from sniview.application.transport import (
    LineReceived,
    StreamFailed,
    StreamClosed,
    EventChannel,
)
from sniview.application.event_store import EventStore
from sniview.application.live_view import LiveEventsView, ViewRows
from sniview.application.promote import (
    PromotionState,
    PromoteUseCase,
    PromoteDomainUseCase,
    PromoteIpUseCase,
)

__all__ = [
    # Ports
    "LineSourcePort",
    "LineStorePort",
    "RulesApiPort",
    "SetsApiPort",
    # Transport
    "LineReceived",
    "StreamFailed",
    "StreamClosed",
    "EventChannel",
    # Use cases
    "EventStore",
    "LiveEventsView",
    "ViewRows",
    "PromotionState",
    "PromoteUseCase",
    "PromoteDomainUseCase",
    "PromoteIpUseCase",
]
