"""Attention endpoints polled by the rendering layer."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from vigil.engine.attention import AttentionEngine
from vigil.models.notifications import (
    DispatchResult,
    EngineState,
    NotificationPreferences,
    PreferencesUpdate,
    PushMessage,
    UrgencyReport,
)
from vigil.models.work_item import WorkItem

router = APIRouter(tags=["attention"])


class ItemsPayload(BaseModel):
    items: list[WorkItem] = Field(default_factory=list)


class AcknowledgeAllPayload(BaseModel):
    item_ids: list[str] = Field(default_factory=list)


class StateResponse(EngineState):
    title: str = ""
    tab_alert_active: bool = False


class EvaluateResponse(BaseModel):
    report: UrgencyReport
    dispatch: DispatchResult


def _engine(request: Request) -> AttentionEngine:
    return request.app.state.engine


@router.get("/state")
async def get_state(request: Request) -> StateResponse:
    engine = _engine(request)
    return StateResponse(
        **engine.state().model_dump(),
        title=request.app.state.title.get(),
        tab_alert_active=engine.tab_alert.is_active,
    )


@router.post("/check")
async def check(payload: ItemsPayload, request: Request) -> UrgencyReport:
    """Classify without escalating."""
    return _engine(request).check_for_urgent_items(payload.items)


@router.post("/evaluate")
async def evaluate(payload: ItemsPayload, request: Request) -> EvaluateResponse:
    """Classify and fire every enabled tier for the urgent set."""
    report, dispatch = _engine(request).evaluate(payload.items)
    return EvaluateResponse(report=report, dispatch=dispatch)


@router.post("/acknowledge/{item_id}")
async def acknowledge(item_id: str, request: Request) -> dict[str, Any]:
    engine = _engine(request)
    engine.acknowledge_item(item_id)
    return {"acknowledged": sorted(engine.acknowledged_items)}


@router.post("/acknowledge-all")
async def acknowledge_all(payload: AcknowledgeAllPayload, request: Request) -> dict[str, Any]:
    engine = _engine(request)
    engine.acknowledge_all(payload.item_ids)
    return {"acknowledged": sorted(engine.acknowledged_items)}


@router.delete("/acknowledged")
async def reset_acknowledged(request: Request) -> dict[str, Any]:
    engine = _engine(request)
    engine.reset_acknowledged_items()
    return {"acknowledged": []}


@router.patch("/preferences")
async def update_preferences(payload: PreferencesUpdate, request: Request) -> NotificationPreferences:
    return _engine(request).update_preferences(payload)


@router.post("/permissions/push")
async def request_push_permission(request: Request) -> dict[str, bool]:
    granted = await _engine(request).request_notification_permission()
    return {"granted": granted}


@router.post("/permissions/audio")
async def enable_audio(request: Request) -> dict[str, bool]:
    _engine(request).enable_audio_notifications()
    return {"granted": True}


@router.get("/notifications")
async def list_notifications(request: Request) -> list[PushMessage]:
    return [handle.message for handle in request.app.state.notifier.shown if not handle.closed]
