from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request

from runtime.context import RuntimeContext
from runtime.services import EditService, GestureService
from ..api_models import (
    ActiveIndexRequest,
    DetailsRequest,
    EditorOpenRequest,
    GestureResponse,
    HealthResponse,
    PointerRequest,
    RemoveResponse,
    StateResponse,
    TargetRequest,
)

router = APIRouter()


def get_context(request: Request) -> RuntimeContext:
    return request.app.state.ctx


def _state_response(ctx: RuntimeContext) -> StateResponse:
    """Build the render state: counters with progress, selection, nav hints, feedback."""
    store = ctx.store
    feedback = ctx.feedback.current
    return StateResponse(
        counters=[
            {
                "id": c.id,
                "count": c.count,
                "target_value": c.target_value,
                "name": c.name,
                "color": c.color,
                "progress": c.progress,
            }
            for c in store.counters
        ],
        active_index=store.active_index,
        can_remove=store.can_remove,
        has_previous=store.has_previous,
        has_next=store.has_next,
        editor_open=ctx.editor_open,
        editing_counter_id=ctx.editing_counter_id,
        feedback=feedback.to_dict() if feedback else None,
    )


def _require_counter(ctx: RuntimeContext, counter_id: str) -> None:
    if ctx.store.get_counter(counter_id) is None:
        raise HTTPException(status_code=404, detail=f"Unknown counter: {counter_id}")


@router.get("/health", response_model=HealthResponse)
def health(ctx: RuntimeContext = Depends(get_context)):
    return {
        "status": "running",
        "counters": len(ctx.store),
        "storage_backend": ctx.config.storage.backend,
        "write_failures": ctx.persistence.writer.failures,
    }


@router.get("/counters", response_model=StateResponse)
def get_state(ctx: RuntimeContext = Depends(get_context)):
    with ctx.lock:
        return _state_response(ctx)


@router.post("/counters", response_model=StateResponse)
def add_counter(ctx: RuntimeContext = Depends(get_context)):
    with ctx.lock:
        ctx.store.add_counter()
        return _state_response(ctx)


@router.delete("/counters/{counter_id}", response_model=RemoveResponse)
def remove_counter(counter_id: str, ctx: RuntimeContext = Depends(get_context)):
    with ctx.lock:
        removed = ctx.store.remove_counter(counter_id)
        return {"removed": removed, "state": _state_response(ctx)}


@router.patch("/counters/{counter_id}", response_model=StateResponse)
def update_details(counter_id: str, body: DetailsRequest, ctx: RuntimeContext = Depends(get_context)):
    _require_counter(ctx, counter_id)
    EditService(ctx).submit_details(counter_id, name=body.name, color=body.color)
    with ctx.lock:
        return _state_response(ctx)


@router.put("/counters/{counter_id}/target", response_model=StateResponse)
def update_target(counter_id: str, body: TargetRequest, ctx: RuntimeContext = Depends(get_context)):
    _require_counter(ctx, counter_id)
    if not EditService(ctx).submit_target(counter_id, body.target_value):
        raise HTTPException(status_code=400, detail="target_value must be a positive integer")
    with ctx.lock:
        return _state_response(ctx)


@router.put("/active", response_model=StateResponse)
def set_active(body: ActiveIndexRequest, ctx: RuntimeContext = Depends(get_context)):
    with ctx.lock:
        ctx.store.set_active_counter_index(body.index)
        return _state_response(ctx)


@router.post("/editor/open", response_model=StateResponse)
def open_editor(body: EditorOpenRequest, ctx: RuntimeContext = Depends(get_context)):
    if body.counter_id is not None:
        _require_counter(ctx, body.counter_id)
    EditService(ctx).open_editor(body.counter_id)
    with ctx.lock:
        return _state_response(ctx)


@router.post("/editor/close", response_model=StateResponse)
def close_editor(ctx: RuntimeContext = Depends(get_context)):
    EditService(ctx).close_editor()
    with ctx.lock:
        return _state_response(ctx)


@router.post("/gestures", response_model=GestureResponse)
async def submit_gesture(request: Request):
    """
    Classify and apply one drag event snapshot.

    The body is read raw: a malformed snapshot is not an HTTP error, it just
    resolves to the "none" intent.
    """
    ctx = get_context(request)
    payload: Any
    try:
        payload = await request.json()
    except ValueError:
        logging.debug("Gesture body is not JSON; treating as no-op")
        payload = None
    intent = GestureService(ctx).handle_event(payload)
    with ctx.lock:
        return {"intent": intent.to_dict(), "state": _state_response(ctx)}


@router.post("/pointer", response_model=GestureResponse)
def submit_pointer(body: PointerRequest, ctx: RuntimeContext = Depends(get_context)):
    try:
        intent = GestureService(ctx).handle_pointer(
            body.phase, body.x, body.y, body.t, excluded=body.excluded
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    with ctx.lock:
        return {"intent": intent.to_dict(), "state": _state_response(ctx)}
