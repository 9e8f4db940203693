from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status

from ..exceptions import ScreenStateError
from ..models import (
    Direction,
    DirectionUpdate,
    ParsedTransaction,
    ScreenSnapshot,
    SearchUpdate,
)
from ..screen import ScreenController


router = APIRouter()


def get_screen(request: Request) -> ScreenController:
    return request.app.state.screen


@router.get("/health")
async def health_check():
    return {"status": "ok"}


@router.get("/screen", response_model=ScreenSnapshot)
async def get_screen_snapshot(screen: ScreenController = Depends(get_screen)) -> ScreenSnapshot:
    """Everything the expenses screen renders: phase, controls and cards."""

    return screen.snapshot()


@router.get("/transactions", response_model=list[ParsedTransaction])
async def list_transactions(
    direction: Optional[Direction] = None,
    search: Optional[str] = None,
    screen: ScreenController = Depends(get_screen),
) -> list[ParsedTransaction]:
    """Return the visible transactions.

    ``direction`` and ``search`` override the screen's own controls for
    this request only.
    """

    return screen.visible(direction=direction, search=search)


@router.put("/screen/filter", response_model=ScreenSnapshot)
async def set_filter(
    payload: DirectionUpdate,
    screen: ScreenController = Depends(get_screen),
) -> ScreenSnapshot:
    screen.set_direction(payload.direction)
    return screen.snapshot()


@router.put("/screen/search", response_model=ScreenSnapshot)
async def set_search(
    payload: SearchUpdate,
    screen: ScreenController = Depends(get_screen),
) -> ScreenSnapshot:
    screen.set_search(payload.query)
    return screen.snapshot()


@router.post("/permission/request", response_model=ScreenSnapshot)
async def request_permission(screen: ScreenController = Depends(get_screen)) -> ScreenSnapshot:
    """The "Request Permission" button shown after a denial."""

    await screen.retry_permission()
    return screen.snapshot()


@router.post("/refresh", response_model=ScreenSnapshot)
async def refresh_messages(screen: ScreenController = Depends(get_screen)) -> ScreenSnapshot:
    try:
        await screen.refresh()
    except ScreenStateError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return screen.snapshot()
