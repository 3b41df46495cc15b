"""Player endpoints: join the lobby, ready up, pick cards, fetch state."""

import logging

from fastapi import APIRouter, Depends, Query, Response

from app.models import ErrorResponse, InitStateResponse, JoinResponse, PickResponse, ReadyResponse
from app.store import TOKEN_COOKIE, get_store, player_token
from services.session_store import SessionStore

router = APIRouter(tags=["players"])
logger = logging.getLogger(__name__)

TOKEN_MAX_AGE = 1209600   # two weeks


@router.post(
    "/join",
    response_model=JoinResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def join(
    response: Response,
    name: str = Query(..., min_length=1, max_length=64),
    id: str | None = Query(default=None, description="Game id the client expects to join"),
    store: SessionStore = Depends(get_store),
) -> JoinResponse:
    token = await store.join(name, session_id=id)
    response.set_cookie(
        TOKEN_COOKIE,
        token,
        max_age=TOKEN_MAX_AGE,
        samesite="none",
        secure=True,
        httponly=True,
    )
    return JoinResponse(token=token)


@router.post("/ready", response_model=ReadyResponse, responses={401: {"model": ErrorResponse}})
async def ready(
    token: str | None = Depends(player_token),
    store: SessionStore = Depends(get_store),
) -> ReadyResponse:
    status = await store.mark_ready(token)
    return ReadyResponse(status=status)


@router.post(
    "/pick_card",
    response_model=PickResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def pick_card(
    card: int = Query(..., description="Board slot to flip"),
    token: str | None = Depends(player_token),
    store: SessionStore = Depends(get_store),
) -> PickResponse:
    outcome = await store.pick(token, card)
    return PickResponse(
        slot=outcome.slot,
        img_path=outcome.image_id,
        result=outcome.result,
        turn=outcome.turn,
        finished=outcome.finished,
    )


@router.get("/state", response_model=InitStateResponse, responses={401: {"model": ErrorResponse}})
async def state(
    token: str | None = Depends(player_token),
    store: SessionStore = Depends(get_store),
) -> InitStateResponse:
    return InitStateResponse(**await store.snapshot(token))
