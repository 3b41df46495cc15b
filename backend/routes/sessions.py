"""Admin and status endpoints: master key login, create/delete game, ping."""

import logging

from fastapi import APIRouter, Depends, Query, Response
from fastapi.responses import JSONResponse

from app.models import ErrorResponse, MessageResponse, PingResponse
from app.store import MASTER_KEY_COOKIE, TOKEN_COOKIE, admin_key, get_store, player_token
from services.exceptions import Unauthorized
from services.session_store import SessionStore

router = APIRouter(tags=["sessions"])
logger = logging.getLogger(__name__)

MASTER_KEY_MAX_AGE = 31536000   # one year


@router.get("/key", response_model=MessageResponse, responses={401: {"model": ErrorResponse}})
async def check_key(
    response: Response,
    key: str = Query(..., description="Master key to verify"),
    store: SessionStore = Depends(get_store),
) -> MessageResponse:
    """Verify the master key and remember it in a cookie for later admin calls."""
    if not await store.check_key(key):
        raise Unauthorized()
    response.set_cookie(
        MASTER_KEY_COOKIE,
        key,
        max_age=MASTER_KEY_MAX_AGE,
        path="/",
        samesite="none",
        secure=True,
        httponly=True,
    )
    return MessageResponse(detail="Success!")


@router.post(
    "/create",
    response_model=MessageResponse,
    responses={401: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def create_game(
    id: str = Query(..., min_length=1, description="Id of the new game"),
    key: str | None = Depends(admin_key),
    store: SessionStore = Depends(get_store),
) -> MessageResponse:
    logger.info("[sessions] POST /create id=%s", id)
    await store.create(key, id)
    return MessageResponse(detail="Success!")


@router.post("/delete", response_model=MessageResponse, responses={401: {"model": ErrorResponse}})
async def delete_game(
    key: str | None = Depends(admin_key),
    store: SessionStore = Depends(get_store),
) -> MessageResponse:
    logger.info("[sessions] POST /delete")
    await store.delete(key)
    return MessageResponse(detail="Success!")


@router.get(
    "/ping",
    response_model=PingResponse,
    responses={404: {"model": ErrorResponse}, 410: {"model": PingResponse}},
)
async def ping(
    token: str | None = Depends(player_token),
    store: SessionStore = Depends(get_store),
):
    """
    Current game id. A client presenting a token that is no longer in the
    roster gets 410 Gone and its token cookie cleared.
    """
    report = await store.status(token)
    body = PingResponse(id=report.session_id, state=report.state)
    if report.revoked:
        gone = JSONResponse(status_code=410, content=body.model_dump(mode="json"))
        gone.delete_cookie(TOKEN_COOKIE, samesite="none", secure=True, httponly=True)
        return gone
    return body
