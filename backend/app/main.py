import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app import config
from routes import game_ws, players, sessions
from services.exceptions import MemoryGameException
from services.session_store import SessionStore

logger = logging.getLogger(__name__)


async def handle_game_exception(request: Request, exc: MemoryGameException) -> JSONResponse:
    logger.info("[app] %s %s -> %d %s", request.method, request.url.path, exc.status_code, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.code, "detail": exc.detail},
    )


def create_app(store: SessionStore | None = None) -> FastAPI:
    """
    Build the API around ``store``.

    Without a store one is created from the environment, which requires
    MASTER_KEY to be set.
    """
    if store is None:
        store = SessionStore(
            config.get_master_key(),
            board_pairs=config.get_board_pairs(),
            queue_size=config.get_event_queue_size(),
        )

    app = FastAPI(title="Memory API", version="0.1.0")
    app.state.store = store

    origins = config.get_allowed_origins()
    app.add_middleware(
        CORSMiddleware,
        # Credentials (cookies) need the origin echoed back rather than "*".
        allow_origin_regex=".*" if origins == ["*"] else None,
        allow_origins=[] if origins == ["*"] else origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(MemoryGameException, handle_game_exception)

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(sessions.router)
    app.include_router(players.router)
    app.include_router(game_ws.router)
    return app
