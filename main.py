import argparse
import logging
import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse, Response
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional, Tuple

from config import load_config
from db.base import CardStore, DeckStore
from db.cards import SqliteCardStore
from db.database import init_db
from db.decks import SqliteDeckStore
from db.memory import MemoryCardStore, MemoryDatabase, MemoryDeckStore
from routes import decks_router, cards_router
from utils.http_errors import INTERNAL_ERROR
from utils.observability import setup_logging

logger = logging.getLogger(__name__)

DEFAULT_CORS_ORIGIN = "http://localhost:5173"
CORS_ALLOW_METHODS = "GET, POST, PUT, DELETE, OPTIONS"
CORS_ALLOW_HEADERS = "Content-Type, Authorization"

def build_stores(config: Dict[str, Any]) -> Tuple[DeckStore, CardStore]:
    """Build the deck and card stores named by the [store] config section."""
    store_cfg = config["store"]
    if store_cfg["backend"] == "memory":
        database = MemoryDatabase()
        return MemoryDeckStore(database), MemoryCardStore(database)
    db_path = store_cfg["db_path"]
    init_db(db_path)
    return SqliteDeckStore(db_path), SqliteCardStore(db_path)

def _internal_error_response(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all 500; the client never sees driver or encoding error text."""
    logger.error("Unhandled exception: %s", exc, exc_info=exc, extra={"path": request.url.path})
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": INTERNAL_ERROR},
    )

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Stores handed to create_app are used untouched; otherwise build them from config
    if app.state.deck_store is None or app.state.card_store is None:
        config = load_config()
        setup_logging(config["logging"]["level"], config["logging"]["format"])
        deck_store, card_store = build_stores(config)
        deck_store.create_table()
        card_store.create_table()
        app.state.deck_store = deck_store
        app.state.card_store = card_store
        app.state.cors_origin = config["server"]["cors_origin"]
        logger.info("Using %s store", config["store"]["backend"])
    yield

def create_app(
    deck_store: Optional[DeckStore] = None,
    card_store: Optional[CardStore] = None,
    cors_origin: str = DEFAULT_CORS_ORIGIN,
) -> FastAPI:
    app = FastAPI(title="FlashDeck", description="Deck and card backend for flashcard study", lifespan=lifespan)
    app.state.deck_store = deck_store
    app.state.card_store = card_store
    app.state.cors_origin = cors_origin

    # Include routers
    app.include_router(decks_router, prefix="/deck", tags=["decks"])
    app.include_router(cards_router, prefix="/deck", tags=["cards"])  # /deck/{deck_id}/card

    @app.middleware("http")
    async def cors_middleware(request: Request, call_next):
        # Preflight never reaches routing
        if request.method == "OPTIONS":
            response = Response(status_code=status.HTTP_200_OK)
        else:
            try:
                response = await call_next(request)
            except Exception as exc:
                response = _internal_error_response(request, exc)
        response.headers["Access-Control-Allow-Origin"] = request.app.state.cors_origin
        response.headers["Access-Control-Allow-Methods"] = CORS_ALLOW_METHODS
        response.headers["Access-Control-Allow-Headers"] = CORS_ALLOW_HEADERS
        return response

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        return _internal_error_response(request, exc)

    return app

app = create_app()

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="FlashDeck API server")
    parser.add_argument("--init", action="store_true", help="Initialize DB and config")
    parser.add_argument("--dev", action="store_true", help="Run in dev mode with reload")
    parser.add_argument("--host", help="Override server.host")
    parser.add_argument("--port", type=int, help="Override server.port")
    args = parser.parse_args()
    config = load_config()  # Ensures config is copied if missing
    if args.init:
        init_db(config["store"]["db_path"])
        print(f"DB initialized at {config['store']['db_path']} and config copied to ~/.flashdeck/")
        exit(0)
    # Run server
    host = args.host or config["server"]["host"]
    port = args.port or config["server"]["port"]
    uvicorn.run("main:app", host=host, port=port, reload=args.dev, log_level=config["logging"]["level"].lower())
