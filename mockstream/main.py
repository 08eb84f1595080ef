"""mockstream — FastAPI app serving mock LLM streams.

Loads config.yaml on startup. Exposes the streaming endpoints (/api/llm,
/api/chat/{collection_id}, /api/lorem, /api/markdown) as Server-Sent Events,
with /health, /config and /reload for operators.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from mockstream.catalog import seeded_chooser
from mockstream.config import MockConfig, get_config, load_config, reload_config
from mockstream.engine.emitter import StreamVariant
from mockstream.lorem import LoremSource
from mockstream.runtime import (
    Turn,
    TurnRejected,
    prepare_collection_turn,
    prepare_demo_turn,
    prepare_lorem_turn,
    prepare_markdown_turn,
    stream_turn,
)
from mockstream.schemas import ErrorResponse, LlmRequest, LoremRequest, MarkdownRequest, Message
from mockstream.store import CollectionStore

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
    "x-vercel-ai-ui-message-stream": "v1",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load config and build the collection store on startup."""
    config = load_config()
    app.state.store = CollectionStore.from_config(config)
    logger.info(
        f"mockstream started (origins={config.allowed_origins}, "
        f"auth={'enabled' if config.api_key else 'disabled'}, "
        f"collections={len(config.collections)}, "
        f"chunk_delay_ms={config.stream.chunk_delay_ms})"
    )
    yield
    logger.info("mockstream shutting down")


# CORS origins are needed before the lifespan runs.
_boot_config = load_config()

app = FastAPI(title="mockstream", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_boot_config.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Error responses
# ---------------------------------------------------------------------------


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed JSON and schema failures both become 400 with field-level details."""
    details = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]
    logger.info(f"Rejected {request.url.path}: {len(details)} validation error(s)")
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(error="Invalid request payload", details=details).model_dump(),
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=str(exc.detail)).model_dump(exclude_none=True),
        headers=getattr(exc, "headers", None),
    )


# ---------------------------------------------------------------------------
# Auth dependency
# ---------------------------------------------------------------------------


async def verify_api_key(request: Request) -> None:
    """Guard for operator endpoints. Open when config has no api_key."""
    config = get_config()
    if not config.api_key:
        return  # no key configured, auth disabled

    key = request.headers.get("X-API-Key")
    if key != config.api_key:
        raise HTTPException(status_code=401, detail="Invalid or missing API key")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _prepare(build: Callable[[], Turn]) -> Turn:
    """Run eager turn preparation, mapping failures to HTTP errors."""
    try:
        return build()
    except TurnRejected as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Turn preparation failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")


def _seed(config: MockConfig, header_seed: int | None) -> int | None:
    return header_seed if header_seed is not None else config.stream.seed


def _stream(turn: Turn, variant: StreamVariant, request: Request) -> StreamingResponse:
    config = get_config()
    return StreamingResponse(
        stream_turn(
            turn,
            variant,
            delay=config.stream.delay_seconds,
            is_disconnected=request.is_disconnected,
        ),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )


def _collection_stream(
    request: Request, collection_id: str, messages: list[Message]
) -> StreamingResponse:
    config = get_config()
    store: CollectionStore = request.app.state.store
    if collection_id not in store:
        raise HTTPException(status_code=404, detail=f"Collection '{collection_id}' not found")

    turn = _prepare(
        lambda: prepare_collection_turn(
            messages, store, collection_id, config.stream.max_chunk_length
        )
    )
    return _stream(turn, config.stream.llm, request)


# ---------------------------------------------------------------------------
# Streaming endpoints
# ---------------------------------------------------------------------------


@app.post("/api/llm")
async def llm_endpoint(
    body: LlmRequest,
    request: Request,
    x_collection_id: str | None = Header(default=None),
    x_mock_seed: int | None = Header(default=None),
):
    """Answer the last user message.

    With an ``x-collection-id`` header the answer comes from that collection;
    otherwise it is synthesized from the template catalog.
    """
    collection_id = (x_collection_id or "").strip()
    if collection_id:
        return _collection_stream(request, collection_id, body.messages)

    config = get_config()
    choose = seeded_chooser(_seed(config, x_mock_seed))
    turn = _prepare(
        lambda: prepare_demo_turn(body.messages, choose, config.stream.max_chunk_length)
    )
    return _stream(turn, config.stream.llm, request)


@app.post("/api/chat/{collection_id}")
async def collection_endpoint(collection_id: str, body: LlmRequest, request: Request):
    """Answer from a canned-interaction collection."""
    return _collection_stream(request, collection_id, body.messages)


@app.post("/api/lorem")
async def lorem_endpoint(
    body: LoremRequest,
    request: Request,
    x_mock_seed: int | None = Header(default=None),
):
    """Stream parameter-driven filler text, one word or whitespace run per delta."""
    config = get_config()
    source = LoremSource(random.Random(_seed(config, x_mock_seed)))
    turn = _prepare(lambda: prepare_lorem_turn(body, source))
    return _stream(turn, config.stream.lorem, request)


@app.post("/api/markdown")
async def markdown_endpoint(body: MarkdownRequest, request: Request):
    """Stream the posted markdown back verbatim."""
    config = get_config()
    turn = _prepare(lambda: prepare_markdown_turn(body.markdown))
    return _stream(turn, config.stream.markdown, request)


# ---------------------------------------------------------------------------
# Operational endpoints
# ---------------------------------------------------------------------------


@app.get("/health")
async def health(request: Request):
    """Liveness check."""
    return {
        "status": "healthy",
        "collections": len(request.app.state.store),
    }


@app.get("/config")
async def get_current_config():
    """Return current config as JSON (without the API key)."""
    config = get_config()
    return config.model_dump(exclude={"api_key"})


@app.post("/reload", dependencies=[Depends(verify_api_key)])
async def reload(request: Request):
    """Re-read the config file and swap in a fresh collection store.

    Requests already streaming keep the turn they prepared.
    """
    try:
        new_config = reload_config()
        request.app.state.store = CollectionStore.from_config(new_config)
        return {
            "status": "reloaded",
            "collections": len(new_config.collections),
        }
    except Exception as e:
        logger.error(f"Reload failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Reload failed: {e}")
