"""
LiveCode Backend API
Handles: chats and messages CRUD over an in-memory store seeded from default.json
Port: 3000

- Routes are flat: messages live under /messages and filter by ?chat_id=
- Deleting a chat deletes its messages
- POST /reset reloads default.json; a broken seed file is logged and ignored
- The store is owned by the app (app.state.store), never a module global
"""

import logging
from contextlib import asynccontextmanager
from typing import List

import uvicorn
from fastapi import Depends, FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from livecode.database import DEFAULT_SEED_PATH, ChatStore
from livecode.dependencies import body_schema, chat_id_filter, get_store, request_body
from livecode.exceptions import InvalidRequestException
from livecode.models import (
    Chat,
    ChatCreate,
    ChatUpdate,
    DataSnapshot,
    ErrorResponse,
    Message,
    MessageCreate,
    MessageUpdate,
    ResetResponse,
)

logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO)

HOST = "0.0.0.0"
PORT = 3000

NOT_FOUND = {404: {"model": ErrorResponse}}
BAD_REQUEST = {400: {"model": ErrorResponse}}

API_INDEX = {
    "message": "LiveCode Backend API",
    "docs": "/docs",
    "endpoints": {
        "chats": {
            "GET /chats": "Get all chats",
            "GET /chats/:id": "Get chat by ID",
            "POST /chats": "Create new chat",
            "PUT /chats/:id": "Update chat",
            "DELETE /chats/:id": "Delete chat and its messages",
        },
        "messages": {
            "GET /messages": "Get all messages (optional ?chat_id=X)",
            "GET /messages/:id": "Get message by ID",
            "POST /messages": "Create new message",
            "PUT /messages/:id": "Update message",
            "DELETE /messages/:id": "Delete message",
        },
        "utility": {
            "GET /data": "Get all data",
            "POST /reset": "Reset data to default.json",
        },
    },
}


def _describe_validation_error(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "path", "query")]
        field = ".".join(loc) or "body"
        parts.append(f"{field}: {err.get('msg', 'invalid value')}")
    return "; ".join(parts)


def create_app(seed_path: str = DEFAULT_SEED_PATH) -> FastAPI:
    store = ChatStore(seed_path)

    @asynccontextmanager
    async def lifespan(application: FastAPI):
        application.state.store.reload()
        logger.info("LiveCode Backend API listening on port %d", PORT)
        logger.info("Visit http://localhost:%d for endpoint documentation", PORT)
        yield

    application = FastAPI(title="LiveCode Backend API", version="1.0.0", lifespan=lifespan)
    application.state.store = store

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @application.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info("%s %s", request.method, request.url.path)
        logger.debug("Content-Type: %s", request.headers.get("content-type"))
        return await call_next(request)

    @application.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @application.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        error = InvalidRequestException(_describe_validation_error(exc))
        return JSONResponse(status_code=error.status_code, content={"error": error.detail})

    # ── Chats ─────────────────────────────────────────────────────────────────

    @application.get("/chats", response_model=List[Chat])
    async def list_chats(store: ChatStore = Depends(get_store)):
        return store.list_chats()

    @application.get("/chats/{chat_id}", response_model=Chat, responses=NOT_FOUND)
    async def get_chat(chat_id: int, store: ChatStore = Depends(get_store)):
        return store.get_chat(chat_id)

    @application.post(
        "/chats",
        response_model=Chat,
        status_code=201,
        responses=BAD_REQUEST,
        openapi_extra=body_schema(ChatCreate),
    )
    async def create_chat(
        body: ChatCreate = Depends(request_body(ChatCreate)),
        store: ChatStore = Depends(get_store),
    ):
        return store.insert_chat(body.name, body.shared)

    @application.put(
        "/chats/{chat_id}",
        response_model=Chat,
        responses=NOT_FOUND,
        openapi_extra=body_schema(ChatUpdate),
    )
    async def update_chat(
        chat_id: int,
        body: ChatUpdate = Depends(request_body(ChatUpdate)),
        store: ChatStore = Depends(get_store),
    ):
        patch = body.model_dump(exclude_unset=True)
        return store.update_chat(chat_id, patch)

    @application.delete("/chats/{chat_id}", status_code=204, responses=NOT_FOUND)
    async def delete_chat(chat_id: int, store: ChatStore = Depends(get_store)):
        store.delete_chat(chat_id)
        return Response(status_code=204)

    # ── Messages ──────────────────────────────────────────────────────────────

    @application.get("/messages", response_model=List[Message])
    async def list_messages(chat_id=Depends(chat_id_filter), store: ChatStore = Depends(get_store)):
        return store.list_messages(chat_id)

    @application.get("/messages/{message_id}", response_model=Message, responses=NOT_FOUND)
    async def get_message(message_id: int, store: ChatStore = Depends(get_store)):
        return store.get_message(message_id)

    @application.post(
        "/messages",
        response_model=Message,
        status_code=201,
        responses={**BAD_REQUEST, **NOT_FOUND},
        openapi_extra=body_schema(MessageCreate),
    )
    async def create_message(
        body: MessageCreate = Depends(request_body(MessageCreate)),
        store: ChatStore = Depends(get_store),
    ):
        return store.insert_message(body.chat_id, body.type, body.author, body.content)

    @application.put(
        "/messages/{message_id}",
        response_model=Message,
        responses={**BAD_REQUEST, **NOT_FOUND},
        openapi_extra=body_schema(MessageUpdate),
    )
    async def update_message(
        message_id: int,
        body: MessageUpdate = Depends(request_body(MessageUpdate)),
        store: ChatStore = Depends(get_store),
    ):
        patch = body.model_dump(exclude_unset=True)
        return store.update_message(message_id, patch)

    @application.delete("/messages/{message_id}", status_code=204, responses=NOT_FOUND)
    async def delete_message(message_id: int, store: ChatStore = Depends(get_store)):
        store.delete_message(message_id)
        return Response(status_code=204)

    # ── Utility ───────────────────────────────────────────────────────────────

    @application.get("/data", response_model=DataSnapshot)
    async def get_data(store: ChatStore = Depends(get_store)):
        return store.snapshot()

    @application.post("/reset", response_model=ResetResponse)
    async def reset_data(store: ChatStore = Depends(get_store)):
        # A failed reload keeps the current data and still answers 200.
        store.reload()
        return {"message": "Data reset to default", "data": store.snapshot()}

    @application.get("/")
    async def root():
        return API_INDEX

    return application


app = create_app()


def run():
    uvicorn.run("livecode.main:app", host=HOST, port=PORT)


if __name__ == "__main__":
    run()
