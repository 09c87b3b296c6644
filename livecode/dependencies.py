import json
import logging
from typing import Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from livecode.database import ChatStore

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def get_store(request: Request) -> ChatStore:
    return request.app.state.store


def chat_id_filter(chat_id: Optional[str] = None):
    """
    Reads ?chat_id= for message listing.
    Empty means no filter; a non-numeric value matches nothing.
    """
    if not chat_id:
        return None
    try:
        return int(chat_id)
    except ValueError:
        return chat_id


def request_body(model):
    """
    Dependency factory that parses a JSON or form-encoded body into model.
    A missing or null body yields an empty model, so presence checks report
    the missing fields instead of a parse error.
    """
    async def dependency(request: Request):
        content_type = request.headers.get("content-type", "")
        if content_type.startswith(FORM_CONTENT_TYPE):
            data = dict(await request.form())
        else:
            raw = await request.body()
            try:
                data = json.loads(raw) if raw else None
            except ValueError:
                raise RequestValidationError(
                    [{"loc": ("body",), "msg": "JSON decode error", "type": "json_invalid"}]
                )

        logger.debug("Body: %s", data)
        try:
            return model.model_validate(data if data is not None else {})
        except ValidationError as e:
            raise RequestValidationError(e.errors())

    return dependency


def body_schema(model) -> dict:
    """openapi_extra entry documenting both accepted body encodings."""
    schema = model.model_json_schema()
    return {
        "requestBody": {
            "content": {
                "application/json": {"schema": schema},
                FORM_CONTENT_TYPE: {"schema": schema},
            },
        },
    }
