"""LiveCode API — in-memory store and seed loader."""

import json
import logging
import os
import threading

from livecode.exceptions import (
    ChatNotFoundException,
    InvalidTypeException,
    MessageNotFoundException,
    MissingFieldException,
)

logger = logging.getLogger(__name__)

DEFAULT_SEED_PATH = os.path.join(os.path.dirname(__file__), "default.json")
VALID_MESSAGE_TYPES = ("user", "thinking", "answer")

CHAT_FIELDS = ("name", "index", "shared")
MESSAGE_FIELDS = ("chat_id", "type", "author", "content")


def is_blank(value) -> bool:
    """True for the JSON values a required field may not hold: null, "", 0 and false."""
    return value is None or value == "" or value is False or value == 0


def next_id(records: list) -> int:
    """
    Returns max(id) + 1, or 1 for an empty collection.

    Ids are not monotonic: once the record holding the highest id is deleted,
    the next insert hands that id out again.
    """
    if not records:
        return 1
    return max(record["id"] for record in records) + 1


def load_seed(path: str = DEFAULT_SEED_PATH) -> dict:
    """
    Reads the seed document and returns {"chats": [...], "messages": [...]}.
    Raises OSError, ValueError (includes JSONDecodeError) or TypeError.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise TypeError("seed document must be a JSON object")
    for key in ("chats", "messages"):
        if not isinstance(data.get(key), list):
            raise TypeError(f"seed document must hold a '{key}' list")

    return {"chats": data["chats"], "messages": data["messages"]}


class ChatStore:
    """
    Owns the chat and message sequences for the lifetime of the process.

    Every public method holds the store lock for its whole read-modify-write,
    so concurrent callers can never be handed the same id.
    """

    def __init__(self, seed_path: str = DEFAULT_SEED_PATH):
        self.seed_path = seed_path
        self.chats = []
        self.messages = []
        self._lock = threading.RLock()

    # ── Seed ──────────────────────────────────────────────────────────────────

    def reload(self, path: str = None) -> bool:
        """
        Replaces both collections with the seed file contents.
        A failed load is logged and leaves the current data untouched.
        """
        path = path or self.seed_path
        try:
            data = load_seed(path)
        except (OSError, ValueError, TypeError) as e:
            logger.error("Error loading seed data from %s: %s", path, e)
            return False

        with self._lock:
            self.chats = data["chats"]
            self.messages = data["messages"]
        logger.info(
            "Data loaded from %s (%d chats, %d messages)",
            os.path.basename(path), len(data["chats"]), len(data["messages"]),
        )
        return True

    def snapshot(self) -> dict:
        with self._lock:
            return {"chats": list(self.chats), "messages": list(self.messages)}

    # ── Chats ─────────────────────────────────────────────────────────────────

    def _find_chat(self, chat_id: int) -> dict:
        for chat in self.chats:
            if chat["id"] == chat_id:
                return chat
        raise ChatNotFoundException()

    def _chat_exists(self, chat_id) -> bool:
        return any(chat["id"] == chat_id for chat in self.chats)

    def list_chats(self) -> list:
        with self._lock:
            return list(self.chats)

    def get_chat(self, chat_id: int) -> dict:
        with self._lock:
            return self._find_chat(chat_id)

    def insert_chat(self, name: str, shared: bool = None) -> dict:
        if is_blank(name):
            raise MissingFieldException("Name is required")

        with self._lock:
            chat = {
                "id": next_id(self.chats),
                "index": len(self.chats),
                "name": name,
                "shared": shared if shared is not None else False,
            }
            self.chats.append(chat)
        return chat

    def update_chat(self, chat_id: int, patch: dict) -> dict:
        """Applies only the keys present in patch; falsy values count as present."""
        with self._lock:
            chat = self._find_chat(chat_id)
            for field in CHAT_FIELDS:
                if field in patch:
                    chat[field] = patch[field]
            return chat

    def delete_chat(self, chat_id: int) -> None:
        """Removes the chat and every message that references it."""
        with self._lock:
            chat = self._find_chat(chat_id)
            self.messages = [m for m in self.messages if m["chat_id"] != chat_id]
            self.chats.remove(chat)

    # ── Messages ──────────────────────────────────────────────────────────────

    def _find_message(self, message_id: int) -> dict:
        for message in self.messages:
            if message["id"] == message_id:
                return message
        raise MessageNotFoundException()

    def _check_type(self, message_type) -> None:
        if message_type not in VALID_MESSAGE_TYPES:
            raise InvalidTypeException(VALID_MESSAGE_TYPES)

    def list_messages(self, chat_id: int = None) -> list:
        with self._lock:
            if chat_id is None:
                return list(self.messages)
            return [m for m in self.messages if m["chat_id"] == chat_id]

    def get_message(self, message_id: int) -> dict:
        with self._lock:
            return self._find_message(message_id)

    def insert_message(self, chat_id: int, type: str, author: str, content) -> dict:
        if any(is_blank(value) for value in (chat_id, type, author, content)):
            raise MissingFieldException("chat_id, type, author, and content are required")

        with self._lock:
            if not self._chat_exists(chat_id):
                raise ChatNotFoundException()
            self._check_type(type)

            message = {
                "id": next_id(self.messages),
                "chat_id": chat_id,
                "type": type,
                "author": author,
                "content": content,
            }
            self.messages.append(message)
        return message

    def update_message(self, message_id: int, patch: dict) -> dict:
        """
        Partial update. chat_id must reference an existing chat and type must
        be one of VALID_MESSAGE_TYPES when present; a failed check changes nothing.
        """
        with self._lock:
            message = self._find_message(message_id)
            if "chat_id" in patch and not self._chat_exists(patch["chat_id"]):
                raise ChatNotFoundException()
            if "type" in patch:
                self._check_type(patch["type"])

            for field in MESSAGE_FIELDS:
                if field in patch:
                    message[field] = patch[field]
            return message

    def delete_message(self, message_id: int) -> None:
        with self._lock:
            self.messages.remove(self._find_message(message_id))
