"""LiveCode API — request/response models."""

from typing import Optional, List, Any
from pydantic import BaseModel, StrictInt


class ChatCreate(BaseModel):
    name: Optional[str] = None
    shared: Optional[bool] = None


class ChatUpdate(BaseModel):
    name: Optional[str] = None
    index: Optional[int] = None
    shared: Optional[bool] = None


class MessageCreate(BaseModel):
    chat_id: Optional[StrictInt] = None
    type: Optional[str] = None
    author: Optional[str] = None
    content: Any = None


class MessageUpdate(BaseModel):
    chat_id: Optional[StrictInt] = None
    type: Optional[str] = None
    author: Optional[str] = None
    content: Any = None


class Chat(BaseModel):
    id: int
    index: Optional[int] = None
    name: Optional[str] = None
    shared: Optional[bool] = False


class Message(BaseModel):
    id: int
    chat_id: int
    type: Optional[str] = None
    author: Optional[str] = None
    content: Any = None


class DataSnapshot(BaseModel):
    chats: List[Chat]
    messages: List[Message]


class ResetResponse(BaseModel):
    message: str
    data: DataSnapshot


class ErrorResponse(BaseModel):
    error: str
