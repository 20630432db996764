"""
Chat API schemas
"""

from datetime import datetime
from typing import List, Optional, Dict, Any, Union, Literal
from pydantic import BaseModel, Field, validator


class HistoryMessage(BaseModel):
    """A prior turn passed along as context"""
    role: str
    content: str


class ChatFunctionRequest(BaseModel):
    """Request body of the rag-chat function"""
    message: str = Field(..., min_length=1, max_length=4000, description="User message")
    chat_history: List[HistoryMessage] = Field(default_factory=list, alias="chatHistory")
    chat_id: Optional[str] = Field(None, alias="chatId", description="Chat to persist the exchange into")
    user_id: Optional[str] = Field(None, alias="userId")
    document_context: Optional[str] = Field(None, alias="documentContext")

    @validator('message')
    def validate_message(cls, v):
        if not v or not v.strip():
            raise ValueError("Message cannot be empty")
        return v.strip()

    class Config:
        populate_by_name = True


class ChatFunctionResponse(BaseModel):
    answer: str
    sources: List[Any] = Field(default_factory=list)


class ChatErrorBody(BaseModel):
    error: str
    answer: str


class ChatCreate(BaseModel):
    title: Optional[str] = Field(None, max_length=255)


class ChatUpdate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)

    @validator('title')
    def strip_title(cls, v):
        if not v.strip():
            raise ValueError("Title cannot be empty")
        return v.strip()


class ChatRead(BaseModel):
    id: str
    title: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class MessageRead(BaseModel):
    """A message as shown in a chat view; optimistic messages carry a temporary string id"""
    id: Union[int, str]
    chat_id: Optional[str] = None
    role: Literal["user", "assistant"]
    content: str
    metadata: Optional[Dict[str, Any]] = None
    created_at: datetime

    @property
    def is_temporary(self) -> bool:
        return isinstance(self.id, str)

    @classmethod
    def from_model(cls, message) -> "MessageRead":
        return cls(
            id=message.id,
            chat_id=message.chat_id,
            role=message.role,
            content=message.content,
            metadata=message.meta,
            created_at=message.created_at,
        )


class SendMessageRequest(BaseModel):
    content: str = Field(..., min_length=1, max_length=4000)
    document_context: Optional[str] = Field(None, alias="documentContext")

    class Config:
        populate_by_name = True


class SendMessageResponse(BaseModel):
    chat_id: Optional[str]
    messages: List[MessageRead]
    error: Optional[str] = None
