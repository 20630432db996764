"""
Chat session endpoints
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.core import localization
from app.core.database import get_db
from app.deps.providers import get_chat_store, get_chat_transport
from app.middleware.auth import get_current_user_id
from app.schemas.chat import (
    ChatCreate,
    ChatUpdate,
    ChatRead,
    MessageRead,
    SendMessageRequest,
    SendMessageResponse,
)
from app.services.chat_controller import ChatSessionController, ChatStore
from app.services.chat_transport import ChatTransport
from app.services.notifications import CollectingNotifier
from app.services.repositories import ChatRepository

router = APIRouter()
logger = logging.getLogger(__name__)


def _owned_chat(repository: ChatRepository, chat_id: str, user_id: str):
    chat = repository.get_chat(chat_id, user_id)
    if chat is None:
        raise HTTPException(status_code=404, detail="Chat not found")
    return chat


@router.get("/chats", response_model=List[ChatRead])
async def list_chats(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """Chats of the caller, most recently updated first"""
    return ChatRepository(db).list_chats(user_id)


@router.post("/chats", response_model=ChatRead, status_code=201)
async def create_chat(
    body: Optional[ChatCreate] = None,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    title = (body.title if body else None) or localization.DEFAULT_CHAT_TITLE
    return ChatRepository(db).create_chat(user_id, title)


@router.patch("/chats/{chat_id}", response_model=ChatRead)
async def rename_chat(
    chat_id: str,
    body: ChatUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    chat = ChatRepository(db).rename_chat(chat_id, user_id, body.title)
    if chat is None:
        raise HTTPException(status_code=404, detail="Chat not found")
    return chat


@router.delete("/chats/{chat_id}", status_code=204)
async def delete_chat(chat_id: str, user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    if not ChatRepository(db).delete_chat(chat_id, user_id):
        raise HTTPException(status_code=404, detail="Chat not found")


@router.get("/chats/{chat_id}/messages", response_model=List[MessageRead])
async def list_messages(chat_id: str, user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    repository = ChatRepository(db)
    _owned_chat(repository, chat_id, user_id)
    return [MessageRead.from_model(m) for m in repository.list_messages(chat_id)]


async def _send(
    chat_id: Optional[str],
    body: SendMessageRequest,
    user_id: str,
    store: ChatStore,
    transport: ChatTransport
) -> SendMessageResponse:
    notifier = CollectingNotifier()
    controller = ChatSessionController(store, transport, user_id, notifier=notifier, chat_id=chat_id)
    if chat_id:
        await controller.load_messages(chat_id)

    if body.document_context:
        controller.attach_document_context(body.document_context)
    state = await controller.send(body.content)
    return SendMessageResponse(
        chat_id=state.current_chat_id,
        messages=state.messages,
        error=notifier.last_error()
    )


@router.post("/chats/messages", response_model=SendMessageResponse)
async def send_to_new_chat(
    body: SendMessageRequest,
    user_id: str = Depends(get_current_user_id),
    store: ChatStore = Depends(get_chat_store),
    transport: ChatTransport = Depends(get_chat_transport)
):
    """Send a first message; the chat is created before the assistant is called"""
    return await _send(None, body, user_id, store, transport)


@router.post("/chats/{chat_id}/messages", response_model=SendMessageResponse)
async def send_message(
    chat_id: str,
    body: SendMessageRequest,
    user_id: str = Depends(get_current_user_id),
    store: ChatStore = Depends(get_chat_store),
    transport: ChatTransport = Depends(get_chat_transport),
    db: Session = Depends(get_db)
):
    _owned_chat(ChatRepository(db), chat_id, user_id)
    return await _send(chat_id, body, user_id, store, transport)
