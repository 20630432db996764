"""
Chat session controller: optimistic send, session creation and reload
"""

import abc
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Union

from sqlalchemy.orm import Session

from app.core import localization
from app.core.config import settings
from app.schemas.chat import MessageRead
from app.services.chat_transport import ChatTransport
from app.services.ingestion_pipeline import DocumentContext
from app.services.notifications import Notifier
from app.services.repositories import ChatRepository

logger = logging.getLogger(__name__)


def _millis() -> int:
    return int(time.time() * 1000)


class ChatStore(abc.ABC):
    @abc.abstractmethod
    async def create_chat(self, user_id: str, title: str) -> str:
        """Create a chat session and return its id"""

    @abc.abstractmethod
    async def list_messages(self, chat_id: str) -> List[MessageRead]:
        """Persisted messages of a chat, oldest first"""


class SqlChatStore(ChatStore):
    def __init__(self, db: Session):
        self.repository = ChatRepository(db)

    async def create_chat(self, user_id: str, title: str) -> str:
        return self.repository.create_chat(user_id, title).id

    async def list_messages(self, chat_id: str) -> List[MessageRead]:
        return [MessageRead.from_model(m) for m in self.repository.list_messages(chat_id)]


@dataclass
class ChatViewState:
    current_chat_id: Optional[str] = None
    messages: List[MessageRead] = field(default_factory=list)
    busy: bool = False
    document_context: Optional[Union[DocumentContext, str]] = None


class ChatSessionController:
    """
    Drives one chat view.

    The user message is shown immediately with a ``temp-<millis>`` id; the
    transport persists both sides of the exchange and the controller then
    replaces its local list with the persisted one, so the optimistic copy
    never survives a successful send.
    """

    def __init__(
        self,
        store: ChatStore,
        transport: ChatTransport,
        user_id: Optional[str],
        notifier: Optional[Notifier] = None,
        history_limit: Optional[int] = None,
        chat_id: Optional[str] = None
    ):
        self.store = store
        self.transport = transport
        self.user_id = user_id
        self.notifier = notifier or Notifier()
        self.history_limit = history_limit or settings.chat_history_limit
        self.state = ChatViewState(current_chat_id=chat_id)
        self.last_error: Optional[Exception] = None

    async def send(self, text: str) -> ChatViewState:
        text = (text or "").strip()
        if not text or self.state.busy:
            return self.state
        if not self.user_id:
            logger.warning("Ignoring chat message without a signed-in user")
            return self.state

        chat_id = self.state.current_chat_id
        if not chat_id:
            try:
                chat_id = await self.store.create_chat(self.user_id, localization.DEFAULT_CHAT_TITLE)
            except Exception as e:
                logger.error(f"Error creating chat: {str(e)}")
                self.last_error = e
                self.notifier.error(localization.CHAT_CREATE_FAILED)
                return self.state
            self.state.current_chat_id = chat_id
            logger.info(f"Created chat {chat_id} for user {self.user_id}")

        history = [
            {"role": m.role, "content": m.content}
            for m in self.state.messages[-self.history_limit:]
        ]

        self.state.messages.append(MessageRead(
            id=f"temp-{_millis()}",
            chat_id=chat_id,
            role="user",
            content=text,
            created_at=datetime.now(timezone.utc),
        ))
        self.state.busy = True

        try:
            context = self.state.document_context
            if isinstance(context, DocumentContext):
                context = context.as_prompt_context()
            await self.transport.send(
                text,
                history,
                chat_id,
                self.user_id,
                context or None
            )
            await self._reload(chat_id)
        except Exception as e:
            logger.error(f"Error sending message: {str(e)}")
            self.last_error = e
            self.state.messages.append(MessageRead(
                id=f"error-{_millis()}",
                chat_id=chat_id,
                role="assistant",
                content=localization.CHAT_APOLOGY,
                created_at=datetime.now(timezone.utc),
            ))
            self.notifier.error(localization.CHAT_SEND_FAILED)
        finally:
            self.state.busy = False

        return self.state

    async def _reload(self, chat_id: str) -> None:
        self.state.messages = await self.store.list_messages(chat_id)

    async def load_messages(self, chat_id: Optional[str] = None) -> ChatViewState:
        """Replace the local list with the persisted one; on failure the local list is kept"""
        chat_id = chat_id or self.state.current_chat_id
        if not chat_id:
            return self.state
        try:
            await self._reload(chat_id)
        except Exception as e:
            logger.error(f"Error loading messages for chat {chat_id}: {str(e)}")
            self.last_error = e
        return self.state

    async def select_chat(self, chat_id: str) -> ChatViewState:
        self.state.current_chat_id = chat_id
        self.state.messages = []
        return await self.load_messages(chat_id)

    def new_chat(self) -> ChatViewState:
        """Clear the view; the session row is only created with the first message"""
        self.state = ChatViewState()
        return self.state

    def attach_document_context(self, context: Optional[Union[DocumentContext, str]]) -> None:
        """Scanned document (or its prompt text) to send along with every message"""
        self.state.document_context = context
