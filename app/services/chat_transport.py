"""
Chat transport: sends a user message to the legal assistant and persists the exchange
"""

import abc
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy.orm import Session

from app.core import localization
from app.core.config import settings
from app.deps.dify_client import dify_chat
from app.services.repositories import ChatRepository

logger = logging.getLogger(__name__)


@dataclass
class ChatReply:
    answer: str
    sources: List[Any] = field(default_factory=list)


def derive_chat_title(message: str, max_chars: Optional[int] = None) -> str:
    """Chat title from the first user message, truncated with an ellipsis"""
    max_chars = max_chars or settings.chat_title_max_chars
    if len(message) > max_chars:
        return message[:max_chars] + "..."
    return message


class ChatTransport(abc.ABC):
    """Delivers a message to the assistant; persisting both sides is the transport's job"""

    @abc.abstractmethod
    async def send(
        self,
        message: str,
        chat_history: Sequence[Dict[str, Any]],
        chat_id: Optional[str],
        user_id: Optional[str],
        document_context: Optional[str] = None
    ) -> ChatReply:
        """
        Raises:
            UpstreamRateLimitedError, UpstreamUnavailableError,
            MissingAPIKeyError, PersistenceFailureError
        """


class RagChatTransport(ChatTransport):
    """
    Dify-backed transport.

    Dify keeps its own retrieval context, so the history is only logged; the
    document context (if any) travels as the ``document_context`` input.
    """

    def __init__(self, db: Session):
        self.chat_repository = ChatRepository(db)

    async def send(
        self,
        message: str,
        chat_history: Sequence[Dict[str, Any]],
        chat_id: Optional[str],
        user_id: Optional[str],
        document_context: Optional[str] = None
    ) -> ChatReply:
        logger.info(f"RAG chat request: chat_id={chat_id}, user_id={user_id}, history={len(chat_history)}")

        data = await self._ask(message, user_id or "anonymous", document_context)
        logger.info("Dify API response received")

        answer = data.get("answer") or localization.CHAT_NO_ANSWER
        sources = (data.get("metadata") or {}).get("retriever_resources") or []

        if chat_id:
            self._save_exchange(chat_id, message, answer)

        return ChatReply(answer=answer, sources=sources)

    def _save_exchange(self, chat_id: str, message: str, answer: str) -> None:
        self.chat_repository.add_message(chat_id, "user", message)
        self.chat_repository.add_message(chat_id, "assistant", answer, {"source": "dify"})

        # Only the first exchange names the chat
        if self.chat_repository.count_messages(chat_id) <= 2:
            self.chat_repository.set_title(chat_id, derive_chat_title(message))
        else:
            self.chat_repository.touch(chat_id)

    async def _ask(self, message: str, user: str, document_context: Optional[str]) -> Dict[str, Any]:
        inputs = {"document_context": document_context} if document_context else {}
        return await asyncio.to_thread(dify_chat, message, user, inputs)
