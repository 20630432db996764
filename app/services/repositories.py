"""
Owner-scoped data access for chats, messages, documents, contacts and profiles
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Dict, Any, Iterable
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core import localization
from app.deps.exceptions import PersistenceFailureError
from app.models.chat_history import Chat, Message
from app.models.database import Document, Contact, Profile

logger = logging.getLogger(__name__)


class ChatRepository:
    """Chats and their messages, always filtered by the owning user"""

    def __init__(self, db: Session):
        self.db = db

    def create_chat(self, user_id: str, title: str = localization.DEFAULT_CHAT_TITLE) -> Chat:
        try:
            chat = Chat(user_id=user_id, title=title)
            self.db.add(chat)
            self.db.commit()
            self.db.refresh(chat)
            logger.info(f"Created chat {chat.id} for user {user_id}")
            return chat
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error creating chat for user {user_id}: {str(e)}")
            raise PersistenceFailureError(f"Failed to create chat: {str(e)}", localization.CHAT_CREATE_FAILED)

    def list_chats(self, user_id: str) -> List[Chat]:
        """Chats most-recent-first"""
        try:
            return self.db.query(Chat).filter(
                Chat.user_id == user_id
            ).order_by(Chat.updated_at.desc(), Chat.created_at.desc()).all()
        except SQLAlchemyError as e:
            logger.error(f"Error loading chats for user {user_id}: {str(e)}")
            raise PersistenceFailureError(f"Failed to load chats: {str(e)}")

    def get_chat(self, chat_id: str, user_id: Optional[str] = None) -> Optional[Chat]:
        query = self.db.query(Chat).filter(Chat.id == chat_id)
        if user_id is not None:
            query = query.filter(Chat.user_id == user_id)
        try:
            return query.first()
        except SQLAlchemyError as e:
            logger.error(f"Error loading chat {chat_id}: {str(e)}")
            raise PersistenceFailureError(f"Failed to load chat: {str(e)}")

    def rename_chat(self, chat_id: str, user_id: str, title: str) -> Optional[Chat]:
        chat = self.get_chat(chat_id, user_id)
        if chat is None:
            return None
        try:
            chat.title = title
            self.db.commit()
            self.db.refresh(chat)
            return chat
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error renaming chat {chat_id}: {str(e)}")
            raise PersistenceFailureError(f"Failed to rename chat: {str(e)}", localization.CHAT_TITLE_SAVE_FAILED)

    def delete_chat(self, chat_id: str, user_id: str) -> bool:
        chat = self.get_chat(chat_id, user_id)
        if chat is None:
            return False
        try:
            self.db.delete(chat)
            self.db.commit()
            logger.info(f"Deleted chat {chat_id}")
            return True
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error deleting chat {chat_id}: {str(e)}")
            raise PersistenceFailureError(f"Failed to delete chat: {str(e)}", localization.CHAT_DELETE_FAILED)

    def list_messages(self, chat_id: str) -> List[Message]:
        """Messages oldest first"""
        try:
            return self.db.query(Message).filter(
                Message.chat_id == chat_id
            ).order_by(Message.created_at.asc(), Message.id.asc()).all()
        except SQLAlchemyError as e:
            logger.error(f"Error loading messages for chat {chat_id}: {str(e)}")
            raise PersistenceFailureError(f"Failed to load messages: {str(e)}")

    def count_messages(self, chat_id: str) -> int:
        return self.db.query(func.count(Message.id)).filter(Message.chat_id == chat_id).scalar() or 0

    def add_message(self, chat_id: str, role: str, content: str, metadata: Optional[Dict[str, Any]] = None) -> Message:
        try:
            message = Message(chat_id=chat_id, role=role, content=content, meta=metadata)
            self.db.add(message)
            self.db.commit()
            self.db.refresh(message)
            return message
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error saving {role} message for chat {chat_id}: {str(e)}")
            raise PersistenceFailureError(f"Failed to save message: {str(e)}")

    def set_title(self, chat_id: str, title: str) -> None:
        try:
            self.db.query(Chat).filter(Chat.id == chat_id).update(
                {Chat.title: title, Chat.updated_at: datetime.now(timezone.utc)},
                synchronize_session=False
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error setting title for chat {chat_id}: {str(e)}")
            raise PersistenceFailureError(f"Failed to set chat title: {str(e)}")

    def touch(self, chat_id: str) -> None:
        """Move a chat to the top of the most-recent-first listing"""
        try:
            self.db.query(Chat).filter(Chat.id == chat_id).update(
                {Chat.updated_at: datetime.now(timezone.utc)},
                synchronize_session=False
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error touching chat {chat_id}: {str(e)}")
            raise PersistenceFailureError(f"Failed to update chat: {str(e)}")


class DocumentRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(self, **fields) -> Document:
        try:
            document = Document(**fields)
            self.db.add(document)
            self.db.commit()
            self.db.refresh(document)
            logger.info(f"Saved document {document.id} ({document.original_filename})")
            return document
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error saving document {fields.get('original_filename')}: {str(e)}")
            raise PersistenceFailureError(f"Failed to save document: {str(e)}")

    def list_for_user(self, user_id: str) -> List[Document]:
        return self.db.query(Document).filter(
            Document.user_id == user_id
        ).order_by(Document.created_at.desc()).all()

    def get(self, document_id: str, user_id: str) -> Optional[Document]:
        return self.db.query(Document).filter(
            Document.id == document_id,
            Document.user_id == user_id
        ).first()


class ContactRepository:
    def __init__(self, db: Session):
        self.db = db

    def list_by_country(self, country: str, contact_type: Optional[str] = None) -> List[Contact]:
        query = self.db.query(Contact).filter(Contact.country == country)
        if contact_type:
            query = query.filter(Contact.type == contact_type)
        return query.order_by(Contact.type.asc(), Contact.name.asc()).all()

    def bulk_load(self, rows: Iterable[Dict[str, Any]], replace: bool = False) -> int:
        """Insert directory rows; with replace, existing rows for the same countries are removed first"""
        rows = list(rows)
        try:
            if replace:
                countries = {row["country"] for row in rows}
                self.db.query(Contact).filter(Contact.country.in_(countries)).delete(synchronize_session=False)
            self.db.add_all([Contact(**row) for row in rows])
            self.db.commit()
            logger.info(f"Loaded {len(rows)} contacts")
            return len(rows)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error loading contacts: {str(e)}")
            raise PersistenceFailureError(f"Failed to load contacts: {str(e)}")


class ProfileRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_or_create(self, user_id: str) -> Profile:
        profile = self.db.query(Profile).filter(Profile.user_id == user_id).first()
        if profile:
            return profile
        try:
            profile = Profile(user_id=user_id, country="UAE", preferred_language="ne")
            self.db.add(profile)
            self.db.commit()
            self.db.refresh(profile)
            logger.info(f"Created profile for user {user_id}")
            return profile
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error creating profile for user {user_id}: {str(e)}")
            raise PersistenceFailureError(f"Failed to create profile: {str(e)}")

    def update(self, user_id: str, changes: Dict[str, Any]) -> Profile:
        """Apply changes unconditionally; concurrent edits are last-write-wins"""
        profile = self.get_or_create(user_id)
        try:
            for field, value in changes.items():
                setattr(profile, field, value)
            profile.updated_at = datetime.now(timezone.utc)
            self.db.commit()
            self.db.refresh(profile)
            return profile
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error updating profile for user {user_id}: {str(e)}")
            raise PersistenceFailureError(f"Failed to update profile: {str(e)}")
