# Database models
from app.core.database import Base
from .chat_history import Chat, Message
from .database import Document, Contact, Profile

__all__ = ["Base", "Chat", "Message", "Document", "Contact", "Profile"]
