"""
Database models for documents, directory contacts and user profiles
"""

from sqlalchemy import Column, Integer, String, DateTime, Text, Float, ForeignKey, JSON, Index
from app.core.database import Base
from app.models.chat_history import _uuid, _utcnow


class Document(Base):
    __tablename__ = "documents"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(64), nullable=False, index=True)
    chat_id = Column(String(36), ForeignKey("chats.id", ondelete="SET NULL"), nullable=True)
    original_filename = Column(String(255), nullable=False)
    ocr_text = Column(Text, nullable=False)
    doc_type = Column(String(50), nullable=True)
    clarity_score = Column(Integer, nullable=True)  # 0-100
    red_flags = Column(JSON, nullable=False, default=list)  # Ordered list of strings
    analysis = Column(Text, nullable=True)  # Plain-language summary
    storage_path = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)


class Contact(Base):
    __tablename__ = "contacts"

    id = Column(String(36), primary_key=True, default=_uuid)
    country = Column(String(100), nullable=False)
    type = Column(String(20), nullable=False)  # embassy, labor, ngo
    name = Column(String(255), nullable=False)
    name_ne = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    email = Column(String(255), nullable=True)
    address = Column(Text, nullable=True)
    lat = Column(Float, nullable=True)
    lon = Column(Float, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    __table_args__ = (
        Index('idx_contacts_country_type', 'country', 'type'),
    )


class Profile(Base):
    __tablename__ = "profiles"

    user_id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=True)
    country = Column(String(100), nullable=True)
    emergency_contact = Column(String(100), nullable=True)
    preferred_language = Column(String(10), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)
