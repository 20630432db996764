"""
Contacts, profile and legal advisor schemas
"""

from datetime import datetime
from typing import Optional, Literal
from pydantic import BaseModel, Field

ContactType = Literal["embassy", "labor", "ngo"]


class ContactRead(BaseModel):
    id: str
    country: str
    type: str
    name: str
    name_ne: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    lat: Optional[float] = None
    lon: Optional[float] = None

    class Config:
        from_attributes = True


class ContactSeed(BaseModel):
    """One directory row as supplied by an administrator"""
    country: str
    type: ContactType
    name: str
    name_ne: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    lat: Optional[float] = None
    lon: Optional[float] = None


class ProfileRead(BaseModel):
    user_id: str
    name: Optional[str] = None
    country: Optional[str] = None
    emergency_contact: Optional[str] = None
    preferred_language: Optional[str] = None
    updated_at: datetime

    class Config:
        from_attributes = True


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=255)
    country: Optional[str] = Field(None, max_length=100)
    emergency_contact: Optional[str] = Field(None, max_length=100)
    preferred_language: Optional[Literal["ne", "en", "ar", "hi", "my"]] = None


class AdvisorRead(BaseModel):
    name: str
    speciality: str
    whatsapp: str
    email: str
    info: str
    whatsapp_url: str
    mailto_url: str


class SafetyRule(BaseModel):
    title: str
    content: str


class ConsultationRequest(BaseModel):
    name: str
    phone: str
    issue: str
    contact_method: Literal["whatsapp", "email"] = "whatsapp"
    attachment_filename: Optional[str] = None


class ConsultationAck(BaseModel):
    message: str
    contact_method: str
    attachment_filename: Optional[str] = None
