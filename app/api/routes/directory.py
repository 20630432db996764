"""
Emergency contacts, user profile and legal advisor endpoints
"""

import logging
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from sqlalchemy.orm import Session

from app.core import localization
from app.core.database import get_db
from app.middleware.auth import get_current_user_id
from app.schemas.directory import (
    AdvisorRead,
    ConsultationAck,
    ConsultationRequest,
    ContactRead,
    ContactType,
    ProfileRead,
    ProfileUpdate,
    SafetyRule,
)
from app.services.advisors import SAFETY_RULES, list_advisors, validate_consultation_request
from app.services.repositories import ContactRepository, ProfileRepository

router = APIRouter()
logger = logging.getLogger(__name__)

COUNTRIES = ["UAE", "Qatar", "Saudi Arabia", "Malaysia", "Kuwait"]


@router.get("/contacts", response_model=List[ContactRead])
async def list_contacts(
    country: str = Query(..., description="One of UAE, Qatar, Saudi Arabia, Malaysia, Kuwait"),
    type: Optional[ContactType] = Query(None, description="embassy, labor or ngo"),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    if country not in COUNTRIES:
        raise HTTPException(status_code=400, detail=f"Unsupported country: {country}")
    return ContactRepository(db).list_by_country(country, type)


@router.get("/profile", response_model=ProfileRead)
async def get_profile(user_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return ProfileRepository(db).get_or_create(user_id)


@router.put("/profile", response_model=ProfileRead)
async def update_profile(
    body: ProfileUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    profile = ProfileRepository(db).update(user_id, body.model_dump(exclude_unset=True))
    logger.info(f"Profile updated for {user_id}")
    return profile


@router.get("/advisors", response_model=List[AdvisorRead])
async def get_advisors(user_id: str = Depends(get_current_user_id)):
    return list_advisors()


@router.get("/advisors/safety-rules", response_model=List[SafetyRule])
async def get_safety_rules(user_id: str = Depends(get_current_user_id)):
    return SAFETY_RULES


@router.post("/advisors/requests", response_model=ConsultationAck, status_code=202)
async def request_consultation(
    name: str = Form(""),
    phone: str = Form(""),
    issue: str = Form(""),
    contact_method: Literal["whatsapp", "email"] = Form("whatsapp"),
    attachment: Optional[UploadFile] = File(None),
    user_id: str = Depends(get_current_user_id)
):
    request = ConsultationRequest(
        name=name,
        phone=phone,
        issue=issue,
        contact_method=contact_method,
        attachment_filename=attachment.filename if attachment else None
    )
    error = validate_consultation_request(request, attachment.content_type if attachment else None)
    if error:
        raise HTTPException(status_code=400, detail=error)

    logger.info(f"Consultation request from {user_id} via {request.contact_method}")
    return ConsultationAck(
        message=localization.ADVISOR_REQUEST_SENT,
        contact_method=request.contact_method,
        attachment_filename=request.attachment_filename
    )
