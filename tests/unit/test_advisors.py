"""
Unit tests for the legal advisor directory
"""

import pytest
from urllib.parse import unquote

from app.core import localization
from app.schemas.directory import ConsultationRequest
from app.services.advisors import (
    SAFETY_RULES,
    list_advisors,
    mailto_url,
    validate_consultation_request,
    whatsapp_url,
)


@pytest.mark.unit
class TestAdvisors:

    def test_three_uae_advisors(self):
        advisors = list_advisors()
        assert len(advisors) == 3
        assert advisors[0].whatsapp_url == "https://wa.me/971501888453"

    def test_whatsapp_url_keeps_digits_only(self):
        assert whatsapp_url("+971 50-491 1142") == "https://wa.me/971504911142"

    def test_mailto_has_nepali_subject(self):
        url = mailto_url("info@alkabban.com")
        assert url.startswith("mailto:info@alkabban.com?subject=")
        assert localization.ADVISOR_EMAIL_SUBJECT in unquote(url)

    def test_seven_safety_rules(self):
        assert len(SAFETY_RULES) == 7


@pytest.mark.unit
class TestConsultationValidation:

    def test_valid_request(self):
        request = ConsultationRequest(name="Ram", phone="+971500000000", issue="तलब आएको छैन")
        assert validate_consultation_request(request) is None

    def test_required_fields(self):
        request = ConsultationRequest(name="Ram", phone=" ", issue="तलब")
        assert validate_consultation_request(request) == localization.ADVISOR_FIELDS_REQUIRED

    def test_attachment_must_be_pdf(self):
        request = ConsultationRequest(name="Ram", phone="1", issue="x", attachment_filename="photo.jpg")
        assert validate_consultation_request(request, "image/jpeg") == localization.ADVISOR_PDF_ONLY
        assert validate_consultation_request(request, "application/pdf") is None
