# =============================================================================
# app/routers/contact.py - Contact Form Endpoint
# =============================================================================

from fastapi import APIRouter

from core.models.contact import ContactMessage, ContactResult
from core.services.contact_service import ContactService

router = APIRouter()


@router.post("/contact", response_model=ContactResult)
def submit_contact(message: ContactMessage):
    """
    Send a message through the contact form.

    Returns the confirmation text and an emptied form on success.

    Raises:
        400: If a field is blank
        502: If the message could not be delivered
    """
    return ContactService.submit(message)
