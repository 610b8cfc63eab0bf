# =============================================================================
# core/models/contact.py - Contact Form Schemas
# =============================================================================
# The contact form on the profile section posts name/email/message. Fields
# are plain strings here so that blank values reach the service, which
# reports every missing field at once.
# =============================================================================

from pydantic import BaseModel, Field

CONTACT_SUCCESS_MESSAGE = "Thank you for your message! I'll get back to you as soon as possible."


class ContactMessage(BaseModel):
    """A message submitted through the contact form."""

    name: str = ""
    email: str = ""
    message: str = ""

    def missing_fields(self) -> list[str]:
        return [
            field
            for field in ("name", "email", "message")
            if not getattr(self, field).strip()
        ]


class ContactFormState(BaseModel):
    """Form field values the client should display after submitting."""

    name: str = ""
    email: str = ""
    message: str = ""


class ContactResult(BaseModel):
    """Outcome of a contact form submission."""

    success: bool
    message: str
    form: ContactFormState = Field(default_factory=ContactFormState)
