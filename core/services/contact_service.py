# =============================================================================
# core/services/contact_service.py - Contact Form Delivery
# =============================================================================
# Forwards contact form messages to a third-party form webhook as
# URL-encoded form data. The call has a declared timeout and its status is
# checked, so the caller always learns whether the message went out.
# =============================================================================

import logging

import httpx

from app.config import settings
from app.exceptions import ContactDeliveryError, ContactValidationError
from core.models.contact import CONTACT_SUCCESS_MESSAGE, ContactMessage, ContactResult

logger = logging.getLogger(__name__)


class ContactService:
    """Validates and delivers contact form submissions."""

    @staticmethod
    def submit(message: ContactMessage) -> ContactResult:
        """
        Validate a contact message and post it to the webhook.

        Args:
            message: name/email/message from the form

        Returns:
            ContactResult with the success text and an emptied form

        Raises:
            ContactValidationError: If any field is blank (no request is made)
            ContactDeliveryError: If the webhook is not configured, times out
                or answers with a non-2xx status
        """
        missing = message.missing_fields()
        if missing:
            raise ContactValidationError(missing)

        webhook_url = settings.CONTACT_WEBHOOK_URL
        if not webhook_url:
            logger.error("CONTACT_WEBHOOK_URL is not set; contact message not delivered")
            raise ContactDeliveryError()

        try:
            response = httpx.post(
                webhook_url,
                data={
                    "name": message.name,
                    "email": message.email,
                    "message": message.message,
                },
                headers={"Accept": "application/json"},
                timeout=settings.CONTACT_WEBHOOK_TIMEOUT_SECONDS,
            )
            response.raise_for_status()

        except httpx.TimeoutException:
            logger.error(
                f"Contact webhook timed out after {settings.CONTACT_WEBHOOK_TIMEOUT_SECONDS}s"
            )
            raise ContactDeliveryError()

        except httpx.HTTPStatusError as e:
            logger.error(f"Contact webhook rejected message: HTTP {e.response.status_code}")
            raise ContactDeliveryError()

        except httpx.HTTPError as e:
            logger.error(f"Contact webhook request failed: {e}")
            raise ContactDeliveryError()

        logger.info(f"Delivered contact message from {message.email}")
        return ContactResult(success=True, message=CONTACT_SUCCESS_MESSAGE)
