"""Contact form handling.

Validation lives here so the route only translates results into responses.
Submissions are delivered to the application log; mail transport is out of
scope for this service.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from portfolio_api.core.config import settings
from portfolio_api.core.errors import ErrorCode
from portfolio_api.core.responses import (
    create_error_response,
    validate_email,
    validate_required_fields,
)
from portfolio_api.core.security import sanitize_input
from portfolio_api.schemas.contact import ContactForm, ContactReceipt
from portfolio_api.schemas.responses import APIError

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "email", "message")


@dataclass(frozen=True)
class ContactSubmission:
    name: str
    email: str
    message: str


def validate_contact_form(form: ContactForm) -> ContactSubmission | APIError:
    """Check a contact form and return either a clean submission or an error.

    Returns:
        ContactSubmission with sanitized fields, or an ``APIError``
        (``VALIDATION_ERROR``) describing the first problem found.
    """
    data = form.model_dump()

    required = validate_required_fields(data, REQUIRED_FIELDS)
    if not required.is_valid:
        return create_error_response(
            ErrorCode.VALIDATION_ERROR,
            "All fields are required",
            {"missingFields": required.missing_fields},
        )

    email = data["email"].strip()
    if not validate_email(email):
        return create_error_response(
            ErrorCode.VALIDATION_ERROR,
            "Invalid email format",
            {"field": "email"},
        )

    name = sanitize_input(data["name"])
    message = sanitize_input(data["message"])
    sanitized = validate_required_fields({"name": name, "message": message}, ("name", "message"))
    if not sanitized.is_valid:
        return create_error_response(
            ErrorCode.VALIDATION_ERROR,
            "All fields are required",
            {"missingFields": sanitized.missing_fields},
        )

    return ContactSubmission(name=name, email=email, message=message)


class ContactService:
    """Deliver validated contact submissions to the site owner."""

    def __init__(self, recipient: str | None = None) -> None:
        self._recipient = recipient or settings.site.contact_email

    def submit(self, submission: ContactSubmission) -> ContactReceipt:
        logger.info(
            "contact.received",
            extra={
                "recipient": self._recipient,
                "email": submission.email,
                "contact_message": submission.message,
                "message_chars": len(submission.message),
            },
        )
        return ContactReceipt(name=submission.name, delivery="log")
