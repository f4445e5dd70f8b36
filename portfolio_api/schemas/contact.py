"""Pydantic schemas for the contact form."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ContactForm(BaseModel):
    """Contact form payload.

    Fields are optional at the schema level so missing values are reported
    through the standard ``VALIDATION_ERROR`` response (with the list of
    missing fields) instead of a framework error.
    """

    name: str | None = Field(default=None, description="Sender name.")
    email: str | None = Field(default=None, description="Sender email address.")
    message: str | None = Field(default=None, description="Message body.")


class ContactReceipt(BaseModel):
    received: bool = True
    name: str
    delivery: str = Field(..., description="How the submission was delivered (e.g., 'log').")
