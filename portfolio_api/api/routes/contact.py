from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from portfolio_api.adapters.rate_limit.base import RateLimitConfig
from portfolio_api.api.responses import to_json_response
from portfolio_api.core.config import settings
from portfolio_api.core.rate_limit import rate_limit
from portfolio_api.core.responses import create_success_response
from portfolio_api.schemas.contact import ContactForm
from portfolio_api.schemas.responses import APIError
from portfolio_api.services.contact_service import ContactService, validate_contact_form

router = APIRouter(tags=["Contact"])

CONTACT_RATE_LIMIT_IDENTIFIER = "contact-form"


def contact_rate_limit_config() -> RateLimitConfig:
    return RateLimitConfig(
        max_requests=settings.rate_limit.contact_max_requests,
        window_ms=settings.rate_limit.contact_window_ms,
        identifier=CONTACT_RATE_LIMIT_IDENTIFIER,
    )


def get_contact_service() -> ContactService:
    return ContactService()


@router.post(
    "/contact",
    dependencies=[Depends(rate_limit(contact_rate_limit_config))],
)
async def submit_contact_form(
    request: Request,
    form: ContactForm,
    service: ContactService = Depends(get_contact_service),
) -> JSONResponse:
    """Accept a contact form submission.

    Returns:
        200 with ``{"received": true, ...}`` on success, 400
        ``VALIDATION_ERROR`` when fields are missing or the email is malformed.
    """
    headers = request.state.rate_limit_headers

    result = validate_contact_form(form)
    if isinstance(result, APIError):
        return to_json_response(result, headers=headers)

    receipt = service.submit(result)
    return to_json_response(create_success_response(receipt.model_dump()), headers=headers)
