"""Form submissions and service health."""

import re

import structlog
from fastapi import APIRouter

from horizon_talk.api.dependencies import error_response
from horizon_talk.models.base import utc_now
from horizon_talk.models.requests import ContactRequest, FeedbackFormRequest

logger = structlog.get_logger()
router = APIRouter(prefix="/api")

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


@router.post("/contact")
async def contact(body: ContactRequest) -> dict:
    """Accept a contact form message."""
    if not all((body.name, body.email, body.subject, body.message)):
        return error_response("All fields are required", 400)
    if not EMAIL_PATTERN.match(body.email):
        return error_response("Invalid email address", 400)

    logger.info(
        "contact_form_submitted",
        name=body.name,
        email=body.email,
        subject=body.subject,
        message=body.message,
        submitted_at=utc_now().isoformat(),
    )
    return {
        "success": True,
        "message": "Thank you for your message. We'll get back to you soon!",
    }


@router.post("/feedback")
async def submit_feedback(body: FeedbackFormRequest) -> dict:
    """Accept a product feedback form (1-5 star rating plus text)."""
    if body.rating is None or not all((body.category, body.subject, body.message)):
        return error_response("All fields are required", 400)
    if not 1 <= body.rating <= 5:
        return error_response("Rating must be between 1 and 5", 400)

    logger.info(
        "feedback_submitted",
        user_id=body.user_id,
        user_email=body.user_email,
        rating=body.rating,
        category=body.category,
        subject=body.subject,
        message=body.message,
        submitted_at=utc_now().isoformat(),
    )
    return {"success": True, "message": "Thank you for your feedback!"}


@router.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}
