# portfolio/routers/send.py
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from portfolio.core.contact_store import ContactStore
from portfolio.core.mailer import EmailSendError, Mailer, OutboundEmail
from portfolio.core.settings import settings
from portfolio.dependencies import get_contact_store, get_mailer
from portfolio.lib.email_template import render_greeting
from portfolio.lib.submission import Submission, validate_submission

router = APIRouter(prefix="/api", tags=["contact"])
log = logging.getLogger("uvicorn.error")

SUCCESS_MESSAGE = "Message Sent Successfully"


def _error(status_code: int, error: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error})


def _invalid(fields: Dict[str, str]) -> JSONResponse:
    return _error(400, {"name": "validation_error", "message": "Invalid submission", "fields": fields})


def build_contact_email(submission: Submission) -> OutboundEmail:
    html, text = render_greeting(submission.name)
    return OutboundEmail(
        sender=settings.contact_from_email,
        to=settings.contact_recipients(),
        subject=submission.subject,
        html=html,
        text=text,
    )


@router.post("/send")
async def send_message(
    request: Request,
    mailer: Mailer = Depends(get_mailer),
    store: ContactStore = Depends(get_contact_store),
):
    try:
        body = await request.json()
    except ValueError:
        return _invalid({"__root__": "Request body must be valid JSON"})

    submission, errors = validate_submission(body)
    if submission is None:
        log.info(f"[send] rejected submission, fields={sorted(errors)}")
        return _invalid(errors)

    try:
        message_id = await mailer.send(build_contact_email(submission))
    except EmailSendError as exc:
        log.error(f"[send] email provider error: {exc.error}")
        return _error(500, exc.error)
    except Exception as exc:
        log.exception("[send] email dispatch failed")
        return _error(500, {"name": "email_error", "message": str(exc) or type(exc).__name__})

    log.info(f"[send] email {message_id} dispatched via {mailer.provider}")

    # Email is already out; a failure here is reported but not compensated.
    try:
        stored = await store.record_submission(submission)
    except Exception:
        log.warning(f"[send] email {message_id} sent but persisting the submission failed", exc_info=True)
        return _error(500, {"name": "persistence_error", "message": "Failed to record message"})

    log.info(f"[send] stored message {stored.message_id} for user {stored.user_id}")
    return {"message": SUCCESS_MESSAGE}
