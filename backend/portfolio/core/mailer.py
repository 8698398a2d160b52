# portfolio/core/mailer.py
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional

from fastapi.concurrency import run_in_threadpool

from portfolio.core.settings import Settings

log = logging.getLogger("uvicorn.error")


@dataclass
class OutboundEmail:
    sender: str
    to: List[str]
    subject: str
    html: str
    text: Optional[str] = None


class EmailSendError(Exception):
    """The provider refused or failed a send. `error` is safe to return as JSON."""

    def __init__(self, error: Dict[str, Any]):
        super().__init__(error.get("message", "email send failed"))
        self.error = error


def _provider_error(name: str, message: str, status_code: Optional[int] = None) -> EmailSendError:
    return EmailSendError({"name": name, "message": message, "statusCode": status_code})


class Mailer:
    def __init__(
        self,
        provider: str,
        fn: Callable[[OutboundEmail], Awaitable[str]],
        close: Optional[Callable[[], None]] = None,
        outbox: Optional["FakeOutbox"] = None,
    ):
        self.provider = provider
        self._fn = fn
        self._close = close
        self.outbox = outbox
        self.closed = False

    async def send(self, email: OutboundEmail) -> str:
        if self.closed:
            raise _provider_error("client_closed", "mailer has been shut down")
        if not email.to:
            raise _provider_error("missing_recipients", "no recipients configured", 422)
        return await self._fn(email)

    def close(self) -> None:
        if self.closed:
            return
        if self._close:
            self._close()
        self.closed = True


# -----------------------
# Fake (dev / tests)
# -----------------------
@dataclass
class FakeOutbox:
    sent: List[OutboundEmail] = field(default_factory=list)


def _fake_mailer() -> Mailer:
    outbox = FakeOutbox()

    async def _send(email: OutboundEmail) -> str:
        outbox.sent.append(email)
        message_id = f"fake-{uuid.uuid4()}"
        log.info(f"[mailer] fake send {message_id} to={email.to} subject={email.subject!r}")
        return message_id

    return Mailer("fake", _send, outbox=outbox)


# -----------------------
# SendGrid
# -----------------------
def _sendgrid_mailer(api_key: Optional[str]) -> Mailer:
    try:
        from sendgrid import SendGridAPIClient
        from sendgrid.helpers.mail import Mail
    except ImportError as e:
        raise ImportError(
            "Missing dependency 'sendgrid'. Install the project with its runtime dependencies."
        ) from e

    if not api_key:
        raise RuntimeError(
            "SENDGRID_API_KEY is not set. Put it in your environment or .env file (do NOT hardcode it)."
        )

    client = SendGridAPIClient(api_key)

    def _deliver(email: OutboundEmail) -> str:
        message = Mail(
            from_email=email.sender,
            to_emails=email.to,
            subject=email.subject,
            html_content=email.html,
            plain_text_content=email.text,
        )
        try:
            response = client.send(message)
        except Exception as exc:
            status = getattr(exc, "status_code", None)
            log.error(f"[mailer] sendgrid send failed: {exc}")
            raise _provider_error("provider_error", str(exc) or "sendgrid request failed", status) from exc

        if response.status_code >= 300:
            raise _provider_error(
                "provider_error",
                f"sendgrid returned status {response.status_code}",
                response.status_code,
            )
        headers = response.headers or {}
        return headers.get("X-Message-Id", "")

    async def _send(email: OutboundEmail) -> str:
        return await run_in_threadpool(_deliver, email)

    return Mailer("sendgrid", _send)


def get_mailer(config: Settings) -> Mailer:
    provider = config.email_provider.lower()
    if provider == "sendgrid":
        return _sendgrid_mailer(config.sendgrid_api_key)
    if provider != "fake":
        raise RuntimeError(f"Unknown EMAIL_PROVIDER {config.email_provider!r}; expected 'fake' or 'sendgrid'")
    return _fake_mailer()


__all__ = ["Mailer", "OutboundEmail", "EmailSendError", "get_mailer"]
