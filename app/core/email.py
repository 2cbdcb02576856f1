"""Transactional email via Resend.

The Resend SDK is synchronous; sends run in a worker thread and transient
provider errors are retried here, in the mail client, never by callers.
"""

import logging
from typing import Protocol

import resend
from anyio import to_thread
from resend.exceptions import ResendError

from app.core.constants import EmailTemplates, JinjaCompiledEmailTemplatesEnv
from app.core.exceptions import ExternalServiceError
from app.core.retry import with_retry
from app.core.settings import Settings, get_settings

logger = logging.getLogger(__name__)


class EmailDeliveryError(ExternalServiceError):
    """Raised when the mail provider rejects or fails a send."""

    error_type = "email_delivery_error"

    def __init__(self, message: str = "Failed to send email"):
        super().__init__(message)


class ConfirmationMailer(Protocol):
    async def send_confirmation(self, *, to: str, token: str) -> None: ...


def _render_template(template_name: str, **context: str) -> str:
    """Render a pre-compiled email template.

    Templates are pre-compiled with CSS inlined and HTML minified.
    Run `python scripts/compile_emails.py` after modifying source templates.
    """
    template = JinjaCompiledEmailTemplatesEnv.get_template(template_name)
    return template.render(**context)


def init_resend() -> None:
    """Initialize Resend with API key if available."""
    settings = get_settings()
    if not settings.resend_api_key:
        return
    resend.api_key = settings.resend_api_key


class ResendMailer:
    """Notification sink backed by the Resend API."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def confirm_url(self, token: str) -> str:
        return f"{self.settings.client_url}/confirm-email?hash={token}"

    async def send_confirmation(self, *, to: str, token: str) -> None:
        """Send the email-confirmation message carrying ``token``.

        Raises:
            EmailDeliveryError: If Resend still fails after the retry budget
        """
        confirm_url = self.confirm_url(token)

        if not self.settings.resend_api_key:
            # Development: no transport configured, surface the link in logs.
            logger.warning("RESEND_API_KEY not set; confirm URL: %s", confirm_url)
            return

        html_content = _render_template(
            EmailTemplates.CONFIRM_EMAIL.compiled,
            app_name=self.settings.app_name,
            confirm_url=confirm_url,
        )
        params: resend.Emails.SendParams = {
            "from": self.settings.mail_from,
            "to": [to],
            "subject": f"{self.settings.app_name} - Confirm your email",
            "html": html_content,
        }

        try:
            await with_retry(
                lambda: to_thread.run_sync(resend.Emails.send, params),
                attempts=self.settings.mail_send_attempts,
                exceptions=(ResendError,),
            )
        except ResendError as e:
            raise EmailDeliveryError() from e
