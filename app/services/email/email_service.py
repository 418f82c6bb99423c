"""
Email service for sending transactional emails.

Supports SMTP, Resend API, and console logging modes.
"""

import logging
from email.mime.text import MIMEText
from typing import List, Optional

import httpx
import aiosmtplib

from config.email_config import RESEND_API_URL, EMAIL_DEFAULTS

logger = logging.getLogger(__name__)


class EmailService:
    """
    Email service with multi-mode support.

    Modes:
        - console: Log emails to console (development)
        - smtp: Send via SMTP
        - resend: Send via Resend HTTP API
    """

    def __init__(
        self,
        mode: Optional[str] = None,
        resend_api_key: Optional[str] = None,
        from_email: Optional[str] = None,
        from_name: Optional[str] = None,
        smtp_host: Optional[str] = None,
        smtp_port: Optional[int] = None,
        smtp_user: Optional[str] = None,
        smtp_password: Optional[str] = None,
    ):
        """
        Initialize email service.

        Args:
            mode: "console", "smtp", or "resend"
            resend_api_key: Resend API key
            from_email: Sender email address
            from_name: Sender display name
            smtp_host: SMTP server host
            smtp_port: SMTP server port
            smtp_user: SMTP username
            smtp_password: SMTP password
        """
        self._mode = mode or EMAIL_DEFAULTS["mode"]
        self._from_email = from_email or EMAIL_DEFAULTS["from_email"]
        self._from_name = from_name or EMAIL_DEFAULTS["from_name"]
        self._resend_api_key = resend_api_key

        self._smtp_host = smtp_host
        self._smtp_port = smtp_port or EMAIL_DEFAULTS["smtp_port"]
        self._smtp_user = smtp_user
        self._smtp_password = smtp_password

        if self._mode == "resend" and not self._resend_api_key:
            logger.warning("Resend API key not configured, falling back to console mode")
            self._mode = "console"
        elif self._mode == "smtp" and not self._smtp_host:
            logger.warning("SMTP host not configured, falling back to console mode")
            self._mode = "console"

        logger.info(f"Email service initialized in {self._mode} mode")

    @property
    def mode(self) -> str:
        return self._mode

    async def send(self, subject: str, body: str, recipients: List[str]) -> dict:
        """
        Send a plain-text email via the configured provider.

        Args:
            subject: Email subject
            body: Plain text content
            recipients: Recipient addresses

        Returns:
            dict with success status and details
        """
        if not recipients:
            return {"success": False, "error": "No recipients"}

        if self._mode == "console":
            return self._send_console(subject, body, recipients)
        elif self._mode == "smtp":
            return await self._send_smtp(subject, body, recipients)
        elif self._mode == "resend":
            return await self._send_resend(subject, body, recipients)
        else:
            logger.error(f"Unknown email mode: {self._mode}")
            return {"success": False, "error": f"Unknown email mode: {self._mode}"}

    def _send_console(self, subject: str, body: str, recipients: List[str]) -> dict:
        """Log email to console (development mode)."""
        logger.info("=" * 60)
        logger.info("EMAIL (console mode)")
        logger.info(f"To: {', '.join(recipients)}")
        logger.info(f"Subject: {subject}")
        logger.info("-" * 60)
        logger.info(body)
        logger.info("=" * 60)

        return {
            "success": True,
            "mode": "console",
            "message": "Email logged to console",
        }

    async def _send_smtp(self, subject: str, body: str, recipients: List[str]) -> dict:
        """Send email via SMTP."""
        try:
            message = MIMEText(body, "plain", "utf-8")
            message["Subject"] = subject
            message["From"] = f"{self._from_name} <{self._from_email}>"
            message["To"] = ", ".join(recipients)

            # SSL on 465, STARTTLS otherwise
            use_tls = self._smtp_port == 465

            await aiosmtplib.send(
                message,
                hostname=self._smtp_host,
                port=self._smtp_port,
                username=self._smtp_user,
                password=self._smtp_password,
                use_tls=use_tls,
                start_tls=not use_tls,
            )

            logger.info(f"Email sent via SMTP to {len(recipients)} recipient(s)")
            return {
                "success": True,
                "mode": "smtp",
                "message": "Email sent via SMTP",
            }

        except Exception as e:
            logger.error(f"Failed to send email via SMTP: {e}")
            return {
                "success": False,
                "error": str(e),
            }

    async def _send_resend(self, subject: str, body: str, recipients: List[str]) -> dict:
        """Send email via Resend API."""
        async with httpx.AsyncClient() as client:
            try:
                response = await client.post(
                    RESEND_API_URL,
                    headers={
                        "Authorization": f"Bearer {self._resend_api_key}",
                        "Content-Type": "application/json",
                    },
                    json={
                        "from": f"{self._from_name} <{self._from_email}>",
                        "to": recipients,
                        "subject": subject,
                        "text": body,
                    },
                )

                if response.status_code == 200:
                    data = response.json()
                    return {
                        "success": True,
                        "mode": "resend",
                        "messageId": data.get("id"),
                    }
                else:
                    error_data = response.json()
                    error_msg = error_data.get("message", "Unknown error")
                    logger.error(f"Resend API error: {error_msg}")
                    return {
                        "success": False,
                        "error": error_msg,
                    }

            except Exception as e:
                logger.error(f"Failed to send email via Resend: {e}")
                return {
                    "success": False,
                    "error": str(e),
                }
