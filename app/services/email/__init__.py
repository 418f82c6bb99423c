"""
Email services.
"""

from app.services.email.email_service import EmailService
from app.services.email.dispatcher import EmailDispatcher

__all__ = ["EmailService", "EmailDispatcher"]
