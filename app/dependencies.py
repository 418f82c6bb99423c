"""
FastAPI dependencies for the Kushfinds application.

Provides dependency injection for all services.
"""

from typing import Annotated, Optional

from fastapi import Depends, Request
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from common.auth import JWTManager, PasswordHasher
from common.database import TransactionManager
from app.config import Settings
from app.middleware.auth import AuthMiddleware, AuthPrincipal
from app.services.auth.auth_service import AuthService
from app.services.auth.session_manager import SessionManager
from app.services.code.code_service import CodeService
from app.services.email.dispatcher import EmailDispatcher
from app.services.email.email_service import EmailService
from app.services.user.user_service import UserService


# ─────────────────────────────────────────────────────────────────
# Service instances
# ─────────────────────────────────────────────────────────────────

_jwt_manager: Optional[JWTManager] = None
_auth_middleware: Optional[AuthMiddleware] = None
_session_manager: Optional[SessionManager] = None
_auth_service: Optional[AuthService] = None

_user_service: Optional[UserService] = None
_code_service: Optional[CodeService] = None

_email_service: Optional[EmailService] = None
_email_dispatcher: Optional[EmailDispatcher] = None


# ─────────────────────────────────────────────────────────────────
# Initialization functions
# ─────────────────────────────────────────────────────────────────

def init_email_services(settings: Settings) -> None:
    """Initialize email services."""
    global _email_service, _email_dispatcher

    _email_service = EmailService(
        mode=settings.EMAIL_MODE,
        resend_api_key=settings.RESEND_API_KEY,
        from_email=settings.SMTP_FROM_EMAIL,
        from_name=settings.SMTP_FROM_NAME,
        smtp_host=settings.SMTP_HOST,
        smtp_port=settings.SMTP_PORT,
        smtp_user=settings.SMTP_USER,
        smtp_password=settings.SMTP_PASSWORD,
    )
    _email_dispatcher = EmailDispatcher(_email_service)


def init_user_services(db: AsyncIOMotorDatabase) -> None:
    """Initialize user and verification code services."""
    global _user_service, _code_service

    _user_service = UserService(db=db)
    _code_service = CodeService(db=db)


def init_auth_services(
    db: AsyncIOMotorDatabase,
    client: AsyncIOMotorClient,
    settings: Settings,
) -> None:
    """Initialize auth services. Needs user and email services first."""
    global _jwt_manager, _auth_middleware, _session_manager, _auth_service

    _jwt_manager = JWTManager(
        secret=settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
        access_token_expire_minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES,
        refresh_token_expire_days=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS,
    )
    _auth_middleware = AuthMiddleware(jwt_manager=_jwt_manager)
    _session_manager = SessionManager(db=db)

    _auth_service = AuthService(
        user_service=get_user_service(),
        code_service=get_code_service(),
        session_manager=_session_manager,
        jwt_manager=_jwt_manager,
        password_hasher=PasswordHasher(),
        transaction_manager=TransactionManager(
            client,
            enabled=settings.MONGODB_TRANSACTIONS_ENABLED,
        ),
        email_dispatcher=get_email_dispatcher(),
    )


def init_all_services(
    db: AsyncIOMotorDatabase,
    client: AsyncIOMotorClient,
    settings: Settings,
) -> None:
    """Initialize every service in dependency order."""
    init_email_services(settings)
    init_user_services(db)
    init_auth_services(db, client, settings)


# ─────────────────────────────────────────────────────────────────
# Getters
# ─────────────────────────────────────────────────────────────────

def get_auth_service() -> AuthService:
    """Get auth service instance."""
    if _auth_service is None:
        raise RuntimeError("Auth services not initialized.")
    return _auth_service


def get_auth_middleware() -> AuthMiddleware:
    """Get auth middleware instance."""
    if _auth_middleware is None:
        raise RuntimeError("Auth services not initialized.")
    return _auth_middleware


def get_user_service() -> UserService:
    """Get user service instance."""
    if _user_service is None:
        raise RuntimeError("User services not initialized.")
    return _user_service


def get_code_service() -> CodeService:
    """Get verification code service instance."""
    if _code_service is None:
        raise RuntimeError("User services not initialized.")
    return _code_service


def get_email_dispatcher() -> EmailDispatcher:
    """Get email dispatcher instance."""
    if _email_dispatcher is None:
        raise RuntimeError("Email services not initialized.")
    return _email_dispatcher


def require_auth(
    request: Request,
    auth_middleware: Annotated[AuthMiddleware, Depends(get_auth_middleware)]
) -> AuthPrincipal:
    """Dependency that requires a valid access token."""
    return auth_middleware.require_auth(request)


def get_user_agent(request: Request) -> str:
    """Extract User-Agent from request."""
    return request.headers.get("User-Agent", "")
