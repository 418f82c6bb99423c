"""
Authentication orchestration.

Drives a user through registration, email verification, profile and
password setup, login, token refresh and logout:

    unregistered -> pending verification -> verified without password
                 -> verified with password

Multi-step writes run under the transaction manager so a failure at any
step leaves no partial state behind.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClientSession

from common.auth import JWTManager, PasswordHasher
from common.database import TransactionManager
from common.utils.exceptions import NotFoundException
from config.email_config import VERIFICATION_SUBJECT, VERIFICATION_BODY
from app.services.auth import errors
from app.services.auth.session_manager import SessionManager, SessionNotFoundError
from app.services.auth.token_hasher import TokenHasher
from app.services.code.code_service import (
    CodeService,
    CodeAlreadySentError,
    CodeNotFoundError,
)
from app.services.email.dispatcher import EmailDispatcher
from app.services.user.user_service import UserService, UserAlreadyExistsError

logger = logging.getLogger(__name__)


class AuthService:
    """
    Stateless coordinator over the user directory, code engine, session
    store and token manager. All per-call state lives in the database.
    """

    def __init__(
        self,
        user_service: UserService,
        code_service: CodeService,
        session_manager: SessionManager,
        jwt_manager: JWTManager,
        password_hasher: PasswordHasher,
        transaction_manager: TransactionManager,
        email_dispatcher: EmailDispatcher,
    ):
        self._user_service = user_service
        self._code_service = code_service
        self._session_manager = session_manager
        self._jwt_manager = jwt_manager
        self._password_hasher = password_hasher
        self._tx = transaction_manager
        self._email_dispatcher = email_dispatcher

    # ─────────────────────────────────────────────────────────────────
    # Registration
    # ─────────────────────────────────────────────────────────────────

    async def register_email(self, email: str) -> None:
        """
        Create an unverified user and email them a verification code.

        Args:
            email: Address to register

        Raises:
            EmailAlreadyExistsError: A user with this email exists, verified
                or not
        """
        existing = await self._user_service.get_user_by_email(email)
        if existing:
            raise errors.EmailAlreadyExistsError()

        async def create_with_code(session: AsyncIOMotorClientSession) -> str:
            user = await self._user_service.create_user(email, session=session)
            return await self._code_service.generate_verify(user["_id"], session=session)

        try:
            code = await self._tx.run(create_with_code)
        except UserAlreadyExistsError:
            # Lost the race to a concurrent registration
            raise errors.EmailAlreadyExistsError()

        logger.info(f"Registration started for {email}")
        self._send_verification_code(email, code)

    async def register_verify(self, email: str, code: str, user_agent: str) -> dict:
        """
        Verify the email with the code and sign the user in.

        Args:
            email: Registered address
            code: Verification code from the email
            user_agent: Client User-Agent header, stored on the session

        Returns:
            dict with user, accessToken and refreshToken

        Raises:
            InvalidCredentialsError: No user with this email
            UserAlreadyVerifiedError: Email already verified
            InvalidCodeError: Code is wrong or expired
        """
        user = await self._user_service.get_user_by_email(email)
        if not user:
            raise errors.InvalidCredentialsError()

        if user.get("isVerified"):
            raise errors.UserAlreadyVerifiedError()

        user_id = user["_id"]

        try:
            await self._code_service.validate_verify(user_id, code)
        except CodeNotFoundError:
            raise errors.InvalidCodeError()

        async def verify_and_sign_in(session: AsyncIOMotorClientSession) -> tuple:
            verified = await self._user_service.verify_user(user_id, session=session)
            if verified is None:
                raise errors.UserAlreadyVerifiedError()
            tokens = await self._generate_tokens(user_id, user_agent, session)
            return verified, tokens

        verified, tokens = await self._tx.run(verify_and_sign_in)

        return {
            "user": self._user_service.format_user_response(verified),
            **tokens,
        }

    async def verify_resend(self, email: str) -> None:
        """
        Email a fresh verification code.

        Raises:
            InvalidCredentialsError: No user with this email
            UserAlreadyVerifiedError: Email already verified
            CodeAlreadySentError: Previous code is still in its resend cooldown
        """
        user = await self._user_service.get_user_by_email(email)
        if not user:
            raise errors.InvalidCredentialsError()

        if user.get("isVerified"):
            raise errors.UserAlreadyVerifiedError()

        try:
            code = await self._code_service.generate_verify(user["_id"])
        except CodeAlreadySentError:
            raise errors.CodeAlreadySentError()

        self._send_verification_code(email, code)

    async def save_profile_info(
        self,
        user_id: int,
        username: str,
        first_name: str,
        last_name: str,
    ) -> dict:
        """
        Claim a username and set first/last name, all or nothing.

        Args:
            user_id: Authenticated user
            username: Username to claim (one-time)
            first_name: First name
            last_name: Last name

        Returns:
            Formatted user

        Raises:
            NotFoundException: Authenticated user no longer exists
            NicknameAlreadySetError: User already has a username
            UsernameAlreadyExistsError: Username taken by another user
        """
        user = await self._get_user_or_404(user_id)

        if user.get("username"):
            raise errors.NicknameAlreadySetError()

        if not await self._user_service.is_username_available(username):
            raise errors.UsernameAlreadyExistsError()

        try:
            updated = await self._user_service.set_profile_info(
                user_id, username, first_name, last_name
            )
        except UserAlreadyExistsError:
            raise errors.UsernameAlreadyExistsError()

        if updated is None:
            raise errors.NicknameAlreadySetError()

        return self._user_service.format_user_response(updated)

    async def save_password(self, user_id: int, password: str) -> None:
        """
        Set the account password. Once set it cannot be replaced here.

        Raises:
            NotFoundException: Authenticated user no longer exists
            PasswordAlreadySetError: User already has a password
        """
        user = await self._get_user_or_404(user_id)

        if user.get("passwordHash"):
            raise errors.PasswordAlreadySetError()

        password_hash = await asyncio.to_thread(self._password_hasher.hash_password, password)

        if not await self._user_service.set_password(user_id, password_hash):
            raise errors.PasswordAlreadySetError()

    # ─────────────────────────────────────────────────────────────────
    # Login / session lifecycle
    # ─────────────────────────────────────────────────────────────────

    async def get_user_by_email(self, email: str) -> dict:
        """
        First login step: tells the client which flow the account needs.

        Raises:
            InvalidCredentialsError: No user with this email
        """
        user = await self._user_service.get_user_by_email(email)
        if not user:
            raise errors.InvalidCredentialsError()

        return self._user_service.format_user_response(user)

    async def login(self, email: str, password: str, user_agent: str) -> dict:
        """
        Sign in with email and password.

        Returns:
            dict with user, accessToken and refreshToken

        Raises:
            InvalidCredentialsError: No such user or wrong password
            UserNotVerifiedError: Email not verified yet
            PasswordNotSetError: Verified account without a password
        """
        user = await self._user_service.get_user_by_email(email)
        if not user:
            raise errors.InvalidCredentialsError()

        if not user.get("isVerified"):
            raise errors.UserNotVerifiedError()

        password_hash = user.get("passwordHash")
        if not password_hash:
            raise errors.PasswordNotSetError()

        matches = await asyncio.to_thread(
            self._password_hasher.verify_password, password, password_hash
        )
        if not matches:
            raise errors.InvalidCredentialsError()

        tokens = await self._generate_tokens(user["_id"], user_agent)
        logger.info(f"User {user['_id']} logged in")

        return {
            "user": self._user_service.format_user_response(user),
            **tokens,
        }

    async def refresh(self, token: str, user_agent: str) -> dict:
        """
        Rotate a refresh token.

        The old session is consumed and the new one created in the same
        transaction, so a failure in between keeps the old token valid.

        Returns:
            dict with accessToken and refreshToken

        Raises:
            SessionNotFoundError: Token is unknown, expired or already used
        """
        async def rotate(session: AsyncIOMotorClientSession) -> dict:
            user_id = await self._session_manager.consume_session(token, session=session)
            return await self._generate_tokens(user_id, user_agent, session)

        return await self._tx.run(rotate)

    async def logout(self, token: str) -> None:
        """Invalidate a refresh token. Unknown tokens are ignored."""
        try:
            await self._session_manager.consume_session(token)
        except SessionNotFoundError:
            logger.debug("Logout with unknown or expired refresh token")

    # ─────────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────────

    async def _generate_tokens(
        self,
        user_id: int,
        user_agent: str,
        session: Optional[AsyncIOMotorClientSession] = None,
    ) -> dict:
        """Mint an access token and persist a new refresh session."""
        try:
            access_token = self._jwt_manager.generate_access_token(user_id)
            refresh_token = TokenHasher.generate_token()
            expires_at = datetime.now(timezone.utc) + self._jwt_manager.refresh_token_ttl

            await self._session_manager.create_session(
                refresh_token,
                user_agent,
                user_id,
                expires_at,
                session=session,
            )
        except Exception as e:
            logger.error(f"Failed to generate tokens for user {user_id}: {e}")
            raise

        return {"accessToken": access_token, "refreshToken": refresh_token}

    async def _get_user_or_404(self, user_id: int) -> dict:
        user = await self._user_service.get_user_by_id(user_id)
        if not user:
            raise NotFoundException("User not found", code="USER_NOT_FOUND")
        return user

    def _send_verification_code(self, email: str, code: str) -> None:
        self._email_dispatcher.dispatch(
            VERIFICATION_SUBJECT,
            VERIFICATION_BODY.format(code=code),
            [email],
        )
