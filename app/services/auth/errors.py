"""
Auth domain errors.

Each error is a 400 with a fixed message and machine-readable code, so the
auth service can raise them directly and the exception handlers render them
without translation.
"""

from common.utils.exceptions import BadRequestException


class AuthError(BadRequestException):
    """Base class for auth domain errors."""

    message = "Authentication error"
    code = "AUTH_ERROR"

    def __init__(self):
        super().__init__(message=type(self).message, code=type(self).code)


class EmailAlreadyExistsError(AuthError):
    message = "User with this email already exists"
    code = "EMAIL_ALREADY_EXISTS"


class UsernameAlreadyExistsError(AuthError):
    message = "User with this username already exists"
    code = "USERNAME_ALREADY_EXISTS"


class InvalidCredentialsError(AuthError):
    message = "Invalid credentials"
    code = "INVALID_CREDENTIALS"


class UserAlreadyVerifiedError(AuthError):
    message = "User already verified"
    code = "USER_ALREADY_VERIFIED"


class UserNotVerifiedError(AuthError):
    message = "User is not verified"
    code = "USER_NOT_VERIFIED"


class InvalidCodeError(AuthError):
    message = "Invalid code"
    code = "INVALID_CODE"


class CodeAlreadySentError(AuthError):
    message = "Code already sent, try again later"
    code = "CODE_ALREADY_SENT"


class NicknameAlreadySetError(AuthError):
    message = "Username is already set"
    code = "NICKNAME_ALREADY_SET"


class PasswordAlreadySetError(AuthError):
    message = "Password is already set"
    code = "PASSWORD_ALREADY_SET"


class PasswordNotSetError(AuthError):
    message = "Password is not set"
    code = "PASSWORD_NOT_SET"
