"""Request forms for login, registration and settings.

Each form carries the field-level messages shown next to the inputs. The
validation error handler in cyberguard.web.api turns failures into
{"detail": "Validation failed", "errors": {field: message}}.
"""

from __future__ import annotations

from pydantic import Field, ValidationInfo, field_validator

from cyberguard.core.models import EMAIL_DIGESTS
from cyberguard.utils.validators import MAX_PASSWORD_BYTES, password_too_long, validate_email
from cyberguard.web.schemas import CamelModel

PASSWORD_MIN_LENGTH = 8
PASSWORDS_DO_NOT_MATCH = "Passwords do not match"


def _check_password_bytes(value: str) -> str:
    if password_too_long(value):
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes.")
    return value


# =============================================================================
# AUTH FORMS
# =============================================================================


class LoginRequest(CamelModel):
    username: str
    password: str

    @field_validator("username")
    @classmethod
    def username_required(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Username is required.")
        return value

    @field_validator("password")
    @classmethod
    def password_required(cls, value: str) -> str:
        if not value:
            raise ValueError("Password is required.")
        return value


class RegisterRequest(CamelModel):
    """Registration form: credentials, confirmation and terms acceptance."""

    username: str
    password: str
    confirm_password: str
    accept_terms: bool = Field(False, validate_default=True)
    email: str | None = None

    @field_validator("username")
    @classmethod
    def username_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Username is required.")
        return value

    @field_validator("password")
    @classmethod
    def password_required(cls, value: str) -> str:
        if not value:
            raise ValueError("Password is required.")
        return _check_password_bytes(value)

    @field_validator("confirm_password")
    @classmethod
    def passwords_match(cls, value: str, info: ValidationInfo) -> str:
        if value != info.data.get("password"):
            raise ValueError(PASSWORDS_DO_NOT_MATCH)
        return value

    @field_validator("accept_terms")
    @classmethod
    def terms_accepted(cls, value: bool) -> bool:
        if value is not True:
            raise ValueError("You must accept the terms and conditions")
        return value

    @field_validator("email")
    @classmethod
    def email_format(cls, value: str | None) -> str | None:
        if value in (None, ""):
            return None
        if not validate_email(value):
            raise ValueError("Invalid email address.")
        return value


# =============================================================================
# SETTINGS FORMS
# =============================================================================


class ProfileUpdateRequest(CamelModel):
    username: str
    email: str
    role: str
    company: str
    phone: str | None = None
    bio: str | None = None

    @field_validator("username")
    @classmethod
    def username_length(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 2:
            raise ValueError("Username must be at least 2 characters.")
        return value

    @field_validator("email")
    @classmethod
    def email_format(cls, value: str) -> str:
        if not validate_email(value):
            raise ValueError("Invalid email address.")
        return value

    @field_validator("role")
    @classmethod
    def role_selected(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Please select a role.")
        return value

    @field_validator("company")
    @classmethod
    def company_present(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Please enter your company name.")
        return value


class PasswordChangeRequest(CamelModel):
    current_password: str
    new_password: str
    confirm_password: str

    @field_validator("current_password")
    @classmethod
    def current_required(cls, value: str) -> str:
        if not value:
            raise ValueError("Current password is required.")
        return _check_password_bytes(value)

    @field_validator("new_password")
    @classmethod
    def minimum_length(cls, value: str) -> str:
        if len(value) < PASSWORD_MIN_LENGTH:
            raise ValueError("Password must be at least 8 characters.")
        return _check_password_bytes(value)

    @field_validator("confirm_password")
    @classmethod
    def confirmation_matches(cls, value: str, info: ValidationInfo) -> str:
        if len(value) < PASSWORD_MIN_LENGTH:
            raise ValueError("Password must be at least 8 characters.")
        if value != info.data.get("new_password"):
            raise ValueError(PASSWORDS_DO_NOT_MATCH)
        return value


class NotificationPreferences(CamelModel):
    """Notification switches; doubles as the response of the settings endpoint."""

    security_alerts: bool = True
    new_modules: bool = True
    assessment_reminders: bool = True
    team_updates: bool = False
    marketing_emails: bool = False
    email_digest: str = "daily"

    @field_validator("email_digest")
    @classmethod
    def digest_choice(cls, value: str) -> str:
        if value not in EMAIL_DIGESTS:
            raise ValueError(f"Email digest must be one of: {', '.join(EMAIL_DIGESTS)}.")
        return value
