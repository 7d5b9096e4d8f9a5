import re
from typing import ClassVar, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, Field

EMAIL_MAX = 255
PASSWORD_MIN = 8
PASSWORD_MAX = 100

_LOWER = re.compile(r"[a-z]")
_UPPER = re.compile(r"[A-Z]")
_DIGIT = re.compile(r"\d")


def email_violations(email: str) -> list[str]:
    """Every email rule the value breaks, in rule order."""
    problems = []
    if not email:
        problems.append("Email is required")
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        problems.append("Invalid email format")
    if len(email) > EMAIL_MAX:
        problems.append("Email must be less than 255 characters")
    return problems


def password_violations(password: str) -> list[str]:
    """Every password rule the value breaks, in rule order."""
    problems = []
    if len(password) < PASSWORD_MIN:
        problems.append("Password must be at least 8 characters")
    if len(password) > PASSWORD_MAX:
        problems.append("Password must be less than 100 characters")
    if not (_LOWER.search(password) and _UPPER.search(password) and _DIGIT.search(password)):
        problems.append(
            "Password must contain at least one uppercase letter, one lowercase letter, and one number"
        )
    return problems


class RegisterRequest(BaseModel):
    # shape only; the email and password rules are checked one by one in
    # validate_registration so that each broken rule is reported
    email: str
    password: str
    name: Optional[str] = Field(default=None, max_length=100)

    error_messages: ClassVar[dict[tuple[str, str], str]] = {
        ("email", "missing"): "Email is required",
        ("password", "missing"): "Password is required",
        ("name", "string_too_long"): "Name must be less than 100 characters",
    }


class LoginRequest(BaseModel):
    email: str = Field(min_length=1, max_length=EMAIL_MAX)
    password: str = Field(min_length=1, max_length=PASSWORD_MAX)


class UserOut(BaseModel):
    id: str
    email: str
    name: Optional[str] = None


class RegisterResponse(BaseModel):
    user: UserOut


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
