"""Auth request and response models.

Wire format uses camelCase field names; Python attributes are snake_case.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# bcrypt only looks at the first 72 bytes of input
MAX_PASSWORD_BYTES = 72


class LoginRequest(BaseModel):
    """Login credentials.

    No length rules are enforced here: an empty password must reach the
    workflow and fail as bad credentials rather than as a malformed request.
    """

    email: str
    password: str


class SignupRequest(BaseModel):
    """New account details.

    Attributes:
        email: Unique identity; no format validation is applied
        password: Plain-text password (hashed before storage)
        first_name: Given name (``firstName`` on the wire)
        last_name: Family name (``lastName`` on the wire)
    """

    model_config = ConfigDict(populate_by_name=True)

    email: str
    password: str
    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")

    @field_validator("password")
    @classmethod
    def password_fits_hash(cls, v: str) -> str:
        """Reject passwords bcrypt would silently truncate."""
        if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(
                f"Password must be at most {MAX_PASSWORD_BYTES} bytes"
            )
        return v


class LoginResponse(BaseModel):
    """Successful login: a signed token plus identity fields.

    Attributes:
        token: Signed bearer token whose subject is the email
        expires_in: Token validity window in milliseconds
    """

    model_config = ConfigDict(populate_by_name=True)

    token: str
    email: str
    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")
    expires_in: int = Field(alias="expiresIn")


class SignupResponse(BaseModel):
    """Successful signup."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    email: str
    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")
    message: str


class UserSummary(BaseModel):
    """Public view of a user record, without the password hash."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str]
    email: str
    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")
    active: bool
    created_at: int = Field(alias="createdAt")
    updated_at: int = Field(alias="updatedAt")
