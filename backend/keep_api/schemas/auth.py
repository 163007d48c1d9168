"""Request/response schemas for admin registration and login."""

from pydantic import BaseModel, Field, field_validator

# bcrypt only accepts this many bytes of input
BCRYPT_MAX_PASSWORD_BYTES = 72


class Credentials(BaseModel):
    """Body of POST /register and POST /login."""
    username: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        if len(v.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
            raise ValueError(
                f"password must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes when UTF-8 encoded"
            )
        return v


class RegisterResponse(BaseModel):
    message: str = "User registered successfully."
    id: int
    username: str


class TokenResponse(BaseModel):
    token: str
