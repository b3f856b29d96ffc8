from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    password: str = Field(..., min_length=1)
    totp: str = Field(..., pattern=r"^\d{6}$")
