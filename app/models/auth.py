from pydantic import BaseModel, Field


class Credentials(BaseModel):
    email: str
    password: str = Field(min_length=1)


class AuthUser(BaseModel):
    uid: str
    email: str | None = None
    id_token: str
    refresh_token: str
    expires_in: int  # seconds
