from datetime import datetime

from pydantic import BaseModel, Field


class AuthToken(BaseModel):
    token: str = Field(description="Signed bearer credential.")
    expires_in: str = Field(description="Configured credential lifetime, e.g. '24h'.")


class Identity(BaseModel):
    username: str = Field(description="Authenticated username.")
    issued_at: datetime = Field(description="When the credential was issued.")
    expires_at: datetime = Field(description="When the credential stops being valid.")
