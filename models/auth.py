# models/auth.py
from pydantic import BaseModel, Field

class Credentials(BaseModel):
    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1)

class TokenResponse(BaseModel):
    token: str
    token_type: str = "bearer"
