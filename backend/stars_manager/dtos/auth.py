"""Auth DTOs"""

from pydantic import BaseModel, Field


class TokenLoginRequest(BaseModel):
    token: str = Field(..., min_length=1, description="GitHub personal access token")


class GithubUser(BaseModel):
    login: str
    avatar_url: str = ""


class UserResponse(BaseModel):
    login: str
    avatar_url: str = ""
