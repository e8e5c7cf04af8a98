"""Starred repository DTOs"""

from typing import Optional

from pydantic import BaseModel, Field


class TagUpdateRequest(BaseModel):
    tag: str = Field(default="", description="Free text tag; empty clears it")


class CategoryUpdateRequest(BaseModel):
    category: str = Field(default="", description="RepoCategory value; empty clears it")


class DescriptionUpdateRequest(BaseModel):
    description: str = Field(default="", description="Refined description; empty clears it")


class CategoryOption(BaseModel):
    value: str
    label: str


class StatsResponse(BaseModel):
    total_repos: int = 0
    analyzed_repos: int = 0
    last_sync: Optional[str] = ""


class MessageResponse(BaseModel):
    message: str
