"""
RepoAnnotation Entity - the user's local notes on a starred repository.

A record exists only while at least one field is non-empty; clearing the
last field deletes the record.
"""

from pydantic import BaseModel, Field


class RepoAnnotation(BaseModel):
    owner_login: str = Field(..., description="GitHub login the annotation belongs to")
    id: int = Field(..., description="GitHub repository ID")
    tag: str = ""
    category: str = ""
    ai_description: str = ""

    def is_empty(self) -> bool:
        return not (self.tag or self.category or self.ai_description)
