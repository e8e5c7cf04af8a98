"""
StarredRepo Entity - one repository in a user's starred collection.

Remote-sourced fields are overwritten by every sync. Local-sourced fields
(tag, category, ai_description) belong to the user and survive re-syncs for
repositories that were already known locally.
"""

from typing import List

from pydantic import BaseModel, Field, field_validator

LOCAL_FIELDS = ("tag", "category", "ai_description")


class StarredRepo(BaseModel):
    """A starred repository, remote and local fields combined."""

    # Identity (assigned by GitHub, merge key)
    id: int = Field(..., description="GitHub repository ID")

    # Remote-sourced fields
    name: str = Field(default="", description="Repository name")
    html_url: str = Field(
        default="",
        description="Canonical repository URL",
        examples=["https://github.com/facebook/react"],
    )
    stargazers_count: int = Field(default=0, description="Star count")
    description: str = Field(default="", description="Description from GitHub")
    language: str = Field(default="", description="Primary language")
    languages: List[str] = Field(
        default_factory=list,
        description="All languages reported by GitHub, largest first",
    )
    topics: List[str] = Field(default_factory=list, description="Topic labels")
    readme_url: str = Field(default="", description="Link to the rendered README")

    # Local-sourced fields
    tag: str = Field(default="", description="User tag (free text)")
    category: str = Field(default="", description="User category, empty or a RepoCategory value")
    ai_description: str = Field(default="", description="Generated description")

    @field_validator("description", "language", "name", "html_url", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        # GitHub sends null for missing descriptions and languages
        return value if value is not None else ""

    @field_validator("languages", "topics", mode="before")
    @classmethod
    def _unique_labels(cls, value):
        if value is None:
            return []
        seen: List[str] = []
        for label in value:
            if label not in seen:
                seen.append(label)
        return seen

    def with_local_fields(self, tag: str = "", category: str = "", ai_description: str = "") -> "StarredRepo":
        """Return a copy carrying the given local-sourced fields."""
        return self.model_copy(
            update={"tag": tag, "category": category, "ai_description": ai_description}
        )

    def without_local_fields(self) -> "StarredRepo":
        return self.with_local_fields()
