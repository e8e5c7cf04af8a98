"""
Shared enums for entities.
"""

from enum import Enum


class RepoCategory(str, Enum):
    """Fixed categories a user (or the analyzer) may assign to a starred repo."""

    FRONTEND = "frontend"
    BACKEND = "backend"
    MOBILE = "mobile"
    TOOLS = "tools"
    DATABASE = "database"
    DEVOPS = "devops"
    AI = "ai"
    SECURITY = "security"
    IOT = "iot"
    GAME = "game"

    @property
    def label(self) -> str:
        return _CATEGORY_LABELS[self]


_CATEGORY_LABELS = {
    RepoCategory.FRONTEND: "Frontend",
    RepoCategory.BACKEND: "Backend",
    RepoCategory.MOBILE: "Mobile Development",
    RepoCategory.TOOLS: "Tools",
    RepoCategory.DATABASE: "Database",
    RepoCategory.DEVOPS: "DevOps",
    RepoCategory.AI: "Artificial Intelligence",
    RepoCategory.SECURITY: "Security",
    RepoCategory.IOT: "IoT",
    RepoCategory.GAME: "Games",
}
