from .exceptions import (
    GithubConfigurationError,
    GithubError,
    GithubRateLimitError,
    GithubRetryableError,
    GithubStatusError,
)
from .fetcher import RetryingFetcher
from .stars_client import GitHubStarsClient, split_full_name

__all__ = [
    "GitHubStarsClient",
    "RetryingFetcher",
    "split_full_name",
    "GithubError",
    "GithubConfigurationError",
    "GithubRateLimitError",
    "GithubRetryableError",
    "GithubStatusError",
]
