from .github_client import GitHubClient
from .run_source import GitHubRunSource, RunSource

__all__ = ["GitHubClient", "GitHubRunSource", "RunSource"]
