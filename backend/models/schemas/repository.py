"""Repository metadata from the code host and the signals derived from it."""

from pydantic import BaseModel


class RepositoryInfo(BaseModel):
    name: str = ""
    description: str | None = None
    created_at: str | None = None  # ISO-8601
    updated_at: str | None = None
    pushed_at: str | None = None
    stargazers_count: int = 0
    forks_count: int = 0
    size: int = 0  # KB, as reported by the GitHub API
    language: str | None = None
    default_branch: str = "main"


class CommitInfo(BaseModel):
    message: str = ""
    date: str = ""  # author date, ISO-8601
    author: str = ""


class ReadmeInfo(BaseModel):
    content: str = ""
    size: int = 0  # bytes, as reported by the API


class RepositorySnapshot(BaseModel):
    """Raw metadata returned by the repository provider for one repository."""
    url: str = ""
    repository: RepositoryInfo = RepositoryInfo()
    commits: list[CommitInfo] = []  # newest first, at most 100
    readme: ReadmeInfo | None = None


class CommitAnalysis(BaseModel):
    """Heuristic commit-quality assessment of a commit list."""
    quality_score: int = 0  # 0-100
    issues: list[str] = []
    commit_frequency: str = "unknown"  # none, unknown, sparse, active, very_active
    recent_activity: bool = False
    meaningful_commits: int = 0
    template_indicators: int = 0


class RepositorySignal(BaseModel):
    """Everything the scorer needs to know about a project's repository.

    Absent (None) when no repository could be resolved or fetched.
    """
    url: str = ""
    repository_name: str = ""
    total_commits: int = 0
    commit_analysis: CommitAnalysis = CommitAnalysis()
    health_score: int = 0  # 0-100
    readme_size: int | None = None  # None when the repository has no README
    recent_commits: list[CommitInfo] = []  # up to 10, for display

    @property
    def quality_score(self) -> int:
        return self.commit_analysis.quality_score

    @property
    def recent_activity(self) -> bool:
        return self.commit_analysis.recent_activity

    @property
    def issues(self) -> list[str]:
        return self.commit_analysis.issues
