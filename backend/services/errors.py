"""Typed failures raised by the judging pipeline and its collaborators."""


class HackathonJudgeError(Exception):
    """Base class for all pipeline errors."""


class SignalExtractionFailure(HackathonJudgeError):
    """Repository metadata could not be fetched (not found, rate limited, network).

    Never fatal: the extractor absorbs it and scoring applies a penalty instead.
    """


class ModelInvocationError(HackathonJudgeError):
    """The model call failed or returned something other than the expected JSON."""


class JudgeError(HackathonJudgeError):
    """Scoring a single project failed. The underlying cause is chained."""

    def __init__(self, project_id: str, message: str) -> None:
        super().__init__(message)
        self.project_id = project_id


class UpstreamFetchError(HackathonJudgeError):
    """The project search API failed.

    ``partial`` holds the projects accumulated from pages fetched before the
    failing one, so callers may decide whether to keep them.
    """

    def __init__(self, message: str, partial: list | None = None) -> None:
        super().__init__(message)
        self.partial = partial or []
