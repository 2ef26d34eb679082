"""Project submission as returned by the hackathon search API."""

from pydantic import BaseModel, ValidationInfo, field_validator


class _SearchRecord(BaseModel):
    """Search API records send null for blank fields; fall back to the field default."""

    model_config = {"frozen": True, "extra": "ignore"}

    @field_validator("*", mode="before")
    @classmethod
    def _none_to_default(cls, value, info: ValidationInfo):
        if value is None:
            return cls.model_fields[info.field_name].default
        return value


class ProjectDescription(_SearchRecord):
    """One free-text section of a project's write-up."""
    title: str = ""
    subtitle: str = ""
    content: str = ""
    hint: str = ""


class PrizeTrack(_SearchRecord):
    uuid: str = ""
    name: str = ""
    description: str = ""
    sponsor: str | None = None


class Hashtag(_SearchRecord):
    uuid: str = ""
    name: str = ""
    verified: bool = False


class Member(_SearchRecord):
    uuid: str = ""
    username: str = ""
    first_name: str = ""
    last_name: str = ""
    profile_image: str | None = None
    track: str | None = None


class Hackathon(_SearchRecord):
    uuid: str = ""
    name: str = ""
    slug: str = ""


class Project(BaseModel):
    """A hackathon submission. Immutable for the duration of scoring."""
    uuid: str
    name: str = ""
    tagline: str = ""
    description: list[ProjectDescription] = []
    category: str | None = None
    has_github_link: bool = False
    links: str = ""  # free text: comma/whitespace/newline separated URLs
    prize_tracks: list[PrizeTrack] = []
    hashtags: list[Hashtag] = []
    members: list[Member] = []
    hackathon: Hackathon | None = None
    views: int = 0
    likes: int = 0
    created_at: str = ""
    updated_at: str = ""
    status: str = ""

    model_config = {"frozen": True, "extra": "ignore"}

    @field_validator("name", "tagline", "links", "created_at", "updated_at", "status", mode="before")
    @classmethod
    def _none_to_empty_str(cls, value):
        # Search API returns null for blank fields
        return "" if value is None else value

    @field_validator("description", "prize_tracks", "hashtags", "members", mode="before")
    @classmethod
    def _none_to_empty_list(cls, value):
        return [] if value is None else value

    @field_validator("views", "likes", mode="before")
    @classmethod
    def _none_to_zero(cls, value):
        return 0 if value is None else value

    @field_validator("has_github_link", mode="before")
    @classmethod
    def _none_to_false(cls, value):
        return False if value is None else value

    @property
    def description_text(self) -> str:
        return " ".join(d.content for d in self.description)
