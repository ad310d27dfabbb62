from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

ERROR_AWARD_CATEGORY = "Unknown - Error Fetching Details"
UNKNOWN_MEMBER = "Unknown Member"


class ProjectSummary(BaseModel):
    """
    A project card as it appears in a hackathon's project gallery.
    """
    title: str
    tagline: str = ""
    devpost_url: str
    thumbnail_url: Optional[str] = None
    is_winner: bool = False


class Technology(BaseModel):
    name: str
    url: Optional[str] = None
    is_recognized: bool = False


class TeamMember(BaseModel):
    name: str = UNKNOWN_MEMBER
    profile_url: str = ""
    avatar_url: Optional[str] = None
    role: Optional[str] = None


class GalleryImage(BaseModel):
    url: str
    caption: Optional[str] = None


class Award(BaseModel):
    category: str = "Overall"
    place: str
    description: Optional[str] = None
    prize: Optional[str] = None


class DemoVideo(BaseModel):
    url: str
    type: Literal["youtube", "vimeo", "other"] = "other"
    video_id: Optional[str] = None


class Engagement(BaseModel):
    likes: int = Field(default=0, ge=0)
    comments: int = Field(default=0, ge=0)


class ProjectDetails(BaseModel):
    """
    Everything that can be pulled off a single project detail page.
    Every field has a default so a half-broken page still yields a value.
    """
    description: Optional[str] = None
    technologies: List[Technology] = Field(default_factory=list)
    team_members: List[TeamMember] = Field(default_factory=list)
    team_size: Optional[int] = None
    gallery_images: List[GalleryImage] = Field(default_factory=list)
    demo_video: Optional[DemoVideo] = None
    engagement: Engagement = Field(default_factory=Engagement)
    awards: List[Award] = Field(default_factory=list)
    github_url: Optional[str] = None
    website_url: Optional[str] = None


class ProjectRecord(BaseModel):
    """
    Represents one row of the hackathon_projects table. devpost_url is the
    natural key used for upserts.
    """
    devpost_url: str
    title: str
    tagline: Optional[str] = None
    description: Optional[str] = None
    thumbnail: Optional[str] = None
    hackathon_url: str
    hackathon_name: str
    technologies: List[Technology] = Field(default_factory=list)
    team_members: List[TeamMember] = Field(default_factory=list)
    gallery_images: List[GalleryImage] = Field(default_factory=list)
    awards: List[Award] = Field(default_factory=list)
    demo_video: Optional[DemoVideo] = None
    github_url: Optional[str] = None
    website_url: Optional[str] = None
    engagement: Engagement = Field(default_factory=Engagement)
    team_size: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("devpost_url")
    @classmethod
    def _require_url(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("devpost_url must not be empty")
        return value.strip()

    @classmethod
    def from_details(cls, summary: ProjectSummary, details: ProjectDetails,
                     hackathon_url: str, hackathon_name: str) -> "ProjectRecord":
        return cls(
            devpost_url=summary.devpost_url,
            title=summary.title,
            tagline=summary.tagline or None,
            thumbnail=summary.thumbnail_url,
            hackathon_url=hackathon_url,
            hackathon_name=hackathon_name,
            **details.model_dump(),
        )

    @classmethod
    def degraded(cls, summary: ProjectSummary, hackathon_url: str,
                 hackathon_name: str) -> "ProjectRecord":
        """Placeholder record for a winner whose detail page could not be read."""
        return cls(
            devpost_url=summary.devpost_url,
            title=summary.title,
            tagline=summary.tagline or None,
            thumbnail=summary.thumbnail_url,
            hackathon_url=hackathon_url,
            hackathon_name=hackathon_name,
            awards=[Award(category=ERROR_AWARD_CATEGORY, place="Winner")],
        )


class ScrapeRequest(BaseModel):
    hackathon_url: str
    hackathon_name: str
    limit: Optional[int] = Field(default=None, ge=1)

    @field_validator("hackathon_url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        value = value.strip()
        if not value.startswith(("http://", "https://")):
            raise ValueError("hackathon_url must be an http(s) URL")
        return value.rstrip("/")

    @field_validator("hackathon_name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("hackathon_name must not be empty")
        return value.strip()


class ScrapeResult(BaseModel):
    success_count: int = 0
    error_count: int = 0
    debug_dir: str
