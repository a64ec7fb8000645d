"""Brief schemas."""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from app.models.brief import (
    CATEGORY_MAX_LENGTH,
    DEFAULT_CATEGORY,
    MAX_RADAR_POINTS,
    TITLE_MAX_LENGTH,
    URL_MAX_LENGTH,
    BriefStatus,
)

REQUIRED_CONTENT_FIELDS = ("title", "deep_dive_text")


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def _clip(value: object, limit: int) -> object:
    if isinstance(value, str):
        return value[:limit].rstrip()
    return value


class BriefContent(BaseModel):
    """Generated brief content, validated from the model's JSON object.

    Legacy outputs that used `content` for the main body are accepted.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: str = Field(min_length=1)
    deep_dive_text: str = Field(
        min_length=1,
        validation_alias=AliasChoices("deep_dive_text", "content"),
    )
    category: str = DEFAULT_CATEGORY
    fun_fact: str | None = None
    radar_points: list[str] = Field(default_factory=list)
    jargon_term: str | None = None
    jargon_def: str | None = None
    social_caption: str | None = None
    cover_image: str | None = None

    @field_validator("deep_dive_text", mode="before")
    @classmethod
    def _strip_body(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    @field_validator("title", mode="before")
    @classmethod
    def _clip_title(cls, value: object) -> object:
        return _clip(value.strip(), TITLE_MAX_LENGTH) if isinstance(value, str) else value

    @field_validator("category", mode="before")
    @classmethod
    def _default_category(cls, value: object) -> object:
        return _clip(_blank_to_none(value) or DEFAULT_CATEGORY, CATEGORY_MAX_LENGTH)

    @field_validator("fun_fact", "jargon_def", "social_caption", mode="before")
    @classmethod
    def _optional_text(cls, value: object) -> object:
        return _blank_to_none(value)

    @field_validator("jargon_term", mode="before")
    @classmethod
    def _clip_jargon_term(cls, value: object) -> object:
        return _clip(_blank_to_none(value), TITLE_MAX_LENGTH)

    @field_validator("cover_image", mode="before")
    @classmethod
    def _drop_oversized_url(cls, value: object) -> object:
        # A cut URL points nowhere.
        value = _blank_to_none(value)
        if isinstance(value, str) and len(value) > URL_MAX_LENGTH:
            return None
        return value

    @field_validator("radar_points", mode="before")
    @classmethod
    def _normalize_radar_points(cls, value: object) -> object:
        if value is None:
            return []
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, list):
            return value
        points = [str(item).strip() for item in value if item is not None and str(item).strip()]
        return points[:MAX_RADAR_POINTS]


class BriefSummary(BaseModel):
    """List item for archives and admin tables."""

    id: str
    title: str
    category: str
    status: BriefStatus
    cover_image: str | None
    publish_date: datetime | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class BriefResponse(BriefSummary):
    """Full brief."""

    deep_dive_text: str
    fun_fact: str | None
    radar_points: list[str]
    jargon_term: str | None
    jargon_def: str | None
    social_caption: str | None
    audio_summary_url: str | None
    author_id: str | None


class BriefUpdate(BaseModel):
    """Operator edits. Status changes go through publish/unpublish."""

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, min_length=1, max_length=TITLE_MAX_LENGTH)
    deep_dive_text: str | None = Field(default=None, min_length=1)
    category: str | None = Field(default=None, min_length=1, max_length=CATEGORY_MAX_LENGTH)
    fun_fact: str | None = None
    radar_points: list[str] | None = Field(default=None, max_length=MAX_RADAR_POINTS)
    jargon_term: str | None = Field(default=None, max_length=TITLE_MAX_LENGTH)
    jargon_def: str | None = None
    social_caption: str | None = None
    cover_image: str | None = Field(default=None, max_length=URL_MAX_LENGTH)
    audio_summary_url: str | None = Field(default=None, max_length=URL_MAX_LENGTH)

    @field_validator("title", "deep_dive_text", "category", mode="before")
    @classmethod
    def _strip_required_text(cls, value: object) -> object:
        if value is None:
            raise ValueError("may be omitted but not null")
        return value.strip() if isinstance(value, str) else value

    @field_validator("radar_points", mode="before")
    @classmethod
    def _reject_null_points(cls, value: object) -> object:
        if value is None:
            raise ValueError("may be omitted but not null; send [] to clear")
        return value

    def changes(self) -> dict[str, object]:
        """Only the fields the operator actually sent."""
        return self.model_dump(exclude_unset=True)


class GenerateBriefRequest(BaseModel):
    """Admin generation request; a blank topic means "pick one for me"."""

    topic: str | None = None


class GenerateBriefResponse(BaseModel):
    success: bool = True
    brief: BriefResponse


class AdminStatsResponse(BaseModel):
    """Admin dashboard totals."""

    total_briefs: int
    drafts: int
    published: int
    subscribers: int
