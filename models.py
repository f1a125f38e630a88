# stdlib imports
from datetime import datetime, timezone
from enum import Enum

# third-party imports
from pydantic import BaseModel, ConfigDict, field_validator
from sqlmodel import SQLModel, Field, Index

# local imports
from constants import MAX_FOCUS_POINTS


"""
NOTE ON MODEL KINDS:
- SQLModel tables (table=True) are rows in the in-memory history database:
  UserSession and GeneratedImage. They live as long as the process does.
- Plain pydantic models describe request/response payloads and the structured
  outputs the text agents must return (StyleSuggestionSet, DetailPlanSet).
- StyleTemplate is frozen: presets and suggestions are never edited in place,
  a session only swaps which template it references.
"""


class AspectRatio(str, Enum):
    SQUARE = "1:1"
    PORTRAIT = "3:4"
    LANDSCAPE = "4:3"
    STORY = "9:16"
    WIDE = "16:9"


class ProductAngle(str, Enum):
    FRONT = "Front View"
    LEFT = "Left Front 45 Degree View"
    RIGHT = "Right Front 45 Degree View"
    TOP = "Top View (Flat Lay)"


class ProcessingStep(str, Enum):
    IDLE = "idle"
    UPLOADING = "uploading"
    ANALYZING = "analyzing"
    GENERATING = "generating"


class StyleTemplate(BaseModel):
    """A named preset bundling a prompt string and display metadata."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str  # user-facing short description
    prompt: str  # injected into the image prompts as-is
    tags: list[str] = []
    preview_color: str = "#CCCCCC"

    @property
    def short_name(self) -> str:
        """Display name without the parenthesised English suffix."""
        return self.name.split("(")[0].strip()


class OptionItem(BaseModel):
    label: str
    value: str


class StyleSuggestion(BaseModel):
    """One AI-proposed style, before it is given an id."""
    name: str
    description: str
    prompt: str
    tags: list[str] = []
    preview_color: str = "#CCCCCC"


class StyleSuggestionSet(BaseModel):
    """Structured output of the style suggestion agent."""
    styles: list[StyleSuggestion]


class DetailPlan(BaseModel):
    """One planned close-up: what to show and the caption that goes with it."""
    focus_point: str
    caption: str
    visual_prompt: str


class DetailPlanSet(BaseModel):
    """Structured output of the detail planning agent."""
    details: list[DetailPlan]


class DetailResult(BaseModel):
    """One generated close-up image plus its marketing caption."""
    id: str
    url: str
    caption: str
    focus_point: str


def fit_focus_points(value: list[str]) -> list[str]:
    """Cap to MAX_FOCUS_POINTS and pad with blank slots; entries stay verbatim."""
    kept = list(value[:MAX_FOCUS_POINTS])
    return kept + [""] * (MAX_FOCUS_POINTS - len(kept))


class GenerationConfig(BaseModel):
    aspect_ratio: AspectRatio = AspectRatio.PORTRAIT
    product_angle: ProductAngle = ProductAngle.FRONT
    focus_points: list[str] = [""] * MAX_FOCUS_POINTS

    @field_validator("focus_points")
    @classmethod
    def cap_focus_points(cls, value: list[str]) -> list[str]:
        return fit_focus_points(value)


class ConfigUpdate(BaseModel):
    """Partial update of a session's generation configuration."""
    aspect_ratio: AspectRatio | None = None
    product_angle: ProductAngle | None = None
    focus_points: list[str] | None = None
    style_id: str | None = None
    description: str | None = None  # replaces the analyzer output as typed

    @field_validator("focus_points")
    @classmethod
    def cap_focus_points(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return None
        return fit_focus_points(value)


class KeySelection(BaseModel):
    api_key: str
    provider: str = "gemini"


class GenerationResult(BaseModel):
    """Merged outcome of one poster + details generation run."""
    poster_url: str
    details: list[DetailResult]
    history_entry_id: str


class StudioStateRead(BaseModel):
    """Snapshot of a studio session as returned to the client."""
    session_id: str
    has_image: bool
    image_mime: str | None = None
    description: str = ""
    is_analyzing: bool = False
    is_generating_styles: bool = False
    styles: list[StyleTemplate]
    selected_style_id: str | None = None
    config: GenerationConfig
    processing_step: ProcessingStep = ProcessingStep.IDLE
    result_image: str | None = None
    details: list[DetailResult] = []


class GenerationResponse(BaseModel):
    """Reply of the generate endpoint; generated=False means nothing was done."""
    generated: bool
    result: GenerationResult | None = None
    state: StudioStateRead


class UserSession(SQLModel, table=True):
    """
    Stores a studio session.

    History entries reference the session they were generated in, so every
    client only sees its own posters.
    """
    id: str = Field(primary_key=True)
    text_provider: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class GeneratedImage(SQLModel, table=True):
    """Stores a generated poster in the session history."""
    id: str = Field(primary_key=True)  # millisecond timestamp, see history_store
    url: str
    style_name: str
    timestamp: int  # milliseconds since epoch
    session_id: str = Field(foreign_key="usersession.id")

    __table_args__ = (Index("idx_session_timestamp", "session_id", "timestamp"),)
