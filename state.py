"""
In-memory working state of studio sessions.

Everything here is transient UI state (uploaded image, description, current
style and config, last results). Only finished posters go to the history
database.
"""
# stdlib imports
import base64
import threading
from dataclasses import dataclass, field

# local imports
from constants import MAX_FOCUS_POINTS
from models import (
    DetailResult,
    GenerationConfig,
    ProcessingStep,
    StudioStateRead,
    StyleTemplate,
)
from styles import PRESET_STYLES, StyleCatalog


@dataclass
class StudioState:
    """Working state of one studio session."""
    session_id: str
    image_base64: str | None = None
    image_mime: str | None = None
    description: str = ""
    is_analyzing: bool = False
    is_generating_styles: bool = False
    catalog: StyleCatalog = field(default_factory=StyleCatalog)
    selected_style: StyleTemplate | None = field(default_factory=lambda: PRESET_STYLES[0])
    config: GenerationConfig = field(default_factory=GenerationConfig)
    processing_step: ProcessingStep = ProcessingStep.IDLE
    result_image: str | None = None
    details: list[DetailResult] = field(default_factory=list)

    @property
    def image_bytes(self) -> bytes | None:
        if self.image_base64 is None:
            return None
        return base64.b64decode(self.image_base64)

    @property
    def is_generating(self) -> bool:
        return self.processing_step == ProcessingStep.GENERATING

    def reset_for_upload(self) -> None:
        """Forget everything derived from the previous image."""
        self.description = ""
        self.config = self.config.model_copy(update={"focus_points": [""] * MAX_FOCUS_POINTS})
        self.result_image = None
        self.details = []

    def to_read(self) -> StudioStateRead:
        return StudioStateRead(
            session_id=self.session_id,
            has_image=self.image_base64 is not None,
            image_mime=self.image_mime,
            description=self.description,
            is_analyzing=self.is_analyzing,
            is_generating_styles=self.is_generating_styles,
            styles=self.catalog.styles,
            selected_style_id=self.selected_style.id if self.selected_style else None,
            config=self.config,
            processing_step=self.processing_step,
            result_image=self.result_image,
            details=list(self.details),
        )


class SessionRegistry:
    """Process-wide map of session id -> StudioState."""

    def __init__(self):
        self._lock = threading.Lock()
        self._states: dict[str, StudioState] = {}

    def create(self, session_id: str) -> StudioState:
        state = StudioState(session_id=session_id)
        with self._lock:
            self._states[session_id] = state
        return state

    def get(self, session_id: str) -> StudioState | None:
        with self._lock:
            return self._states.get(session_id)
