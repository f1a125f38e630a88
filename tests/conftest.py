"""Shared pytest fixtures for poster studio tests."""

import shutil
import tempfile
from io import BytesIO
from pathlib import Path
from typing import Generator
from unittest.mock import MagicMock

import pytest
from PIL import Image
from sqlmodel import Session

from agents import Agents
from db_utils import create_db_and_tables, create_memory_engine
from history_store import HistoryStore
from models import DetailPlan
from services import PosterStudioService
from state import StudioState
from utils import encode_image


TEST_SESSION_ID = "test-session"


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def memory_engine():
    """A fresh in-memory database with all tables created."""
    engine = create_memory_engine()
    create_db_and_tables(engine)
    return engine


@pytest.fixture
def db_session(memory_engine) -> Generator[Session, None, None]:
    with Session(memory_engine) as session:
        yield session


@pytest.fixture
def history(db_session) -> HistoryStore:
    """History store with the test session already registered."""
    store = HistoryStore(db_session)
    store.create_session(TEST_SESSION_ID, "gemini")
    return store


@pytest.fixture
def png_bytes() -> bytes:
    """A tiny valid PNG image."""
    buffer = BytesIO()
    Image.new("RGB", (8, 8), "white").save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def png_data_url(png_bytes) -> str:
    return f"data:image/png;base64,{encode_image(png_bytes)}"


@pytest.fixture
def detail_plans() -> list[DetailPlan]:
    return [
        DetailPlan(focus_point="釉面", caption="亮潔釉面，一抹即淨。", visual_prompt="Glaze macro"),
        DetailPlan(focus_point="沖水鍵", caption="雙段沖水，省水有感。", visual_prompt="Flush button macro"),
        DetailPlan(focus_point="緩降蓋", caption="緩降設計，安靜不夾手。", visual_prompt="Soft-close lid macro"),
    ]


@pytest.fixture
def fake_agents(detail_plans) -> MagicMock:
    """Agents double; its coroutine methods are AsyncMocks."""
    agents = MagicMock(spec=Agents)
    agents.model_provider = "gemini"
    agents.analyze_product_image.return_value = "A white wall-hung toilet with a chrome flush plate."
    agents.suggest_styles.return_value = []
    agents.plan_details.return_value = detail_plans
    return agents


@pytest.fixture
def fake_image_generator(monkeypatch, png_data_url):
    """Replace the Gemini image call with a recorder returning a PNG data URL."""
    calls = []

    async def fake_generate(**kwargs):
        calls.append(kwargs)
        return png_data_url

    monkeypatch.setattr("services.gemini_generate_image_data_url", fake_generate)
    return calls


@pytest.fixture
def service(fake_agents, history, temp_dir, fake_image_generator) -> PosterStudioService:
    return PosterStudioService(
        agents=fake_agents,
        history=history,
        image_provider="google",
        image_model="gemini-2.5-flash-image",
        image_api_key="test-key",
        output_dir=str(temp_dir / "output_images"),
    )


@pytest.fixture
def studio_state() -> StudioState:
    return StudioState(session_id=TEST_SESSION_ID)


@pytest.fixture
def loaded_state(studio_state, png_bytes) -> StudioState:
    """Session state with an uploaded image and description."""
    studio_state.image_base64 = encode_image(png_bytes)
    studio_state.image_mime = "image/png"
    studio_state.description = "A white wall-hung toilet."
    return studio_state
