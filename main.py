"""
FastAPI app wiring:
- Loads settings and API keys from the environment (.env supported)
- Sets up the in-memory history database on startup
- Provides per-HTTP-request DB Session, session state and PosterStudioService via Depends
- Gates model-backed endpoints behind the API key bridge
"""

"""
How studio sessions work:
    - /session/create registers a UserSession row (history owner) and an
      in-memory StudioState (uploaded image, description, style, config,
      last results) and returns user_session_id.
    - Every /sessions/{user_session_id}/... endpoint resolves both; unknown
      ids answer 404.
    - Nothing survives a restart: history lives in an in-memory SQLite
      database and working state in a dict.
"""
# stdlib
import logging
import os
import uuid
from functools import lru_cache

# third-party
from fastapi import FastAPI, Depends, UploadFile, HTTPException
from fastapi.staticfiles import StaticFiles
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import Session
import uvicorn

# local
from agents import Agents
from constants import ALERT_API_KEY_REQUIRED, ALERT_GENERATION_BUSY, STATIC_ROUTE
from db_utils import create_db_and_tables, get_db_session
from history_store import HistoryStore
from key_bridge import KeyBridge
from logging_utils import configure_logging
from models import (
    ConfigUpdate,
    GeneratedImage,
    GenerationResponse,
    KeySelection,
    StudioStateRead,
    StyleTemplate,
)
from services import PosterStudioService
from settings import Settings, get_settings
from state import SessionRegistry, StudioState
from styles import ASPECT_RATIO_OPTIONS, PRESET_STYLES, PRODUCT_ANGLE_OPTIONS


configure_logging()
logger = logging.getLogger(__name__)

settings = get_settings()
registry = SessionRegistry()


# 1) App creation
app = FastAPI(title="Poster Studio")

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Serve generated images from local disk
os.makedirs(settings.output_images_dir, exist_ok=True)
app.mount(STATIC_ROUTE, StaticFiles(directory=settings.output_images_dir), name="static")


# 2) Dependency and Service functions
@lru_cache(maxsize=1)
def get_key_bridge() -> KeyBridge:
    """Process-wide key bridge built from the environment settings."""
    return KeyBridge(get_settings())


def get_registry() -> SessionRegistry:
    return registry


def get_history(db_session: Session = Depends(get_db_session)) -> HistoryStore:
    return HistoryStore(db_session)


def require_api_key(bridge: KeyBridge = Depends(get_key_bridge)) -> KeyBridge:
    """Reject model-backed requests until an API key is selected."""
    if not bridge.has_selected_api_key():
        raise HTTPException(status_code=403, detail=ALERT_API_KEY_REQUIRED)
    return bridge


def get_state(
    user_session_id: str,
    registry: SessionRegistry = Depends(get_registry),
    history: HistoryStore = Depends(get_history)
) -> StudioState:
    """
    Resolve the working state of a studio session.

    Args:
        user_session_id: ID returned by /session/create.
    """
    state = registry.get(user_session_id)
    if state is None or not history.has_session(user_session_id):
        raise HTTPException(status_code=404, detail="Session not found. Please create a session first.")
    return state


def get_service(
    bridge: KeyBridge = Depends(require_api_key),
    history: HistoryStore = Depends(get_history),
    settings: Settings = Depends(get_settings)
) -> PosterStudioService:
    """
    Create PosterStudioService with the selected keys and configured providers.

    Depends(require_api_key) means the 403 gate runs before any agent is built.
    """
    try:
        agents = Agents(
            model_provider=settings.text_provider,
            openai_api_key=bridge.key_for("openai"),
            gemini_api_key=bridge.key_for("gemini"),
            model=settings.text_model or None
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return PosterStudioService(
        agents=agents,
        history=history,
        image_provider=settings.image_provider,
        image_model=settings.image_model,
        image_api_key=bridge.key_for(settings.image_provider),
        output_dir=settings.output_images_dir
    )


@app.on_event("startup")
def on_startup() -> None:
    """
    FastAPI startup event handler.

    Creates the history tables in the in-memory database.
    """
    create_db_and_tables()


# 3) API key bridge
@app.get("/key/status")
async def key_status(bridge: KeyBridge = Depends(get_key_bridge)):
    """
    Report whether the service can reach the model API.

    Returns:
        {"has_api_key": bool}
    """
    return {"has_api_key": bridge.has_selected_api_key()}


@app.post("/key/select")
async def select_key(selection: KeySelection, bridge: KeyBridge = Depends(get_key_bridge)):
    """
    Select an API key at runtime.

    Args:
        selection: Provider ("gemini", "google" or "openai") and key.

    Returns:
        {"has_api_key": bool}
    """
    try:
        bridge.select_key(selection.provider, selection.api_key)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {"has_api_key": bridge.has_selected_api_key()}


# 4) Catalog
@app.get("/options")
async def get_options():
    """Aspect ratio and product angle choices with their labels."""
    return {
        "aspect_ratios": [o.model_dump() for o in ASPECT_RATIO_OPTIONS],
        "product_angles": [o.model_dump() for o in PRODUCT_ANGLE_OPTIONS],
    }


@app.get("/styles", response_model=list[StyleTemplate])
async def list_preset_styles():
    """The fixed preset style catalog."""
    return list(PRESET_STYLES)


# 5) Sessions
@app.post("/session/create")
async def create_session(
    registry: SessionRegistry = Depends(get_registry),
    history: HistoryStore = Depends(get_history),
    settings: Settings = Depends(get_settings)
):
    """
    Create a studio session.

    Returns:
        {"user_session_id": str, "text_provider": str}
    """
    user_session_id = str(uuid.uuid4())
    try:
        history.create_session(user_session_id, settings.text_provider)
    except Exception as e:
        history.session.rollback()
        raise HTTPException(status_code=500, detail=f"Failed to create session: {str(e)}")

    registry.create(user_session_id)
    logger.info(f"Studio session created: {user_session_id}")
    return {"user_session_id": user_session_id, "text_provider": settings.text_provider}


@app.get("/sessions/{user_session_id}", response_model=StudioStateRead)
async def get_session_state(state: StudioState = Depends(get_state)):
    """Current working state of the session."""
    return state.to_read()


@app.post("/sessions/{user_session_id}/image", response_model=StudioStateRead)
async def upload_product_image(
    # Required parameters first
    file: UploadFile,
    # Dependency injection last
    state: StudioState = Depends(get_state),
    service: PosterStudioService = Depends(get_service)
):
    """
    Upload a product photo, encode it and analyze it.

    Args:
        file: Product image file upload.

    Returns:
        Session state with the new image and its description.
    """
    if state.is_generating:
        raise HTTPException(status_code=409, detail=ALERT_GENERATION_BUSY)

    try:
        image_bytes = await file.read()

    except Exception as e:
        raise HTTPException(status_code=400, detail=f"File processing failed {str(e)}.")

    try:
        await service.upload_product_image(state, image_bytes)
        return state.to_read()

    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.patch("/sessions/{user_session_id}/config", response_model=StudioStateRead)
async def update_config(
    update: ConfigUpdate,
    state: StudioState = Depends(get_state),
    service: PosterStudioService = Depends(get_service)
):
    """
    Change aspect ratio, product angle, focus points, the selected style or
    the product description.

    Focus points are kept as three slots: extras are dropped, missing ones blank.
    """
    try:
        service.update_config(state, update)
        return state.to_read()

    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@app.post("/sessions/{user_session_id}/styles/suggest", response_model=StudioStateRead)
async def suggest_styles(
    state: StudioState = Depends(get_state),
    service: PosterStudioService = Depends(get_service)
):
    """
    Add AI-suggested styles in front of the presets and select the first one.

    Without an uploaded image nothing changes.
    """
    try:
        await service.suggest_styles(state)
        return state.to_read()

    except ValueError as e:
        raise HTTPException(status_code=502, detail=str(e))


@app.post("/sessions/{user_session_id}/generate", response_model=GenerationResponse)
async def generate_all(
    state: StudioState = Depends(get_state),
    service: PosterStudioService = Depends(get_service)
):
    """
    Generate the poster and the detail set for the current image and style.

    Returns generated=False and leaves everything unchanged when no image
    has been uploaded yet.
    """
    if state.is_generating:
        raise HTTPException(status_code=409, detail=ALERT_GENERATION_BUSY)

    try:
        result = await service.generate_all(state)

    except ValueError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return GenerationResponse(generated=result is not None, result=result, state=state.to_read())


# 6) History
@app.get("/sessions/{user_session_id}/history", response_model=list[GeneratedImage])
async def get_history_entries(
    user_session_id: str,
    state: StudioState = Depends(get_state),
    history: HistoryStore = Depends(get_history)
):
    """Posters generated in this session, newest first."""
    return history.list_entries(user_session_id)


@app.delete("/sessions/{user_session_id}/history/{image_id}")
async def delete_history_entry(
    user_session_id: str,
    image_id: str,
    state: StudioState = Depends(get_state),
    history: HistoryStore = Depends(get_history)
):
    """
    Remove one poster from the session history.

    Returns:
        {"deleted": image_id}
    """
    if not history.delete(user_session_id, image_id):
        raise HTTPException(status_code=404, detail=f"History entry {image_id} not found")
    return {"deleted": image_id}


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=5001,
        reload=True,  # Only for development
        log_level="info"
    )
