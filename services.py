# stdlib imports
import asyncio
import logging
import uuid

# local imports
from agents import Agents
from api.gemini_image_generator import generate_image_data_url as gemini_generate_image_data_url
from api.image_generator import generate_image_data_url as gpt_generate_image_data_url
from constants import (
    ALERT_GENERATION_BUSY,
    ALERT_GENERATION_FAILED,
    ALERT_STYLE_SUGGESTION_FAILED,
    DETAIL_ASPECT_RATIO,
    OUTPUT_IMAGES_DIR,
)
from history_store import HistoryStore
from logging_utils import log_generation
from models import (
    AspectRatio,
    ConfigUpdate,
    DetailResult,
    GenerationResult,
    ProcessingStep,
    ProductAngle,
    StyleTemplate,
)
import prompts
from state import StudioState
from styles import style_from_suggestion
from utils import detect_image_mime, encode_image, save_generated_image


logger = logging.getLogger(__name__)


class PosterStudioService:
    """
    Service layer for the poster workflow.

    Handles upload and analysis of the product photo, style suggestions, and
    the combined poster + detail generation, including history bookkeeping
    and error handling.
    """

    def __init__(
        self,
        agents: Agents,
        history: HistoryStore,
        image_provider: str = "google",
        image_model: str = "gemini-2.5-flash-image",
        image_api_key: str | None = None,
        output_dir: str = OUTPUT_IMAGES_DIR
    ):
        """
        Initialize the service with agents, history store, and image generation config.

        Args:
            agents: The AI agents for text tasks.
            history: Poster history bound to the request's database session.
            image_provider: Image generation backend ("google" or "openai").
            image_model: Model name passed to the image backend.
            image_api_key: Key for the image backend; validated at point of use.
            output_dir: Directory generated images are written to (served under /static).
        """
        self.agents = agents
        self.history = history
        self.image_provider = image_provider
        self.image_model = image_model
        self.image_api_key = image_api_key
        self.output_dir = output_dir


    async def upload_product_image(self, state: StudioState, image_bytes: bytes) -> StudioState:
        """
        Take a new product photo into the session and analyze it.

        Resets the previous description, focus points and results, stores the
        base64-encoded image, then runs product analysis.

        Args:
            state: Session to update.
            image_bytes: Raw uploaded file content.

        Returns:
            The updated session state.

        Raises:
            ValueError: If the upload is not a readable image, or if the
                session is generating (its results belong to the current image).
        """
        if state.is_generating:
            raise ValueError(ALERT_GENERATION_BUSY)

        state.processing_step = ProcessingStep.UPLOADING
        state.reset_for_upload()

        try:
            image_mime = detect_image_mime(image_bytes)
        except ValueError:
            state.processing_step = ProcessingStep.IDLE
            raise

        state.image_base64 = encode_image(image_bytes)
        state.image_mime = image_mime

        state.processing_step = ProcessingStep.ANALYZING
        state.is_analyzing = True
        try:
            state.description = await self.analyze_product_image(image_bytes, image_mime)
        finally:
            state.is_analyzing = False
            state.processing_step = ProcessingStep.IDLE

        return state


    async def analyze_product_image(self, image_bytes: bytes, image_mime: str) -> str:
        """
        Describe the product in the image.

        Failures are logged and yield an empty description; there is no retry.
        """
        try:
            description = await self.agents.analyze_product_image(image_bytes, image_mime)
            logger.info(f"Product analysis completed ({len(description)} chars)")
            return description

        except Exception as e:
            logger.error(f"Product analysis failed: {str(e)}")
            return ""


    async def suggest_styles(self, state: StudioState) -> list[StyleTemplate]:
        """
        Ask the text model for styles tailored to the uploaded product.

        Suggestions go in front of the presets and the first one becomes the
        selected style. Without an image this is a no-op.

        Returns:
            The new styles (empty when nothing was done).

        Raises:
            ValueError: With the user-facing alert text if the call fails.
        """
        if state.image_base64 is None:
            return []

        state.is_generating_styles = True
        try:
            suggestions = await self.agents.suggest_styles(state.image_bytes, state.image_mime)

        except Exception as e:
            logger.error(f"Failed to generate styles: {str(e)}")
            raise ValueError(ALERT_STYLE_SUGGESTION_FAILED) from e

        finally:
            state.is_generating_styles = False

        new_styles = [style_from_suggestion(s) for s in suggestions]
        state.catalog = state.catalog.with_suggestions(new_styles)
        if new_styles:
            state.selected_style = new_styles[0]

        log_generation(f"{len(new_styles)} style(s) suggested", state.session_id, __name__)
        return new_styles


    def update_config(self, state: StudioState, update: ConfigUpdate) -> StudioState:
        """
        Apply a partial configuration update.

        A description replaces the analyzer output verbatim and is what the
        next generation uses.

        Raises:
            ValueError: If update.style_id is not in the session's catalog.
        """
        if update.style_id is not None:
            style = state.catalog.get(update.style_id)
            if style is None:
                raise ValueError(f"Style with ID {update.style_id} not found")
            state.selected_style = style

        if update.description is not None:
            state.description = update.description

        changes = update.model_dump(exclude_none=True, exclude={"style_id", "description"})
        if changes:
            state.config = state.config.model_copy(update=changes)

        return state


    async def generate_all(self, state: StudioState) -> GenerationResult | None:
        """
        Generate the poster and the detail set concurrently and merge them.

        Both requests must succeed: results, details and history only change
        after the join. On failure the previous results stay as they were.

        Args:
            state: Session providing image, style, description and config.

        Returns:
            GenerationResult, or None when there is no image or no style.

        Raises:
            ValueError: With the user-facing alert text if generation fails,
                or if the session is already generating.
        """
        if state.image_base64 is None or state.selected_style is None:
            return None

        if state.is_generating:
            raise ValueError(ALERT_GENERATION_BUSY)

        style = state.selected_style
        config = state.config
        image_bytes = state.image_bytes
        image_mime = state.image_mime
        description = state.description

        state.processing_step = ProcessingStep.GENERATING
        log_generation(f"generation started with style '{style.id}'", state.session_id, __name__)

        try:
            poster_url, details = await asyncio.gather(
                self.generate_poster(
                    image_bytes,
                    image_mime,
                    style.prompt,
                    config.aspect_ratio,
                    description,
                    config.product_angle
                ),
                self.generate_details(
                    image_bytes,
                    image_mime,
                    style.prompt,
                    description,
                    list(config.focus_points)
                )
            )

        except Exception as e:
            logger.error(f"Generation failed: {str(e)}")
            raise ValueError(ALERT_GENERATION_FAILED) from e

        finally:
            state.processing_step = ProcessingStep.IDLE

        entry = self.history.append(state.session_id, poster_url, style.short_name)

        state.result_image = poster_url
        state.details = details

        log_generation(
            f"generation finished: poster + {len(details)} detail(s), history entry {entry.id}",
            state.session_id,
            __name__
        )
        return GenerationResult(poster_url=poster_url, details=details, history_entry_id=entry.id)


    async def generate_poster(
        self,
        image_bytes: bytes,
        image_mime: str,
        style_prompt: str,
        aspect_ratio: AspectRatio,
        description: str,
        product_angle: ProductAngle
    ) -> str:
        """
        Generate the main advertising poster.

        Returns:
            Image handle of the poster.
        """
        prompt = prompts.AD_IMAGE_PROMPT_TEMPLATE.format(
            style_prompt=style_prompt,
            description=description or "See the provided product image.",
            product_angle=product_angle.value,
            aspect_ratio=aspect_ratio.value
        )

        data_url = await self._generate_image(prompt, image_bytes, image_mime, aspect_ratio.value)
        return self._store_image(data_url, "poster")


    async def generate_details(
        self,
        image_bytes: bytes,
        image_mime: str,
        style_prompt: str,
        description: str,
        focus_points: list[str]
    ) -> list[DetailResult]:
        """
        Plan up to three detail shots and render them concurrently.

        Args:
            focus_points: Manual focus hints, passed on to the planner verbatim.

        Returns:
            One DetailResult per planned shot.
        """
        plans = await self.agents.plan_details(
            image_bytes,
            style_prompt,
            description,
            focus_points,
            media_type=image_mime
        )

        data_urls = await asyncio.gather(*[
            self._generate_image(
                prompts.DETAIL_IMAGE_PROMPT_TEMPLATE.format(
                    focus_point=plan.focus_point,
                    visual_prompt=plan.visual_prompt,
                    style_prompt=style_prompt
                ),
                image_bytes,
                image_mime,
                DETAIL_ASPECT_RATIO
            )
            for plan in plans
        ])

        return [
            DetailResult(
                id=uuid.uuid4().hex,
                url=self._store_image(data_url, "detail"),
                caption=plan.caption,
                focus_point=plan.focus_point
            )
            for plan, data_url in zip(plans, data_urls)
        ]


    async def _generate_image(
        self,
        prompt: str,
        image_bytes: bytes,
        image_mime: str,
        aspect_ratio: str
    ) -> str:
        """Dispatch one image request to the configured backend; returns a data URL."""
        if not self.image_api_key:
            raise ValueError(f"API key is required for '{self.image_provider}' image generation.")

        if self.image_provider == "openai":
            return await gpt_generate_image_data_url(
                prompt=prompt,
                product_image_bytes=image_bytes,
                model=self.image_model,
                api_key=self.image_api_key,
                aspect_ratio=aspect_ratio,
                media_type=image_mime,
            )
        elif self.image_provider == "google":
            return await gemini_generate_image_data_url(
                prompt=prompt,
                product_image_bytes=image_bytes,
                model=self.image_model,
                api_key=self.image_api_key,
                aspect_ratio=aspect_ratio,
            )
        else:
            raise ValueError(f"Unsupported image provider: {self.image_provider}. Must be 'openai' or 'google'.")


    def _store_image(self, data_url: str, filename_prefix: str) -> str:
        """
        Save a generated image and return its /static URL.

        If saving fails the data URL itself is returned, so the image stays usable.
        """
        try:
            return save_generated_image(data_url, self.output_dir, filename_prefix)

        except (ValueError, RuntimeError) as e:
            logger.error(f"Failed to save generated image locally: {str(e)}")
            return data_url
