# third-party imports
from openai import AsyncOpenAI
from pydantic_ai import Agent, BinaryContent
from pydantic_ai.models import Model
from pydantic_ai.models.google import GoogleModel
from pydantic_ai.models.openai import OpenAIChatModel
from pydantic_ai.providers.google import GoogleProvider
from pydantic_ai.providers.openai import OpenAIProvider

# local imports
from constants import DEFAULT_IMAGE_MIME, DEFAULT_TEXT_MODELS, DETAIL_COUNT
from models import DetailPlan, DetailPlanSet, StyleSuggestion, StyleSuggestionSet
import prompts


class Agents:
    """
    Handles AI text tasks for the poster workflow:
    - Product image analysis (vision -> free-text description)
    - Style suggestions (vision -> StyleSuggestion list)
    - Detail shot planning (vision + text -> DetailPlan list)

    Supports both OpenAI and Google providers:
    - OpenAI: gpt-4.1 model
    - Google: gemini-2.5-flash model

    Note: Image generation is handled separately in api/gemini_image_generator.py
    and api/image_generator.py
    """
    def __init__(
        self,
        model_provider: str,
        openai_api_key: str | None = None,
        gemini_api_key: str | None = None,
        model: str | Model | None = None,
    ):
        """
        Initialize agents based on the selected provider.

        Args:
            model_provider: Provider selection ("openai" or "gemini").
            openai_api_key: API key for OpenAI operations (required when provider="openai").
            gemini_api_key: API key for Google operations (required when provider="gemini").
            model: Model name override, or a ready pydantic-ai Model instance.

        Raises:
            ValueError: If a required API key is missing for the selected provider.
        """
        # Fail fast on missing keys
        if model_provider == "openai" and not openai_api_key:
            raise ValueError("OpenAI API key is required when using OpenAI provider.")
        if model_provider == "gemini" and not gemini_api_key:
            raise ValueError("Gemini API key is required when using Google provider.")

        self.model_provider = model_provider

        if isinstance(model, Model):
            text_model = model
        elif model_provider == "openai":
            # pydantic-ai's OpenAI model wraps an AsyncOpenAI client
            client = AsyncOpenAI(api_key=openai_api_key)
            text_model = OpenAIChatModel(
                model or DEFAULT_TEXT_MODELS["openai"],
                provider=OpenAIProvider(openai_client=client)
            )
        elif model_provider == "gemini":
            provider = GoogleProvider(api_key=gemini_api_key)
            text_model = GoogleModel(model or DEFAULT_TEXT_MODELS["gemini"], provider=provider)
        else:
            raise ValueError(f"Unsupported model provider: {model_provider}")

        self._initialize_agents(text_model)


    def _initialize_agents(self, text_model):
        """
        Initialize all text-based agents with the provided model.

        Args:
            text_model: Configured text model to use.
        """
        self.product_image_agent = Agent(
            text_model,
            output_type=str,
            system_prompt=prompts.PRODUCT_ANALYSIS_SYSTEM_PROMPT
        )
        self.style_agent = Agent(
            text_model,
            output_type=StyleSuggestionSet,
            system_prompt=prompts.STYLE_SUGGESTION_SYSTEM_PROMPT
        )
        self.detail_agent = Agent(
            text_model,
            output_type=DetailPlanSet,
            system_prompt=prompts.DETAIL_PLANNER_SYSTEM_PROMPT
        )


    async def analyze_product_image(
        self,
        image_bytes: bytes,
        media_type: str = DEFAULT_IMAGE_MIME
    ) -> str:
        """
        Describe a product image in a few sentences.

        Args:
            image_bytes: Raw product image data.
            media_type: MIME type of the image.

        Returns:
            Free-text product description.
        """
        content = [
            prompts.PRODUCT_ANALYSIS_TASK_PROMPT,
            BinaryContent(data=image_bytes, media_type=media_type)
        ]

        result = await self.product_image_agent.run(content)
        return result.output.strip()


    async def suggest_styles(
        self,
        image_bytes: bytes,
        media_type: str = DEFAULT_IMAGE_MIME,
        count: int = 3
    ) -> list[StyleSuggestion]:
        """
        Propose scene styles tailored to the product in the image.

        Args:
            image_bytes: Raw product image data.
            media_type: MIME type of the image.
            count: Number of styles to ask for.

        Returns:
            List of StyleSuggestion (without ids).
        """
        content = [
            prompts.STYLE_SUGGESTION_TASK_TEMPLATE.format(count=count),
            BinaryContent(data=image_bytes, media_type=media_type)
        ]

        result = await self.style_agent.run(content)
        return list(result.output.styles)


    async def plan_details(
        self,
        image_bytes: bytes,
        style_prompt: str,
        description: str,
        focus_points: list[str],
        media_type: str = DEFAULT_IMAGE_MIME,
        count: int = DETAIL_COUNT
    ) -> list[DetailPlan]:
        """
        Plan the close-up detail shots for a product.

        Non-blank focus points are used verbatim as the focus labels of the
        first slots; blank slots are left to the model.

        Args:
            image_bytes: Raw product image data.
            style_prompt: Prompt text of the selected style.
            description: Product description (may be empty).
            focus_points: Manual focus hints, one per slot.
            media_type: MIME type of the image.
            count: Number of detail shots.

        Returns:
            At most `count` DetailPlan entries.
        """
        slots = []
        for idx in range(count):
            hint = focus_points[idx] if idx < len(focus_points) else ""
            slots.append(f"{idx + 1}. {hint if hint.strip() else prompts.OPEN_FOCUS_SLOT}")

        prompt = prompts.DETAIL_PLANNER_TASK_TEMPLATE.format(
            count=count,
            style_prompt=style_prompt,
            description=description or "<not available>",
            focus_points="\n".join(slots)
        )

        content = [prompt, BinaryContent(data=image_bytes, media_type=media_type)]
        result = await self.detail_agent.run(content)

        plans = list(result.output.details[:count])

        # The model may paraphrase a requested focus point; the label must stay as typed
        for idx, plan in enumerate(plans):
            hint = focus_points[idx] if idx < len(focus_points) else ""
            if hint.strip() and plan.focus_point != hint:
                plans[idx] = plan.model_copy(update={"focus_point": hint})

        return plans
