"""Unit tests for PosterStudioService.

Text agents are MagicMocks and image generation is replaced with a fake
returning a PNG data URL (see conftest).
"""

import asyncio

import pytest

from constants import (
    ALERT_GENERATION_BUSY,
    ALERT_GENERATION_FAILED,
    ALERT_STYLE_SUGGESTION_FAILED,
)
from models import (
    AspectRatio,
    ConfigUpdate,
    DetailResult,
    ProcessingStep,
    StyleSuggestion,
)
from services import PosterStudioService
from styles import PRESET_STYLES


TEST_SESSION_ID = "test-session"


class TestUploadProductImage:
    """Tests for upload and analysis."""

    def test_upload_during_generation_rejected(
        self, service, loaded_state, history, fake_agents, detail_plans, png_bytes
    ):
        original_image = loaded_state.image_base64

        async def scenario():
            release = asyncio.Event()

            async def held_plan_details(*args, **kwargs):
                await release.wait()
                return detail_plans

            fake_agents.plan_details.side_effect = held_plan_details
            generation = asyncio.create_task(service.generate_all(loaded_state))
            await asyncio.sleep(0)
            assert loaded_state.is_generating

            with pytest.raises(ValueError, match=ALERT_GENERATION_BUSY):
                await service.upload_product_image(loaded_state, png_bytes)
            # The busy flag survives the rejected upload
            with pytest.raises(ValueError, match=ALERT_GENERATION_BUSY):
                await service.generate_all(loaded_state)

            release.set()
            return await generation

        result = asyncio.run(scenario())

        fake_agents.analyze_product_image.assert_not_called()
        assert loaded_state.image_base64 == original_image
        assert loaded_state.result_image == result.poster_url
        assert loaded_state.processing_step == ProcessingStep.IDLE
        assert len(history.list_entries(TEST_SESSION_ID)) == 1

    def test_sets_image_and_description(self, service, studio_state, png_bytes, fake_agents):
        asyncio.run(service.upload_product_image(studio_state, png_bytes))

        assert studio_state.image_bytes == png_bytes
        assert studio_state.image_mime == "image/png"
        assert studio_state.description.startswith("A white wall-hung toilet")
        assert studio_state.processing_step == ProcessingStep.IDLE
        assert studio_state.is_analyzing is False
        fake_agents.analyze_product_image.assert_awaited_once_with(png_bytes, "image/png")

    def test_resets_previous_work(self, service, loaded_state, png_bytes):
        loaded_state.config = loaded_state.config.model_copy(update={"focus_points": ["a", "b", "c"]})
        loaded_state.result_image = "/static/old.png"
        loaded_state.details = [DetailResult(id="1", url="u", caption="c", focus_point="f")]

        asyncio.run(service.upload_product_image(loaded_state, png_bytes))

        assert loaded_state.config.focus_points == ["", "", ""]
        assert loaded_state.result_image is None
        assert loaded_state.details == []

    def test_analysis_failure_gives_empty_description(self, service, studio_state, png_bytes, fake_agents):
        fake_agents.analyze_product_image.side_effect = RuntimeError("quota exceeded")

        asyncio.run(service.upload_product_image(studio_state, png_bytes))

        assert studio_state.description == ""
        assert studio_state.image_base64 is not None
        assert studio_state.processing_step == ProcessingStep.IDLE

    def test_invalid_image_rejected(self, service, studio_state, fake_agents):
        with pytest.raises(ValueError):
            asyncio.run(service.upload_product_image(studio_state, b"not an image"))

        assert studio_state.image_base64 is None
        assert studio_state.processing_step == ProcessingStep.IDLE
        fake_agents.analyze_product_image.assert_not_called()


class TestSuggestStyles:
    """Tests for AI style suggestions."""

    def test_no_image_is_noop(self, service, studio_state, fake_agents):
        assert asyncio.run(service.suggest_styles(studio_state)) == []

        fake_agents.suggest_styles.assert_not_called()
        assert studio_state.selected_style == PRESET_STYLES[0]

    def test_suggestions_prepended_and_first_selected(self, service, loaded_state, fake_agents):
        fake_agents.suggest_styles.return_value = [
            StyleSuggestion(name="Seaside", description="sea", prompt="Seaside villa"),
            StyleSuggestion(name="Loft", description="loft", prompt="Loft bathroom"),
        ]

        new_styles = asyncio.run(service.suggest_styles(loaded_state))

        styles = loaded_state.catalog.styles
        assert [s.name for s in styles[:2]] == ["Seaside", "Loft"]
        assert styles[2:] == list(PRESET_STYLES)
        assert loaded_state.selected_style == new_styles[0]
        assert loaded_state.is_generating_styles is False

    def test_failure_raises_alert_and_keeps_catalog(self, service, loaded_state, fake_agents):
        fake_agents.suggest_styles.side_effect = RuntimeError("invalid key")

        with pytest.raises(ValueError, match=ALERT_STYLE_SUGGESTION_FAILED):
            asyncio.run(service.suggest_styles(loaded_state))

        assert loaded_state.catalog.styles == list(PRESET_STYLES)
        assert loaded_state.is_generating_styles is False


class TestUpdateConfig:

    def test_select_style_and_ratio(self, service, studio_state):
        service.update_config(studio_state, ConfigUpdate(style_id="k-cream", aspect_ratio="1:1"))

        assert studio_state.selected_style.id == "k-cream"
        assert studio_state.config.aspect_ratio == AspectRatio.SQUARE

    def test_unknown_style(self, service, studio_state):
        with pytest.raises(ValueError, match="not found"):
            service.update_config(studio_state, ConfigUpdate(style_id="nope"))

        assert studio_state.selected_style == PRESET_STYLES[0]

    def test_focus_points_replace_and_cap(self, service, studio_state):
        service.update_config(studio_state, ConfigUpdate(focus_points=["a", "", "c", "d"]))

        assert studio_state.config.focus_points == ["a", "", "c"]

    def test_focus_points_padded_to_three(self, service, studio_state):
        service.update_config(studio_state, ConfigUpdate(focus_points=["a"]))

        assert studio_state.config.focus_points == ["a", "", ""]

    def test_description_edit_replaces_analysis(self, service, loaded_state):
        service.update_config(loaded_state, ConfigUpdate(description="Matte black basin mixer"))

        assert loaded_state.description == "Matte black basin mixer"
        assert loaded_state.config.focus_points == ["", "", ""]

    def test_edited_description_reaches_generation(self, service, loaded_state, fake_agents, fake_image_generator):
        service.update_config(loaded_state, ConfigUpdate(description="Matte black basin mixer"))

        asyncio.run(service.generate_all(loaded_state))

        assert fake_agents.plan_details.call_args.args[2] == "Matte black basin mixer"
        poster_call = next(c for c in fake_image_generator if c["aspect_ratio"] == "3:4")
        assert "Matte black basin mixer" in poster_call["prompt"]


class TestGenerateAll:
    """Tests for the combined poster + detail generation."""

    def test_no_image_is_noop(self, service, studio_state, history, fake_image_generator, fake_agents):
        assert asyncio.run(service.generate_all(studio_state)) is None

        assert fake_image_generator == []
        fake_agents.plan_details.assert_not_called()
        assert history.list_entries(TEST_SESSION_ID) == []
        assert studio_state.processing_step == ProcessingStep.IDLE

    def test_success_sets_results_and_history(self, service, loaded_state, history, fake_image_generator):
        result = asyncio.run(service.generate_all(loaded_state))

        assert result.poster_url.startswith("/static/poster_")
        assert len(result.details) == 3
        assert [d.caption for d in result.details][0] == "亮潔釉面，一抹即淨。"
        assert all(d.url.startswith("/static/detail_") for d in result.details)
        assert len({d.id for d in result.details}) == 3

        assert loaded_state.result_image == result.poster_url
        assert loaded_state.details == result.details
        assert loaded_state.processing_step == ProcessingStep.IDLE

        entries = history.list_entries(TEST_SESSION_ID)
        assert len(entries) == 1
        assert entries[0].id == result.history_entry_id
        assert entries[0].url == result.poster_url
        assert entries[0].style_name == "五星飯店・奢華白"

        # One poster plus one image per detail
        assert len(fake_image_generator) == 4
        ratios = sorted(call["aspect_ratio"] for call in fake_image_generator)
        assert ratios == ["1:1", "1:1", "1:1", "3:4"]

    def test_focus_points_passed_verbatim(self, service, loaded_state, fake_agents):
        loaded_state.config = loaded_state.config.model_copy(update={"focus_points": [" 釉面 ", "", "Lid"]})

        asyncio.run(service.generate_all(loaded_state))

        assert fake_agents.plan_details.call_args.args[3] == [" 釉面 ", "", "Lid"]

    def test_poster_and_details_run_concurrently(self, service, loaded_state, fake_agents, detail_plans):
        details_started = asyncio.Event()
        original_generate_poster = service.generate_poster

        async def plan_details(*args, **kwargs):
            details_started.set()
            return detail_plans

        async def generate_poster(*args, **kwargs):
            # Deadlocks (and times out) unless the detail branch is already running
            await asyncio.wait_for(details_started.wait(), timeout=1)
            return await original_generate_poster(*args, **kwargs)

        fake_agents.plan_details.side_effect = plan_details
        service.generate_poster = generate_poster

        result = asyncio.run(service.generate_all(loaded_state))

        assert result is not None

    def test_detail_failure_keeps_previous_results(self, service, loaded_state, history, fake_agents):
        previous = [DetailResult(id="old", url="/static/old_detail.png", caption="c", focus_point="f")]
        loaded_state.result_image = "/static/old_poster.png"
        loaded_state.details = previous
        fake_agents.plan_details.side_effect = RuntimeError("planner down")

        with pytest.raises(ValueError, match=ALERT_GENERATION_FAILED):
            asyncio.run(service.generate_all(loaded_state))

        assert loaded_state.result_image == "/static/old_poster.png"
        assert loaded_state.details == previous
        assert loaded_state.processing_step == ProcessingStep.IDLE
        assert history.list_entries(TEST_SESSION_ID) == []

    def test_poster_failure_discards_details(self, service, loaded_state, history, monkeypatch):
        async def failing_generate(**kwargs):
            if kwargs["aspect_ratio"] != "1:1":
                raise ValueError("Image generation returned no candidates.")
            return "data:image/png;base64,AAAA"

        monkeypatch.setattr("services.gemini_generate_image_data_url", failing_generate)

        with pytest.raises(ValueError, match=ALERT_GENERATION_FAILED):
            asyncio.run(service.generate_all(loaded_state))

        assert loaded_state.result_image is None
        assert loaded_state.details == []
        assert history.list_entries(TEST_SESSION_ID) == []

    def test_busy_session_rejected(self, service, loaded_state, fake_image_generator):
        loaded_state.processing_step = ProcessingStep.GENERATING

        with pytest.raises(ValueError, match=ALERT_GENERATION_BUSY):
            asyncio.run(service.generate_all(loaded_state))

        assert fake_image_generator == []

    def test_missing_image_key_fails_generation(self, fake_agents, history, loaded_state, temp_dir):
        service = PosterStudioService(
            agents=fake_agents,
            history=history,
            image_api_key=None,
            output_dir=str(temp_dir),
        )

        with pytest.raises(ValueError, match=ALERT_GENERATION_FAILED):
            asyncio.run(service.generate_all(loaded_state))

    def test_openai_image_provider(self, fake_agents, history, loaded_state, temp_dir, monkeypatch, png_data_url):
        calls = []

        async def fake_gpt(**kwargs):
            calls.append(kwargs)
            return png_data_url

        monkeypatch.setattr("services.gpt_generate_image_data_url", fake_gpt)
        service = PosterStudioService(
            agents=fake_agents,
            history=history,
            image_provider="openai",
            image_model="gpt-4.1",
            image_api_key="sk-test",
            output_dir=str(temp_dir),
        )

        asyncio.run(service.generate_all(loaded_state))

        assert len(calls) == 4
        assert all(call["media_type"] == "image/png" for call in calls)

    def test_save_failure_falls_back_to_data_url(self, service, loaded_state, monkeypatch, png_data_url):
        def failing_save(*args, **kwargs):
            raise RuntimeError("disk full")

        monkeypatch.setattr("services.save_generated_image", failing_save)

        result = asyncio.run(service.generate_all(loaded_state))

        assert result.poster_url == png_data_url
        assert all(d.url == png_data_url for d in result.details)
