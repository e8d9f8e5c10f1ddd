"""
Tests for the script segmenter.
"""

import json

import pytest

from fakes import FakeClient, RateLimited
from svg_app.errors import SegmentationError
from svg_app.models import SvgStyle
from svg_app.planner import BREAKDOWN_SCHEMA, ScenePlanner, parse_breakdown


def _segment(**overrides):
    item = {
        "scriptSegment": "The Sun",
        "visualPrompt": "A blazing flat sun",
        "animationNotes": "Rotate the rays slowly",
        "durationInSeconds": 2.3,
        "textPlacement": "bottom",
    }
    item.update(overrides)
    return item


class TestParseBreakdown:
    def test_builds_pending_scenes_with_frames(self):
        text = json.dumps([_segment(), _segment(scriptSegment="Hammers Earth", durationInSeconds=4, textPlacement="top")])

        scenes = parse_breakdown(text)

        assert [s.script_segment for s in scenes] == ["The Sun", "Hammers Earth"]
        assert [s.duration_in_frames for s in scenes] == [69, 120]
        assert [s.text_placement for s in scenes] == ["bottom", "top"]
        assert all(s.status == "pending" for s in scenes)
        assert scenes[0].id != scenes[1].id

    def test_empty_array_gives_no_scenes(self):
        assert parse_breakdown("[]") == []

    def test_duration_outside_prompted_range_is_kept(self):
        scenes = parse_breakdown(json.dumps([_segment(durationInSeconds=9)]))
        assert scenes[0].duration_in_frames == 270

    @pytest.mark.parametrize(
        "text",
        [
            "not json",
            json.dumps({"scenes": []}),
            json.dumps(["just a string"]),
            json.dumps([{"scriptSegment": "x"}]),
            json.dumps([_segment(durationInSeconds="3")]),
            json.dumps([_segment(durationInSeconds=-1)]),
            json.dumps([_segment(textPlacement="left")]),
            json.dumps([_segment(visualPrompt=None)]),
        ],
    )
    def test_malformed_responses_are_fatal(self, text):
        with pytest.raises(SegmentationError):
            parse_breakdown(text)


class TestScenePlanner:
    @pytest.mark.asyncio
    async def test_breakdown_sends_instruction_script_and_schema(self, sleep_recorder):
        client = FakeClient([json.dumps([_segment()])])
        planner = ScenePlanner(client, "gemini-test", sleep=sleep_recorder)

        scenes = await planner.breakdown("The sun hammers Earth with energy", SvgStyle.FLAT, "timeline")

        assert len(scenes) == 1
        call = client.models.calls[0]
        instruction, script = call["contents"]
        assert "HIGHLY GRANULAR" in instruction.text
        assert 'Use keywords for "Flat Design"' in instruction.text
        assert script.text == "SCRIPT:\nThe sun hammers Earth with energy"
        assert call["config"].response_mime_type == "application/json"
        assert call["config"].response_json_schema == BREAKDOWN_SCHEMA

    @pytest.mark.asyncio
    async def test_scene_mode_instruction(self, sleep_recorder):
        client = FakeClient([json.dumps([_segment()])])
        planner = ScenePlanner(client, "gemini-test", sleep=sleep_recorder)

        await planner.breakdown("A story.", SvgStyle.ABSTRACT, "scene")

        instruction = client.models.calls[0]["contents"][0]
        assert "SCENE / NARRATIVE MODE" in instruction.text

    @pytest.mark.asyncio
    async def test_retries_rate_limits(self, sleep_recorder):
        client = FakeClient([RateLimited(), json.dumps([_segment()])])
        planner = ScenePlanner(client, "gemini-test", sleep=sleep_recorder)

        scenes = await planner.breakdown("A story.", SvgStyle.FLAT)

        assert len(scenes) == 1
        assert sleep_recorder.calls == [2.0]

    @pytest.mark.asyncio
    async def test_malformed_response_propagates(self, sleep_recorder):
        planner = ScenePlanner(FakeClient(["{oops"]), "gemini-test", sleep=sleep_recorder)

        with pytest.raises(SegmentationError):
            await planner.breakdown("A story.", SvgStyle.FLAT)

    @pytest.mark.asyncio
    async def test_rejects_empty_script_and_unknown_mode(self):
        planner = ScenePlanner(FakeClient([]), "gemini-test")

        with pytest.raises(ValueError):
            await planner.breakdown("  ", SvgStyle.FLAT)
        with pytest.raises(ValueError):
            await planner.breakdown("text", SvgStyle.FLAT, "paragraph")
