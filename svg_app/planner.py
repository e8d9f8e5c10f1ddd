import json
import logging
from typing import List

from google import genai
from google.genai import types

from .errors import SegmentationError
from .models import BREAKDOWN_MODES, TEXT_PLACEMENTS, Scene, SvgStyle, seconds_to_frames
from .prompts import build_breakdown_instruction
from .retry import call_with_rate_limit_retry

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    "scriptSegment",
    "visualPrompt",
    "animationNotes",
    "durationInSeconds",
    "textPlacement",
)

BREAKDOWN_SCHEMA = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "scriptSegment": {"type": "string"},
            "visualPrompt": {"type": "string"},
            "animationNotes": {
                "type": "string",
                "description": "Instructions for animating the SVG in Remotion",
            },
            "durationInSeconds": {
                "type": "number",
                "description": "Estimated duration in seconds",
            },
            "textPlacement": {"type": "string", "enum": list(TEXT_PLACEMENTS)},
        },
        "required": list(REQUIRED_FIELDS),
    },
}


class ScenePlanner:
    def __init__(self, client: genai.Client, model: str, sleep=None):
        self.client = client
        self.model = model
        self.sleep = sleep

    async def breakdown(self, script: str, style: SvgStyle, mode: str = "timeline") -> List[Scene]:
        if not script or not script.strip():
            raise ValueError("script is required")
        if mode not in BREAKDOWN_MODES:
            raise ValueError(f"Unknown breakdown mode: {mode!r}")

        response = await call_with_rate_limit_retry(
            self.client.aio.models.generate_content,
            model=self.model,
            contents=[
                types.Part.from_text(text=build_breakdown_instruction(style, mode)),
                types.Part.from_text(text=f"SCRIPT:\n{script}"),
            ],
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_json_schema=BREAKDOWN_SCHEMA,
            ),
            sleep=self.sleep,
            label="breakdown_script",
        )

        scenes = parse_breakdown(response.text or "")
        logger.info(f"[Planner] Broke script into {len(scenes)} scenes ({mode} mode)")
        return scenes


def parse_breakdown(text: str) -> List[Scene]:
    """Turn the structured breakdown response into pending scenes.

    Every field is required; a missing or ill-typed one fails the whole
    breakdown rather than being filled with a default.
    """
    try:
        body = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SegmentationError("Breakdown response is not valid JSON", {"error": str(exc)}) from exc
    if not isinstance(body, list):
        raise SegmentationError("Breakdown response must be a JSON array")

    scenes = []
    for index, raw in enumerate(body):
        if not isinstance(raw, dict):
            raise SegmentationError("Breakdown segment must be an object", {"index": index})
        missing = [name for name in REQUIRED_FIELDS if name not in raw]
        if missing:
            raise SegmentationError("Breakdown segment is missing fields", {"index": index, "missing": missing})

        for name in ("scriptSegment", "visualPrompt", "animationNotes", "textPlacement"):
            if not isinstance(raw[name], str):
                raise SegmentationError(f"{name} must be a string", {"index": index})
        seconds = raw["durationInSeconds"]
        if isinstance(seconds, bool) or not isinstance(seconds, (int, float)) or seconds < 0:
            raise SegmentationError("durationInSeconds must be a non-negative number", {"index": index})
        if raw["textPlacement"] not in TEXT_PLACEMENTS:
            raise SegmentationError(
                "textPlacement must be top, bottom or center",
                {"index": index, "value": raw["textPlacement"]},
            )

        scenes.append(
            Scene(
                script_segment=raw["scriptSegment"],
                visual_prompt=raw["visualPrompt"],
                animation_notes=raw["animationNotes"],
                duration_in_frames=seconds_to_frames(seconds),
                text_placement=raw["textPlacement"],
            )
        )
    return scenes
