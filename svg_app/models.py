import math
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional

FPS = 30
DEFAULT_SCENE_FRAMES = 90


class SvgStyle(Enum):
    FLAT = "Flat Design"
    PIXEL = "Pixel Art"
    LINE_ART = "Line Art"
    ISOMETRIC = "Isometric"
    LOW_POLY = "Low Poly"
    HAND_DRAWN = "Hand Drawn"
    PAINTERLY = "Vector Painting"
    ABSTRACT = "Abstract"
    CORPORATE = "Corporate Memphis"
    MATERIAL = "Material Design"

    @classmethod
    def parse(cls, raw) -> "SvgStyle":
        """Accept a member, its name ("LOW_POLY") or its label ("Low Poly")."""
        if isinstance(raw, cls):
            return raw
        text = str(raw or "").strip()
        for style in cls:
            if text == style.value or text.upper() == style.name:
                return style
        raise ValueError(f"Unknown style: {raw!r}")


STYLE_DESCRIPTIONS: Dict[SvgStyle, str] = {
    SvgStyle.FLAT: "Clean, minimalistic, no gradients, bold solid colors.",
    SvgStyle.PIXEL: "Blocky, retro 8-bit aesthetic, square paths.",
    SvgStyle.LINE_ART: "Black and white, strobed paths, minimal fill.",
    SvgStyle.ISOMETRIC: "3D perspective, geometric shapes, technical feel.",
    SvgStyle.LOW_POLY: "Triangular mesh, sharp edges, vibrant geometric shading.",
    SvgStyle.HAND_DRAWN: "Rough edges, sketch-like strokes, organic feel.",
    SvgStyle.PAINTERLY: "Complex layered shapes simulating brush strokes and depth.",
    SvgStyle.ABSTRACT: "Fluid shapes, artistic interpretation, non-representational.",
    SvgStyle.CORPORATE: "Exaggerated proportions, flat colors, modern tech flow.",
    SvgStyle.MATERIAL: "Google Material design, subtle shadows, layered paper look.",
}


def style_description(style) -> str:
    return STYLE_DESCRIPTIONS[SvgStyle.parse(style)]


class AspectRatio(Enum):
    SQUARE = "1:1"
    LANDSCAPE = "16:9"
    PORTRAIT = "9:16"

    @classmethod
    def parse(cls, raw) -> "AspectRatio":
        if raw is None or raw == "":
            return cls.SQUARE
        if isinstance(raw, cls):
            return raw
        text = str(raw).strip()
        for ratio in cls:
            if text == ratio.value or text.upper() == ratio.name:
                return ratio
        raise ValueError(f"Unknown aspect ratio: {raw!r}")

    @property
    def view_box(self) -> str:
        return VIEWBOX_MAP[self]


VIEWBOX_MAP: Dict[AspectRatio, str] = {
    AspectRatio.SQUARE: "0 0 512 512",
    AspectRatio.LANDSCAPE: "0 0 1024 576",
    AspectRatio.PORTRAIT: "0 0 576 1024",
}

TEXT_PLACEMENTS = ("top", "bottom", "center")
SCENE_STATUSES = ("pending", "generating", "completed", "error")
BREAKDOWN_MODES = ("scene", "timeline")


def seconds_to_frames(seconds: float) -> int:
    # rounding first keeps 2.3 * 30 from landing on 69.00000000000001
    return math.ceil(round(float(seconds) * FPS, 6))


def _whole_frames(value) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"durationInFrames must be a number, got {value!r}")
    if value != int(value):
        raise ValueError(f"durationInFrames must be a whole number of frames, got {value!r}")
    return int(value)


def new_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class Asset:
    prompt: str
    style: SvgStyle
    aspect_ratio: AspectRatio
    svg_content: str
    id: str = field(default_factory=new_id)
    created_at: int = field(default_factory=lambda: int(time.time() * 1000))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "prompt": self.prompt,
            "style": self.style.value,
            "aspectRatio": self.aspect_ratio.value,
            "svgContent": self.svg_content,
            "createdAt": self.created_at,
        }


@dataclass
class Scene:
    script_segment: str
    visual_prompt: str
    animation_notes: str
    duration_in_frames: int
    text_placement: str = "bottom"
    status: str = "pending"
    svg_content: Optional[str] = None
    id: str = field(default_factory=new_id)

    def __post_init__(self):
        if self.text_placement not in TEXT_PLACEMENTS:
            raise ValueError(f"Invalid text placement: {self.text_placement!r}")
        if self.status not in SCENE_STATUSES:
            raise ValueError(f"Invalid scene status: {self.status!r}")
        if self.duration_in_frames < 0:
            raise ValueError("duration_in_frames must not be negative")

    @property
    def duration_sec(self) -> float:
        return self.duration_in_frames / FPS

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "scriptSegment": self.script_segment,
            "visualPrompt": self.visual_prompt,
            "animationNotes": self.animation_notes,
            "durationInFrames": self.duration_in_frames,
            "textPlacement": self.text_placement,
            "status": self.status,
            "svgContent": self.svg_content,
        }

    @classmethod
    def from_dict(cls, raw: dict) -> "Scene":
        try:
            kwargs = dict(
                script_segment=str(raw["scriptSegment"]),
                visual_prompt=str(raw["visualPrompt"]),
                animation_notes=str(raw.get("animationNotes") or ""),
                duration_in_frames=_whole_frames(raw["durationInFrames"]),
                text_placement=raw.get("textPlacement") or "bottom",
                status=raw.get("status") or "pending",
                svg_content=raw.get("svgContent"),
            )
        except (KeyError, TypeError) as exc:
            raise ValueError(f"Malformed scene: {exc}") from exc
        if raw.get("id"):
            kwargs["id"] = str(raw["id"])
        return cls(**kwargs)
