import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from google import genai

from .assembler import SequenceAssembler
from .config import Settings
from .generator import SvgGenerator
from .history import AssetHistory
from .models import Asset, AspectRatio, Scene, SvgStyle
from .reference import ReferenceImage
from .runner import run_scenes

logger = logging.getLogger(__name__)


def build_gemini_client(settings: Settings) -> genai.Client:
    return genai.Client(api_key=settings.google_api_key)


async def create_asset(
    generator: SvgGenerator,
    history: AssetHistory,
    prompt: str,
    style: SvgStyle,
    aspect_ratio: AspectRatio = AspectRatio.SQUARE,
    reference: Optional[ReferenceImage] = None,
    custom_instructions: str = "",
) -> Asset:
    svg = await generator.generate(
        prompt,
        style,
        aspect_ratio=aspect_ratio,
        reference=reference,
        custom_instructions=custom_instructions,
    )
    asset = history.add(Asset(prompt=prompt, style=style, aspect_ratio=aspect_ratio, svg_content=svg))
    logger.info(f"[Asset] Generated {asset.id} ({style.value}, {aspect_ratio.value})")
    return asset


@dataclass
class StoryboardResult:
    scenes: List[Scene]
    sequence_code: str
    total_frames: int


async def render_storyboard(
    generator: SvgGenerator,
    scenes: List[Scene],
    style: SvgStyle,
    aspect_ratio: AspectRatio = AspectRatio.SQUARE,
    reference: Optional[ReferenceImage] = None,
    custom_instructions: str = "",
    on_update: Optional[Callable[[Scene], None]] = None,
    assembler: Optional[SequenceAssembler] = None,
    sleep=None,
) -> StoryboardResult:
    """Generate every scene's SVG in order, then assemble the composition."""
    assembler = assembler or SequenceAssembler()
    logger.info(f"[Storyboard] Rendering {len(scenes)} scenes")
    await run_scenes(
        generator,
        scenes,
        style,
        aspect_ratio=aspect_ratio,
        reference=reference,
        custom_instructions=custom_instructions,
        on_update=on_update,
        sleep=sleep,
    )
    return StoryboardResult(
        scenes=scenes,
        sequence_code=assembler.build(scenes),
        total_frames=assembler.total_frames(scenes),
    )
