import asyncio
import logging
from typing import Callable, List, Optional

from .generator import SvgGenerator
from .models import AspectRatio, Scene, SvgStyle
from .reference import ReferenceImage

logger = logging.getLogger(__name__)

SCENE_DELAY_SEC = 3.0


async def run_scenes(
    generator: SvgGenerator,
    scenes: List[Scene],
    style: SvgStyle,
    aspect_ratio: AspectRatio = AspectRatio.SQUARE,
    reference: Optional[ReferenceImage] = None,
    custom_instructions: str = "",
    on_update: Optional[Callable[[Scene], None]] = None,
    sleep=None,
) -> List[Scene]:
    """Generate an SVG for every scene, one at a time and in order.

    Scenes are updated in place. A failed scene is marked ``error`` and the
    run moves on; consecutive requests are spaced by ``SCENE_DELAY_SEC``.
    """
    sleep = sleep or asyncio.sleep

    def notify(scene: Scene) -> None:
        if on_update:
            on_update(scene)

    for idx, scene in enumerate(scenes):
        scene.status = "generating"
        notify(scene)
        try:
            scene.svg_content = await generator.generate(
                scene.visual_prompt,
                style,
                aspect_ratio=aspect_ratio,
                reference=reference,
                custom_instructions=custom_instructions,
            )
            scene.status = "completed"
        except Exception:  # noqa: BLE001
            logger.exception(f"[Runner] Scene {idx + 1}/{len(scenes)} failed")
            scene.status = "error"
        notify(scene)

        if idx < len(scenes) - 1:
            await sleep(SCENE_DELAY_SEC)

    done = sum(1 for s in scenes if s.status == "completed")
    logger.info(f"[Runner] Finished {done}/{len(scenes)} scenes")
    return scenes
