import logging
from typing import Optional

from google import genai
from google.genai import types

from .errors import InvalidOutputError
from .models import AspectRatio, SvgStyle
from .prompts import PromptBuilder, build_enhance_prompt, build_system_instruction
from .reference import ReferenceImage
from .retry import call_with_rate_limit_retry

logger = logging.getLogger(__name__)

FENCES = ("```xml", "```svg", "```")


def clean_svg_markup(text: str) -> str:
    """Strip markdown fences the model adds despite being told not to."""
    for fence in FENCES:
        text = text.replace(fence, "")
    return text.strip()


class SvgGenerator:
    """
    Single-shot SVG generation against a Gemini text model, plus prompt enhancement.
    """

    def __init__(self, client: genai.Client, model: str, sleep=None):
        self.client = client
        self.model = model
        self.sleep = sleep

    async def generate(
        self,
        prompt: str,
        style: SvgStyle,
        aspect_ratio: AspectRatio = AspectRatio.SQUARE,
        reference: Optional[ReferenceImage] = None,
        custom_instructions: str = "",
    ) -> str:
        if not prompt or not prompt.strip():
            raise ValueError("prompt is required")

        user_prompt = PromptBuilder(style, aspect_ratio, custom_instructions).build(
            prompt, with_reference=reference is not None
        )
        if reference is not None:
            contents = [reference.to_part(), types.Part.from_text(text=user_prompt)]
        else:
            contents = user_prompt

        response = await call_with_rate_limit_retry(
            self.client.aio.models.generate_content,
            model=self.model,
            contents=contents,
            config=types.GenerateContentConfig(
                system_instruction=build_system_instruction(aspect_ratio),
                temperature=0.4,
                max_output_tokens=8192,
            ),
            sleep=self.sleep,
            label="generate_svg",
        )

        text = clean_svg_markup(response.text or "")
        if "<svg" not in text:
            raise InvalidOutputError(
                "Model failed to generate valid SVG markup.",
                {"model": self.model, "preview": text[:120]},
            )
        return text

    async def enhance_prompt(self, concept: str, style: SvgStyle, custom_instructions: str = "") -> str:
        """Expand a short concept into a detailed visual prompt.

        Falls back to the concept as given when the model call fails.
        """
        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=build_enhance_prompt(concept, style, custom_instructions),
                config=types.GenerateContentConfig(
                    temperature=0.7,
                    max_output_tokens=200,
                ),
            )
        except Exception as exc:  # noqa: BLE001
            logger.warning(f"[Enhance] Prompt enhancement failed, keeping original: {exc}")
            return concept
        enhanced = (response.text or "").strip()
        return enhanced or concept
