from typing import Optional

from .models import AspectRatio, SvgStyle


def build_system_instruction(aspect_ratio: AspectRatio) -> str:
    view_box = aspect_ratio.view_box
    return (
        "You are a world-class SVG (Scalable Vector Graphics) artist and coder specializing "
        "in assets for high-end motion graphics (Remotion).\n"
        "Your task is to generate professional, clean, and grouped SVG code based on the "
        "user's description.\n\n"
        "Rules:\n"
        "1. Output ONLY the raw XML string for the <svg>...</svg>. Do not wrap it in markdown "
        "code blocks (```).\n"
        f"2. The SVG must use a 'viewBox' of \"{view_box}\" to match the requested aspect ratio.\n"
        "3. CRITICAL FOR ANIMATION: Use semantic IDs for major groups (e.g., id=\"head\", "
        "id=\"arm-left\", id=\"background\"). Group related elements (<g>) logically so they "
        "can be rotated or moved in Remotion.\n"
        "4. Ensure the SVG is self-contained. Do not use external links or images.\n"
        "5. Optimize for cleanliness; use <path>, <rect>, <circle> efficiently.\n"
        "6. Style adherence: Strictly follow the requested visual style (e.g., Flat, Pixel, "
        "Line Art, Vector Painting).\n"
        "   - For \"Vector Painting\": Use layered paths with varying opacity or gradients to "
        "simulate depth and brush strokes.\n"
        "7. If the user asks for a 'character', ensure they have a distinct personality, "
        "facial features, and correct anatomy.\n"
        "8. Use hex codes for colors. Ensure high contrast and professional color palettes."
    )


REFERENCE_IMAGE_INSTRUCTION = (
    "Reference Image Instruction: Analyze the attached image deeply. Use this image as the "
    "STRICT visual reference for the character design, color palette, and line style. The "
    "generated SVG should look like it belongs in the same universe as this image, but "
    "performing the action described in the prompt."
)


class PromptBuilder:
    """Composes the per-request user prompt for the SVG generator."""

    def __init__(
        self,
        style: SvgStyle,
        aspect_ratio: AspectRatio = AspectRatio.SQUARE,
        custom_instructions: str = "",
    ):
        self.style = style
        self.aspect_ratio = aspect_ratio
        self.custom_instructions = (custom_instructions or "").strip()

    def build(self, prompt: str, with_reference: bool = False) -> str:
        text = (
            f"Create a professional asset/character with the following description: \"{prompt}\".\n\n"
            f"Style: {self.style.value}\n\n"
            "Technical constraints:\n"
            f"- ViewBox: {self.aspect_ratio.view_box}\n"
            "- Complexity: High (Professional detail)\n"
            "- Output: Pure SVG string."
        )
        if self.custom_instructions:
            text += f"\n\nAdditional Global Instructions: {self.custom_instructions}"
        if with_reference:
            text += f"\n\n{REFERENCE_IMAGE_INSTRUCTION}"
        return text


def build_enhance_prompt(concept: str, style: SvgStyle, custom_instructions: Optional[str] = None) -> str:
    extra = f"Additional Instructions: {custom_instructions}\n" if custom_instructions else ""
    return (
        "You are a professional prompt engineer for generative art.\n"
        "Refine and expand the following simple concept into a highly detailed, descriptive "
        "visual prompt suitable for generating a professional SVG or illustration.\n\n"
        f"Concept: \"{concept}\"\n"
        f"Target Style: {style.value}\n"
        f"{extra}\n"
        "Guidelines:\n"
        "- Include specific details about lighting, composition, colors, and mood.\n"
        f"- Explicitly mention visual elements characteristic of the \"{style.value}\" style.\n"
        "- Keep it concise but descriptive (approx 40-60 words).\n"
        "- Do NOT include the SVG code, just the text prompt description."
    )


TIMELINE_INSTRUCTION = (
    "Analyze the following transcript/script and break it down into a HIGHLY GRANULAR "
    "sequence of visual assets.\n\n"
    "CRITICAL INSTRUCTION:\n"
    "- You MUST split the script into short, punchy visual segments (every 2-5 seconds).\n"
    "- Create a new visual scene for EVERY distinct phrase, keyword, noun, or action.\n"
    "- Do NOT group multiple ideas into one scene. Split them!\n\n"
    "Example splitting:\n"
    "\"The sun hammers Earth with energy\" ->\n"
    "1. \"The Sun\" (Visual: Blazing sun)\n"
    "2. \"Hammers Earth\" (Visual: Sun rays hitting the planet violently)\n"
    "3. \"With Energy\" (Visual: Glowing energetic waves or battery charging)"
)

SCENE_INSTRUCTION = (
    "Analyze the following video script and break it down into distinct visual scenes.\n\n"
    "Strategy: SCENE / NARRATIVE MODE\n"
    "- Even in narrative mode, ensure long sentences are split if the visual subject changes.\n"
    "- Create a new scene whenever the subject matter changes significantly.\n"
    "- Do not simply create one scene per sentence if the sentence is complex. Break it up."
)


def build_breakdown_instruction(style: SvgStyle, mode: str) -> str:
    if mode == "timeline":
        strategy = TIMELINE_INSTRUCTION
    elif mode == "scene":
        strategy = SCENE_INSTRUCTION
    else:
        raise ValueError(f"Unknown breakdown mode: {mode!r}")
    return (
        f"{strategy}\n\n"
        "For each segment, provide:\n"
        "1. The exact segment of the script text to display on screen.\n"
        "2. A highly detailed visual description (visualPrompt) for an SVG illustration. "
        f"Use keywords for \"{style.value}\".\n"
        "3. animationNotes: A short, technical instruction for a motion graphics editor "
        "(using Remotion/After Effects) on how to animate this SVG. e.g., \"Rotate the robot "
        "arm\", \"Scale up the background\", \"Wiggle the eyebrows\".\n"
        "4. durationInSeconds: Estimate the time (in seconds) it takes to read this segment. "
        "Keep it short (2-5s) to maintain pace.\n"
        "5. textPlacement: Analyze the visual composition described in step 2. Where is the "
        "best place to put the script text so it does not obscure the main subject? "
        "Options: \"top\", \"bottom\", \"center\".\n\n"
        "Output JSON."
    )
