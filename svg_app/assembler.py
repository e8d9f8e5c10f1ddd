import re
from dataclasses import dataclass
from typing import List

from .models import DEFAULT_SCENE_FRAMES, FPS, Asset, Scene

# SVG attribute spellings React rejects, mapped to their JSX names.
JSX_ATTRIBUTES = (
    ('class="', 'className="'),
    ("stroke-width", "strokeWidth"),
    ("stroke-linecap", "strokeLinecap"),
    ("stroke-linejoin", "strokeLinejoin"),
    ("fill-rule", "fillRule"),
    ("clip-rule", "clipRule"),
    ("text-anchor", "textAnchor"),
    ("stop-color", "stopColor"),
    ("stop-opacity", "stopOpacity"),
    ("fill-opacity", "fillOpacity"),
    ("stroke-opacity", "strokeOpacity"),
)

COSMIC_TEXT = """const CosmicText = ({ text, position }) => {
  const getPositionStyle = (pos) => {
    switch(pos) {
      case 'top': return { top: '10%', bottom: 'auto' };
      case 'bottom': return { bottom: '10%', top: 'auto' };
      case 'center': return { top: '50%', transform: 'translateY(-50%)' };
      default: return { bottom: '10%' };
    }
  };

  return (
    <div
      style={{
        position: 'absolute',
        width: '80%',
        left: '10%',
        textAlign: 'center',
        fontFamily: "'Courier New', monospace",
        fontSize: '40px',
        fontWeight: 'bold',
        color: '#ffffff',
        textTransform: 'uppercase',
        textShadow: '0 0 10px #8b5cf6, 0 0 20px #8b5cf6, 0 0 30px #8b5cf6',
        zIndex: 100,
        ...getPositionStyle(position),
      }}
    >
      {text}
    </div>
  );
};"""


def svg_to_jsx(svg: str) -> str:
    for attr, jsx in JSX_ATTRIBUTES:
        svg = svg.replace(attr, jsx)
    return svg


def _escape_quotes(text: str) -> str:
    return text.replace('"', '\\"')


@dataclass
class TimelineEntry:
    index: int
    scene: Scene
    start_frame: int
    duration_in_frames: int

    @property
    def end_frame(self) -> int:
        return self.start_frame + self.duration_in_frames


class SequenceAssembler:
    def __init__(self, fps: int = FPS):
        self.fps = fps

    def timeline(self, scenes: List[Scene]) -> List[TimelineEntry]:
        """Lay completed scenes end to end; each starts where the previous ends."""
        entries = []
        cursor = 0
        completed = [s for s in scenes if s.status == "completed" and s.svg_content]
        for idx, scene in enumerate(completed, start=1):
            duration = scene.duration_in_frames or DEFAULT_SCENE_FRAMES
            entries.append(TimelineEntry(idx, scene, cursor, duration))
            cursor += duration
        return entries

    def total_frames(self, scenes: List[Scene]) -> int:
        entries = self.timeline(scenes)
        return entries[-1].end_frame if entries else 0

    def build(self, scenes: List[Scene]) -> str:
        """Render the full Remotion composition, or "" when nothing completed."""
        entries = self.timeline(scenes)
        if not entries:
            return ""

        components = "\n".join(
            f"""
// SVG Asset for Scene {e.index}
const SvgAsset{e.index} = () => (
  <div className="w-full h-full flex items-center justify-center">
    {svg_to_jsx(e.scene.svg_content)}
  </div>
);"""
            for e in entries
        )

        wrappers = "\n".join(
            f"""
// SCENE {e.index} COMPOSITION
// Script: "{e.scene.script_segment}"
// Animation: {e.scene.animation_notes}
const Scene{e.index} = () => {{
  return (
    <AbsoluteFill style={{{{ backgroundColor: '#fff' }}}}>
      {{/* 1. Visual Asset */}}
      <AbsoluteFill>
         <SvgAsset{e.index} />
      </AbsoluteFill>

      {{/* 2. Text Overlay */}}
      <CosmicText
        text="{_escape_quotes(e.scene.script_segment)}"
        position="{e.scene.text_placement}"
      />
    </AbsoluteFill>
  );
}};"""
            for e in entries
        )

        sequence_items = "\n".join(
            f"""
      <Sequence from={{{e.start_frame}}} durationInFrames={{{e.duration_in_frames}}}>
        <Scene{e.index} />
      </Sequence>"""
            for e in entries
        )

        total = entries[-1].end_frame
        total_sec = f"{total / self.fps:.1f}"

        return f"""import {{ Sequence, AbsoluteFill }} from 'remotion';

// --- Shared Components ---

{COSMIC_TEXT}

// --- Generated SVG Assets ---
{components}

// --- Scene Compositions (SVG + Text) ---
{wrappers}

// --- Main Sequence ---
// Total Duration: {total} frames (~{total_sec}s)
export const StoryboardComposition = () => {{
  return (
    <div style={{{{ flex: 1, backgroundColor: '#000000' }}}}>
      {sequence_items}
    </div>
  );
}};"""


def build_scene_component(scene: Scene, index: int) -> str:
    """Standalone component for one scene; ``index`` is zero-based."""
    if not scene.svg_content:
        return ""
    number = index + 1
    return f"""
/**
 * SCENE {number}
 * Script: "{scene.script_segment}"
 * Text Placement: {scene.text_placement}
 *
 * ANIMATION INSTRUCTIONS:
 * {scene.animation_notes}
 */
export const Scene{number} = () => (
  <div style={{{{ width: '100%', height: '100%', display: 'flex', alignItems: 'center', justifyContent: 'center' }}}}>
    {svg_to_jsx(scene.svg_content)}
  </div>
);"""


def build_prompt_sheet(scenes: List[Scene]) -> str:
    blocks = []
    for i, s in enumerate(scenes, start=1):
        blocks.append(
            f"[Scene {i}]\n"
            f"Prompt: {s.visual_prompt}\n"
            f"Animation: {s.animation_notes}\n"
            f"Duration: {s.duration_in_frames} frames\n"
            f"Text: \"{s.script_segment}\" ({s.text_placement})\n"
        )
    return "\n-------------------\n".join(blocks)


def svg_filename_for_scene(index: int) -> str:
    return f"scene-{index + 1}.svg"


def svg_filename_for_asset(asset: Asset) -> str:
    slug = re.sub(r"[^0-9a-zA-Z-]", "", asset.id)[:8]
    return f"character-{slug}.svg"
