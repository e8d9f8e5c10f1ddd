import asyncio
import io
import logging
import threading

from flask import Flask, jsonify, request, send_file

from .assembler import (
    SequenceAssembler,
    build_prompt_sheet,
    build_scene_component,
    svg_filename_for_asset,
    svg_filename_for_scene,
)
from .config import Settings
from .errors import StudioError
from .generator import SvgGenerator
from .history import AssetHistory
from .models import AspectRatio, Scene, SvgStyle
from .pipeline import build_gemini_client, create_asset, render_storyboard
from .planner import ScenePlanner
from .reference import ReferenceImage

logger = logging.getLogger(__name__)


class BackgroundLoop:
    """One event loop on a daemon thread, shared by every request.

    The genai client pools its async connections on the loop that first used
    them, so every model call has to run on the same loop, which never closes.
    """

    def __init__(self):
        self.loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self.loop.run_forever, name="svg-app-loop", daemon=True)
        self._thread.start()

    def run(self, coro):
        return asyncio.run_coroutine_threadsafe(coro, self.loop).result()


def create_app(settings: Settings = None, client=None, sleep=None) -> Flask:
    app = Flask(__name__)
    settings = settings or Settings()
    client = client or build_gemini_client(settings)

    generator = SvgGenerator(client, settings.gemini_text_model, sleep=sleep)
    planner = ScenePlanner(client, settings.gemini_text_model, sleep=sleep)
    assembler = SequenceAssembler()
    history = AssetHistory()
    background = BackgroundLoop()

    def _body() -> dict:
        body = request.get_json(force=True, silent=True)
        if body is None:
            return {}
        if not isinstance(body, dict):
            raise ValueError("request body must be a JSON object")
        return body

    def _reference(body: dict):
        raw = body.get("image")
        if not raw:
            return None
        return ReferenceImage.from_data_url(raw, max_bytes=settings.max_reference_image_bytes)

    def _scenes(body: dict):
        raw = body.get("scenes")
        if not isinstance(raw, list):
            raise ValueError("scenes must be a list")
        return [Scene.from_dict(item) for item in raw]

    @app.errorhandler(ValueError)
    def bad_request(exc):
        return jsonify({"error": str(exc)}), 400

    @app.errorhandler(StudioError)
    def bad_model_output(exc):
        logger.error(f"[Server] {exc}")
        return jsonify({"error": exc.message}), 502

    @app.route("/api/svg", methods=["POST"])
    def generate_svg():
        body = _body()
        prompt = (body.get("prompt") or "").strip()
        if not prompt:
            return jsonify({"error": "prompt is required"}), 400

        style = SvgStyle.parse(body.get("style") or SvgStyle.FLAT)
        aspect = AspectRatio.parse(body.get("aspectRatio"))
        reference = _reference(body)
        try:
            asset = background.run(
                create_asset(
                    generator,
                    history,
                    prompt,
                    style,
                    aspect_ratio=aspect,
                    reference=reference,
                    custom_instructions=body.get("customInstructions") or "",
                )
            )
        except (ValueError, StudioError):
            raise
        except Exception as exc:  # noqa: BLE001
            logger.exception("[Server] SVG generation failed")
            return jsonify({"error": str(exc)}), 500

        return jsonify(asset.to_dict())

    @app.route("/api/enhance", methods=["POST"])
    def enhance():
        body = _body()
        prompt = (body.get("prompt") or "").strip()
        if not prompt:
            return jsonify({"error": "prompt is required"}), 400
        style = SvgStyle.parse(body.get("style") or SvgStyle.FLAT)
        enhanced = background.run(
            generator.enhance_prompt(prompt, style, body.get("customInstructions") or "")
        )
        return jsonify({"prompt": enhanced})

    @app.route("/api/history", methods=["GET"])
    def list_history():
        return jsonify({"assets": [asset.to_dict() for asset in history]})

    @app.route("/api/history/<asset_id>/download", methods=["GET"])
    def download_asset(asset_id: str):
        try:
            asset = history.get(asset_id)
        except KeyError:
            return jsonify({"error": f"asset not found: {asset_id}"}), 404
        return send_file(
            io.BytesIO(asset.svg_content.encode("utf-8")),
            mimetype="image/svg+xml",
            as_attachment=True,
            download_name=svg_filename_for_asset(asset),
        )

    @app.route("/api/storyboard/breakdown", methods=["POST"])
    def breakdown():
        body = _body()
        script = (body.get("script") or "").strip()
        if not script:
            return jsonify({"error": "script is required"}), 400
        style = SvgStyle.parse(body.get("style") or SvgStyle.FLAT)
        mode = body.get("mode") or "timeline"
        try:
            scenes = background.run(planner.breakdown(script, style, mode))
        except (ValueError, StudioError):
            raise
        except Exception as exc:  # noqa: BLE001
            logger.exception("[Server] Script breakdown failed")
            return jsonify({"error": str(exc)}), 500
        return jsonify({"scenes": [s.to_dict() for s in scenes]})

    @app.route("/api/storyboard/render", methods=["POST"])
    def render():
        body = _body()
        scenes = _scenes(body)
        style = SvgStyle.parse(body.get("style") or SvgStyle.FLAT)
        aspect = AspectRatio.parse(body.get("aspectRatio"))
        result = background.run(
            render_storyboard(
                generator,
                scenes,
                style,
                aspect_ratio=aspect,
                reference=_reference(body),
                custom_instructions=body.get("customInstructions") or "",
                assembler=assembler,
                sleep=sleep,
            )
        )
        return jsonify(
            {
                "scenes": [s.to_dict() for s in result.scenes],
                "sequenceCode": result.sequence_code,
                "totalFrames": result.total_frames,
            }
        )

    @app.route("/api/storyboard/sequence", methods=["POST"])
    def sequence():
        scenes = _scenes(_body())
        return jsonify(
            {
                "sequenceCode": assembler.build(scenes),
                "totalFrames": assembler.total_frames(scenes),
            }
        )

    @app.route("/api/storyboard/prompts", methods=["POST"])
    def prompts():
        return jsonify({"text": build_prompt_sheet(_scenes(_body()))})

    @app.route("/api/storyboard/scene/<int:index>", methods=["POST"])
    def scene_component(index: int):
        scenes = _scenes(_body())
        if index >= len(scenes):
            return jsonify({"error": "scene index out of range"}), 404
        scene = scenes[index]
        if not scene.svg_content:
            return jsonify({"error": "scene has no SVG yet"}), 400

        if request.args.get("format") == "svg":
            return send_file(
                io.BytesIO(scene.svg_content.encode("utf-8")),
                mimetype="image/svg+xml",
                as_attachment=True,
                download_name=svg_filename_for_scene(index),
            )
        return jsonify({"code": build_scene_component(scene, index)})

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({"status": "ok"})

    return app
