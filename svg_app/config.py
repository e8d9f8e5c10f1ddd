import os


class Settings:
    def __init__(self):
        # Core keys
        self.google_api_key = os.getenv("GOOGLE_API_KEY")

        # LLM
        self.gemini_text_model = os.getenv("GEMINI_TEXT_MODEL", "gemini-3-flash-preview")

        # Uploads
        self.max_reference_image_bytes = int(
            os.getenv("MAX_REFERENCE_IMAGE_BYTES", str(5 * 1024 * 1024))
        )

        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        self.port = int(os.getenv("PORT", "5000"))

        if not self.google_api_key:
            raise RuntimeError("GOOGLE_API_KEY is required for Gemini SVG generation")
