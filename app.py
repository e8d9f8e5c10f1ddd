import logging

from svg_app.config import Settings
from svg_app.server import create_app

settings = Settings()
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
app = create_app(settings)

if __name__ == "__main__":
    app.run(host="0.0.0.0", port=settings.port, debug=True)
