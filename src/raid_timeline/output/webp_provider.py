"""WebP export."""

from PIL import Image

from .base import PillowSequenceOutputProvider


class WebPOutputProvider(PillowSequenceOutputProvider):
    """Lossy animated WebP, keeping translucent AoE fills smooth."""

    pillow_format = "webp"
    save_options = {"lossless": False, "quality": 90, "method": 4}

    def prepare(self, frame: Image.Image) -> Image.Image:
        return frame.convert("RGB")
