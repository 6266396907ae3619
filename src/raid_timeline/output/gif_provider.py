"""GIF export."""

from PIL import Image

from .base import PillowSequenceOutputProvider


class GifOutputProvider(PillowSequenceOutputProvider):
    """GIF with an adaptive 256-colour palette per frame."""

    pillow_format = "gif"
    # Every frame is stored in full.
    save_options = {"optimize": False, "disposal": 1}

    def prepare(self, frame: Image.Image) -> Image.Image:
        return frame.convert("RGB").convert("P", palette=Image.Palette.ADAPTIVE, colors=256)
