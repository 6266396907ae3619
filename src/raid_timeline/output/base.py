"""Providers that turn rendered mechanic frames into an animated file."""

import logging
from abc import ABC, abstractmethod
from io import BytesIO
from pathlib import Path
from typing import Any, ClassVar, Iterable

from PIL import Image

logger = logging.getLogger(__name__)


class OutputProvider(ABC):
    """Encodes a frame sequence and writes it to ``path``."""

    def __init__(self, path: str = "", loop: int = 0):
        """
        Args:
            path: Destination file; may be empty when only bytes are needed
            loop: Playback repetitions, 0 repeats forever
        """
        self.path = path
        self.loop = loop

    @abstractmethod
    def encode(self, frames: Iterable[Image.Image], frame_duration: int) -> bytes:
        """
        Encode rendered frames in playback order.

        Args:
            frames: Rendered RGB frames
            frame_duration: Milliseconds each frame is shown

        Returns:
            The encoded animation, or ``b""`` for an empty sequence
        """
        raise NotImplementedError

    def write(self, data: bytes) -> Path:
        if not self.path:
            raise ValueError("Output path not set")
        target = Path(self.path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        logger.debug("Wrote %d bytes to %s", len(data), target)
        return target


class PillowSequenceOutputProvider(OutputProvider, ABC):
    """Animated formats written through ``Image.save(save_all=True)``."""

    pillow_format: ClassVar[str]
    save_options: ClassVar[dict[str, Any]] = {}

    def prepare(self, frame: Image.Image) -> Image.Image:
        """Convert one rendered frame to the mode stored by the format."""
        return frame

    def encode(self, frames: Iterable[Image.Image], frame_duration: int) -> bytes:
        prepared = [self.prepare(frame) for frame in frames]
        if not prepared:
            return b""

        first, *rest = prepared
        buffer = BytesIO()
        first.save(
            buffer,
            format=self.pillow_format,
            save_all=True,
            append_images=rest,
            duration=frame_duration,
            loop=self.loop,
            **self.save_options,
        )
        logger.debug(
            "Encoded %d frames as %s at %d ms/frame", len(prepared), self.pillow_format, frame_duration
        )
        return buffer.getvalue()
