"""Animated export formats and the providers that encode them."""

from dataclasses import dataclass
from pathlib import Path

from .base import OutputProvider
from .gif_provider import GifOutputProvider
from .webp_provider import WebPOutputProvider


@dataclass(frozen=True)
class OutputFormatSpec:
    name: str
    media_type: str
    provider_class: type[OutputProvider]

    @property
    def extension(self) -> str:
        return f".{self.name}"


_OUTPUT_FORMATS = {
    spec.name: spec
    for spec in (
        OutputFormatSpec("gif", "image/gif", GifOutputProvider),
        OutputFormatSpec("webp", "image/webp", WebPOutputProvider),
    )
}


def supported_output_formats() -> tuple[str, ...]:
    return tuple(_OUTPUT_FORMATS)


def format_for_path(file_path: str) -> OutputFormatSpec:
    """
    Look up the export format named by a file's extension (case-insensitive).

    Raises:
        ValueError: If the extension is missing or not a supported format
    """
    suffix = Path(file_path).suffix.lower()
    spec = _OUTPUT_FORMATS.get(suffix[1:])
    if spec is None:
        extensions = ", ".join(known.extension for known in _OUTPUT_FORMATS.values())
        raise ValueError(
            f"Unsupported output format: {suffix or '(none)'}. Supported formats: {extensions}"
        )
    return spec


def format_by_name(output_format: str) -> OutputFormatSpec:
    spec = _OUTPUT_FORMATS.get(output_format.lower())
    if spec is None:
        raise ValueError(f"Invalid format. Choose from: {', '.join(_OUTPUT_FORMATS)}")
    return spec


def resolve_output_provider(file_path: str) -> OutputProvider:
    """Create the provider that encodes and writes ``file_path``."""
    return format_for_path(file_path).provider_class(file_path)


def media_type_for_output_format(output_format: str) -> str:
    return format_by_name(output_format).media_type


def output_path_for_format(output_format: str, base_name: str = "output") -> str:
    """File name for an export, e.g. a mechanic id plus the format's extension."""
    return base_name + format_by_name(output_format).extension


__all__ = [
    "OutputFormatSpec",
    "OutputProvider",
    "GifOutputProvider",
    "WebPOutputProvider",
    "format_by_name",
    "format_for_path",
    "resolve_output_provider",
    "supported_output_formats",
    "media_type_for_output_format",
    "output_path_for_format",
]
