"""
Renders a pangram sample of a font file to a PNG buffer.
"""

import io
from pathlib import Path

import httpx
from PIL import Image, ImageDraw, ImageFont

from fontcatalog.core.config import RenderSettings
from fontcatalog.core.exceptions import ExternalCallError
from fontcatalog.observability import metrics


class SampleRenderer:
    """
    Draws black sample text on a white canvas using the given font.

    Fonts are read from a local path or downloaded when given an
    http(s) URL.
    """

    def __init__(self, settings: RenderSettings | None = None, http_client: httpx.Client | None = None):
        """
        Initialize renderer.

        Args:
            settings: Canvas size, font size, margin and sample text
            http_client: Client used to download fonts given by URL
        """
        self.settings = settings or RenderSettings()
        self.http_client = http_client

    def render(self, font_source: str) -> bytes:
        """
        Render the sample text.

        Args:
            font_source: Path or URL of a .ttf/.otf file

        Returns:
            PNG image bytes

        Raises:
            ExternalCallError: If the font cannot be fetched or loaded
        """
        with metrics.track_duration(metrics.external_call_duration_seconds, operation="render"):
            font_bytes = self._load_font_bytes(font_source)

            try:
                font = ImageFont.truetype(io.BytesIO(font_bytes), self.settings.font_size)
            except OSError as e:
                metrics.record_external_failure("render")
                raise ExternalCallError("render", f"Cannot load font {font_source}: {e}") from e

            image = Image.new("RGB", (self.settings.width, self.settings.height), color="white")
            draw = ImageDraw.Draw(image)
            draw.multiline_text(
                (self.settings.margin, self.settings.margin),
                self.settings.sample_text,
                font=font,
                fill="black",
            )

            buffer = io.BytesIO()
            image.save(buffer, format="PNG")
            return buffer.getvalue()

    def _load_font_bytes(self, font_source: str) -> bytes:
        if font_source.startswith(("http://", "https://")):
            return self._download(font_source)

        try:
            return Path(font_source).read_bytes()
        except OSError as e:
            metrics.record_external_failure("render")
            raise ExternalCallError("render", f"Cannot read font file {font_source}: {e}") from e

    def _download(self, url: str) -> bytes:
        client = self.http_client or httpx.Client(timeout=60.0, follow_redirects=True)
        try:
            response = client.get(url)
            response.raise_for_status()
            return response.content
        except httpx.HTTPError as e:
            metrics.record_external_failure("render")
            raise ExternalCallError("render", f"Failed to download font {url}: {e}") from e
        finally:
            if client is not self.http_client:
                client.close()
