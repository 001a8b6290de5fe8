"""
Screenshot capture for bug reports.

Rasterization is delegated to Pillow (``ImageGrab.grab`` by default, or any
callable returning a ``PIL.Image.Image``). The capture is scaled down to a
pixel budget, compressed to JPEG and paired with a small preview. Any
failure yields a generated placeholder image instead of an exception.
"""
import base64
import io
import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Tuple

from PIL import Image, ImageDraw, ImageFont, ImageGrab
from PIL.PngImagePlugin import PngInfo

from bugspot.interfaces.environment import IEnvironmentProbe
from bugspot.interfaces.screenshot import IScreenshotService, ScreenshotCapture
from .clock import iso_timestamp, utc_now

logger = logging.getLogger(__name__)

Rasterizer = Callable[[], Image.Image]

PLACEHOLDER_SIZE = (400, 300)
PLACEHOLDER_BACKGROUND = "#f3f4f6"
PLACEHOLDER_TEXT_COLOR = "#374151"

# 1x1 PNG used when the placeholder itself cannot be drawn
STATIC_PLACEHOLDER = (
    "data:image/png;base64,"
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="
)

_FORMATS = {
    "jpeg": ("JPEG", "image/jpeg"),
    "jpg": ("JPEG", "image/jpeg"),
    "png": ("PNG", "image/png"),
    "webp": ("WEBP", "image/webp"),
}


@dataclass(frozen=True)
class ScreenshotOptions:
    """Compression and size limits. Qualities are 0..1 like canvas.toDataURL."""
    quality: float = 0.7
    max_width: int = 1920
    max_height: int = 1080
    format: str = "jpeg"
    preview_size: int = 200
    preview_quality: float = 0.8


def grab_screen() -> Image.Image:
    """Default rasterizer: the primary screen via Pillow."""
    return ImageGrab.grab()


def calculate_optimal_scale(
    width: int,
    height: int,
    max_width: int,
    max_height: int
) -> float:
    """Uniform factor that keeps ``width * height`` within the pixel budget.

    Returns 1 when the image already fits; never scales up.
    """
    pixels = width * height
    budget = max_width * max_height
    if pixels <= budget:
        return 1.0
    return math.sqrt(budget / pixels)


def calculate_optimal_dimensions(
    width: int,
    height: int,
    max_width: int,
    max_height: int
) -> Tuple[int, int]:
    """Fit ``width x height`` inside the max box, preserving aspect ratio."""
    if width <= max_width and height <= max_height:
        return width, height
    factor = min(max_width / width, max_height / height)
    return max(1, round(width * factor)), max(1, round(height * factor))


def encode_data_url(image: Image.Image, fmt: str = "jpeg", quality: float = 0.7) -> str:
    """Encode a Pillow image as a base64 data URL."""
    save_format, mime_type = _FORMATS.get(fmt.lower(), _FORMATS["png"])
    working = image
    if save_format == "JPEG" and image.mode not in ("RGB", "L"):
        working = image.convert("RGB")
    save_kwargs = {}
    if save_format in ("JPEG", "WEBP"):
        save_kwargs["quality"] = max(1, min(100, int(round(quality * 100))))
    if save_format == "JPEG":
        save_kwargs["optimize"] = True
    out = io.BytesIO()
    working.save(out, format=save_format, **save_kwargs)
    encoded = base64.b64encode(out.getvalue()).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def decode_data_url(data_url: str) -> bytes:
    """Return the raw payload bytes of a base64 data URL."""
    _, _, payload = data_url.partition(",")
    return base64.b64decode(payload)


class ScreenshotService(IScreenshotService):
    """Pillow-backed screenshot service with placeholder fallback."""

    def __init__(
        self,
        probe: Optional[IEnvironmentProbe] = None,
        rasterizer: Optional[Rasterizer] = None,
        options: Optional[ScreenshotOptions] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """Initialize the service.

        Args:
            probe: Environment probe; its URL is printed on placeholders
            rasterizer: Returns the current view as an image (default: screen grab)
            options: Compression and size limits
            clock: Returns the current UTC datetime
        """
        self._probe = probe
        self._rasterizer = rasterizer or grab_screen
        self._options = options or ScreenshotOptions()
        self._clock = clock or utc_now

    @property
    def options(self) -> ScreenshotOptions:
        return self._options

    def capture(self) -> str:
        return self.capture_with_preview().data_url

    def capture_with_preview(self) -> ScreenshotCapture:
        try:
            image = self._rasterizer()
            full = self.scale_to_budget(image)
            data_url = encode_data_url(full, self._options.format, self._options.quality)
            preview = encode_data_url(
                self.create_preview(full), "jpeg", self._options.preview_quality
            )
            return ScreenshotCapture(
                data_url=data_url,
                preview=preview,
                width=full.width,
                height=full.height,
            )
        except Exception as e:
            logger.warning("Screenshot capture failed, using placeholder: %s", e)
            fallback = self._safe_placeholder()
            width, height = (1, 1) if fallback == STATIC_PLACEHOLDER else PLACEHOLDER_SIZE
            return ScreenshotCapture(
                data_url=fallback,
                preview=fallback,
                width=width,
                height=height,
                is_placeholder=True,
            )

    def _safe_placeholder(self) -> str:
        try:
            return self.create_placeholder()
        except Exception as e:
            logger.error("Placeholder generation failed, using static image: %s", e)
            return STATIC_PLACEHOLDER

    def scale_to_budget(self, image: Image.Image) -> Image.Image:
        """Scale down uniformly to the pixel budget, then fit the max box."""
        opts = self._options
        width, height = image.size
        scale = calculate_optimal_scale(width, height, opts.max_width, opts.max_height)
        if scale < 1.0:
            width = max(1, int(width * scale))
            height = max(1, int(height * scale))
        width, height = calculate_optimal_dimensions(
            width, height, opts.max_width, opts.max_height
        )
        if (width, height) == image.size:
            return image
        return image.resize((width, height), Image.Resampling.LANCZOS)

    def create_preview(self, image: Image.Image) -> Image.Image:
        """Fit the image, centered, on a square preview canvas."""
        size = self._options.preview_size
        canvas = Image.new("RGB", (size, size), PLACEHOLDER_BACKGROUND)
        aspect = image.width / image.height
        if aspect > 1:
            draw_w, draw_h = size, max(1, round(size / aspect))
        else:
            draw_w, draw_h = max(1, round(size * aspect)), size
        thumb = image.convert("RGB").resize((draw_w, draw_h), Image.Resampling.LANCZOS)
        canvas.paste(thumb, ((size - draw_w) // 2, (size - draw_h) // 2))
        return canvas

    def create_placeholder(self) -> str:
        """Generate the fixed-size placeholder PNG as a data URL."""
        url = (self._probe.url() if self._probe is not None else "") or "unknown"
        stamp = iso_timestamp(self._clock())
        width, height = PLACEHOLDER_SIZE
        image = Image.new("RGB", PLACEHOLDER_SIZE, PLACEHOLDER_BACKGROUND)
        draw = ImageDraw.Draw(image)
        font = ImageFont.load_default()
        for text, center_y in (
            ("Screenshot captured", 150),
            (f"URL: {url}", 180),
            (f"Time: {stamp}", 210),
        ):
            # bitmap fallback font only covers latin-1
            text = text.encode("ascii", "replace").decode("ascii")
            left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
            x = (width - (right - left)) / 2
            y = center_y - (bottom - top) / 2
            draw.text((x, y), text, fill=PLACEHOLDER_TEXT_COLOR, font=font)

        meta = PngInfo()
        meta.add_text("Description", "Screenshot captured")
        meta.add_text("Source-URL", url)
        meta.add_text("Capture-Time", stamp)
        out = io.BytesIO()
        image.save(out, format="PNG", pnginfo=meta)
        encoded = base64.b64encode(out.getvalue()).decode("ascii")
        return f"data:image/png;base64,{encoded}"
