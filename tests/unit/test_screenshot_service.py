"""Tests for ScreenshotService."""
import io
from unittest.mock import Mock, patch

import pytest
from PIL import Image

from bugspot.services.screenshot_service import (
    PLACEHOLDER_SIZE,
    STATIC_PLACEHOLDER,
    ScreenshotOptions,
    ScreenshotService,
    calculate_optimal_dimensions,
    calculate_optimal_scale,
    decode_data_url,
)
from tests.fakes import FakeProbe, fixed_clock


def _open(data_url: str) -> Image.Image:
    return Image.open(io.BytesIO(decode_data_url(data_url)))


def _rasterizer(width: int, height: int):
    return lambda: Image.new("RGB", (width, height), "#3366cc")


class TestScaling:
    """Tests for scale and dimension helpers."""

    def test_scale_is_one_within_budget(self):
        """Test scale is one within budget."""
        assert calculate_optimal_scale(1280, 720, 1920, 1080) == 1.0

    def test_scale_shrinks_to_pixel_budget(self):
        """Test scale shrinks to pixel budget."""
        scale = calculate_optimal_scale(3840, 2160, 1920, 1080)
        assert scale == pytest.approx(0.5)

    def test_dimensions_never_upscale(self):
        """Test dimensions never upscale."""
        assert calculate_optimal_dimensions(800, 600, 1920, 1080) == (800, 600)

    def test_dimensions_fit_box_keeping_aspect(self):
        """Test dimensions fit box keeping aspect."""
        assert calculate_optimal_dimensions(3840, 500, 1920, 1080) == (1920, 250)


class TestCapture:
    """Tests for capture and capture_with_preview."""

    @pytest.mark.parametrize("size", [(3840, 2160), (2560, 1600), (5000, 1200)])
    def test_large_viewport_scaled_down_uniformly(self, size):
        """Test large viewport scaled down uniformly."""
        width, height = size
        service = ScreenshotService(FakeProbe(), rasterizer=_rasterizer(width, height))

        capture = service.capture_with_preview()
        image = _open(capture.data_url)

        assert not capture.is_placeholder
        assert image.width < width
        assert image.height < height
        assert image.width / image.height == pytest.approx(width / height, rel=0.01)
        assert image.width * image.height <= 1920 * 1080

    def test_small_viewport_kept_as_is(self):
        """Test small viewport kept as is."""
        service = ScreenshotService(FakeProbe(), rasterizer=_rasterizer(800, 600))

        image = _open(service.capture())

        assert image.size == (800, 600)

    def test_full_image_is_jpeg(self):
        """Test full image is jpeg."""
        service = ScreenshotService(FakeProbe(), rasterizer=_rasterizer(640, 480))

        data_url = service.capture()

        assert data_url.startswith("data:image/jpeg;base64,")
        assert _open(data_url).format == "JPEG"

    def test_rgba_capture_is_converted(self):
        """Test rgba capture is converted."""
        service = ScreenshotService(
            FakeProbe(), rasterizer=lambda: Image.new("RGBA", (300, 200), (0, 0, 0, 0))
        )

        capture = service.capture_with_preview()

        assert not capture.is_placeholder
        assert _open(capture.data_url).mode == "RGB"

    def test_preview_is_fixed_square(self):
        """Test preview is fixed square."""
        service = ScreenshotService(FakeProbe(), rasterizer=_rasterizer(1600, 900))

        preview = _open(service.capture_with_preview().preview)

        assert preview.size == (200, 200)

    def test_custom_options(self):
        """Test custom options."""
        options = ScreenshotOptions(max_width=800, max_height=600, preview_size=64, format="png")
        service = ScreenshotService(FakeProbe(), rasterizer=_rasterizer(1600, 1200), options=options)

        capture = service.capture_with_preview()

        assert capture.data_url.startswith("data:image/png;base64,")
        assert (capture.width, capture.height) == (800, 600)
        assert _open(capture.preview).size == (64, 64)


class TestPlaceholder:
    """Tests for the placeholder fallback."""

    def _failing(self):
        raise OSError("X connection failed")

    def test_failure_returns_placeholder_with_url_and_time(self):
        """Test failure returns placeholder with url and time."""
        url = "https://shop.example.com/cart"
        service = ScreenshotService(FakeProbe(url=url), rasterizer=self._failing, clock=fixed_clock)

        data_url = service.capture()
        raw = decode_data_url(data_url)

        assert data_url.startswith("data:image/png;base64,")
        assert url.encode() in raw
        assert b"2024-05-01T09:30:00.125Z" in raw

    def test_placeholder_image_metadata(self):
        """Test placeholder image metadata."""
        url = "https://shop.example.com/cart"
        service = ScreenshotService(FakeProbe(url=url), rasterizer=self._failing, clock=fixed_clock)

        capture = service.capture_with_preview()
        image = _open(capture.data_url)

        assert capture.is_placeholder
        assert capture.preview == capture.data_url
        assert image.size == PLACEHOLDER_SIZE
        assert image.info["Source-URL"] == url
        assert image.info["Capture-Time"] == "2024-05-01T09:30:00.125Z"

    def test_non_image_result_falls_back(self):
        """Test non image result falls back."""
        service = ScreenshotService(FakeProbe(), rasterizer=lambda: None)

        assert service.capture_with_preview().is_placeholder

    def test_placeholder_without_probe(self):
        """Test placeholder without probe."""
        service = ScreenshotService(rasterizer=self._failing)

        assert b"unknown" in decode_data_url(service.capture())

    def test_environment_failure_uses_static_placeholder(self):
        """Test environment failure uses static placeholder."""
        probe = Mock(spec=FakeProbe)
        probe.url.side_effect = RuntimeError("host window destroyed")
        service = ScreenshotService(probe, rasterizer=self._failing)

        capture = service.capture_with_preview()

        assert capture.is_placeholder
        assert capture.data_url == STATIC_PLACEHOLDER
        assert (capture.width, capture.height) == (1, 1)
        assert service.capture() == STATIC_PLACEHOLDER

    def test_drawing_failure_uses_static_placeholder(self):
        """Test drawing failure uses static placeholder."""
        service = ScreenshotService(FakeProbe(), rasterizer=self._failing)

        with patch("bugspot.services.screenshot_service.ImageDraw.Draw",
                   side_effect=OSError("no font")):
            data_url = service.capture()

        assert data_url == STATIC_PLACEHOLDER
