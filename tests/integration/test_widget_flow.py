"""
Integration tests for the widget and CLI.

The HTTP layer is patched at ``requests.Session.post``; everything above it
(client, repository, fallback store, use case, widget) is real.
"""
import json
import logging
import re
from unittest.mock import Mock, patch

import pytest
import requests
from PIL import Image

from bugspot.cli import main
from bugspot.config import WidgetConfig
from bugspot.domain.bug_report import Severity
from bugspot.infrastructure.memory import InMemoryBugReportRepository
from bugspot.widget import BugSpotWidget
from tests.fakes import FakeProbe


def _ok_response(body):
    response = Mock()
    response.status_code = 200
    response.json.return_value = body
    return response


@pytest.fixture
def widget_factory(tmp_path):
    created = []

    def build(**config_overrides):
        options = dict(api_key="proj_key", storage_dir=str(tmp_path))
        options.update(config_overrides)
        widget = BugSpotWidget(
            WidgetConfig(**options),
            probe=FakeProbe(),
            rasterizer=lambda: Image.new("RGB", (2560, 1440), "white"),
        )
        created.append(widget)
        return widget

    yield build
    for widget in created:
        widget.close()


class TestWidgetSubmission:
    """Widget submit against a patched API."""

    def test_accepted_by_api(self, widget_factory):
        """Test accepted by api."""
        widget = widget_factory()

        with patch("requests.Session.post", return_value=_ok_response({"id": "rep_9"})) as post:
            result = widget.submit("Checkout broken", "Pay does nothing", severity=Severity.HIGH)

        assert result.success
        assert result.id == "rep_9"
        url = post.call_args[0][0]
        assert url == "https://api.bugspot.dev/api/bug-reports/submit"
        assert post.call_args[1]["headers"]["X-API-Key"] == "proj_key"
        assert post.call_args[1]["timeout"] == 10.0
        payload = post.call_args[1]["json"]
        assert payload["severity"] == "high"
        assert payload["url"] == "https://shop.example.com/cart"
        assert widget.pending.list_pending() == []

    def test_timeout_saves_pending_record(self, widget_factory):
        """Test timeout saves pending record."""
        widget = widget_factory()

        with patch("requests.Session.post", side_effect=requests.Timeout("timed out")):
            result = widget.submit("Search empty", "No results for 'shoes'", capture_screenshot=True)

        assert result.success
        assert result.stored_locally
        assert re.fullmatch(r"local_\d+", result.id)
        pending = widget.pending.list_pending()
        assert len(pending) == 1
        assert pending[0]["id"] == result.id
        assert pending[0]["screenshot"].startswith("data:image/jpeg;base64,")
        assert widget.last_capture.width * widget.last_capture.height <= 1920 * 1080

    def test_unauthorized_not_saved(self, widget_factory):
        """Test unauthorized not saved."""
        widget = widget_factory(api_key="wrong")
        response = requests.Response()
        response.status_code = 401
        response._content = b'{"error": "Invalid API key"}'
        error = requests.HTTPError("401", response=response)

        with patch("requests.Session.post", side_effect=error):
            result = widget.submit("t", "d")

        assert not result.success
        assert result.error == "Invalid API key"
        assert widget.pending.list_pending() == []

    def test_not_modified_status_saves_pending_record(self, widget_factory):
        """Test not modified status saves pending record."""
        widget = widget_factory()
        response = requests.Response()
        response.status_code = 304
        response._content = b""

        with patch("requests.Session.post", return_value=response):
            result = widget.submit("Stale cart", "Cart total not refreshed")

        assert result.success
        assert result.stored_locally
        assert [r["id"] for r in widget.pending.list_pending()] == [result.id]

    def test_validation_failure_logged(self, widget_factory, caplog):
        """Test validation failure logged."""
        widget = widget_factory()

        with patch("requests.Session.post") as post, caplog.at_level(logging.ERROR, logger="bugspot"):
            result = widget.submit("", "d")

        assert result.error == "Title is required"
        post.assert_not_called()
        assert "bug_report_failed" in caplog.text

    def test_context_attached_when_enabled(self, widget_factory):
        """Test context attached when enabled."""
        widget = widget_factory(collect_context=True)
        widget.collector.record_request("https://shop.example.com/api/pay", method="POST", status=502)

        with patch("requests.Session.post", side_effect=requests.ConnectionError()):
            result = widget.submit("Pay fails", "Gateway error")

        record = widget.pending.get(result.id)
        assert record["context"]["network"][0]["status"] == 502

    def test_screenshots_disabled(self, widget_factory):
        """Test screenshots disabled."""
        widget = widget_factory(enable_screenshot=False)

        assert widget.take_screenshot() is None

    def test_preview_dropped_when_disabled(self, widget_factory):
        """Test preview dropped when disabled."""
        widget = widget_factory(show_preview=False)

        capture = widget.take_screenshot()

        assert capture.preview is None
        assert capture.data_url.startswith("data:image/jpeg;base64,")

    def test_capture_callbacks_run_around_capture(self):
        """Test capture callbacks run around capture."""
        calls = []
        widget = BugSpotWidget(
            WidgetConfig(storage="memory", backend="memory"),
            probe=FakeProbe(),
            rasterizer=lambda: calls.append("capture") or Image.new("RGB", (10, 10)),
            before_capture=lambda: calls.append("hide"),
            after_capture=lambda: calls.append("show"),
        )
        try:
            widget.take_screenshot()
        finally:
            widget.close()

        assert calls == ["hide", "capture", "show"]

    def test_memory_backend(self):
        """Test memory backend."""
        widget = BugSpotWidget(WidgetConfig(backend="memory", storage="memory"), probe=FakeProbe())
        try:
            result = widget.submit("t", "d", tags=["demo"])
        finally:
            widget.close()

        assert isinstance(widget.repository, InMemoryBugReportRepository)
        assert widget.repository.get(result.id).tags == ("demo",)


class TestCli:
    """CLI commands over a temporary storage directory."""

    @pytest.fixture(autouse=True)
    def isolated(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("BUGSPOT_BACKEND", raising=False)
        monkeypatch.delenv("BUGSPOT_STORAGE", raising=False)
        self.storage_dir = str(tmp_path / "store")
        yield
        # main() attaches handlers bound to the captured stderr
        bugspot_logger = logging.getLogger("bugspot")
        bugspot_logger.handlers = []
        bugspot_logger.setLevel(logging.NOTSET)

    def test_submit_falls_back_then_pending_lists(self, capsys):
        """Test submit falls back then pending lists."""
        with patch("requests.Session.post", side_effect=requests.ConnectionError("refused")):
            code = main(["--storage-dir", self.storage_dir, "submit",
                         "-t", "Login loops", "-d", "Redirects forever",
                         "--api-key", "proj_key", "--json"])

        assert code == 0
        result = json.loads(capsys.readouterr().out)
        assert result["success"] is True
        assert result["id"].startswith("local_")

        assert main(["--storage-dir", self.storage_dir, "pending", "list"]) == 0
        listing = capsys.readouterr().out
        assert result["id"] in listing
        assert "Login loops" in listing

        assert main(["--storage-dir", self.storage_dir, "pending", "export"]) == 0
        exported = json.loads(capsys.readouterr().out)
        assert exported[0]["status"] == "pending"

        assert main(["--storage-dir", self.storage_dir, "pending", "delete", result["id"]]) == 0
        capsys.readouterr()
        assert main(["--storage-dir", self.storage_dir, "pending", "list"]) == 0
        assert "No pending reports." in capsys.readouterr().out

    def test_submit_without_key_fails(self, capsys, monkeypatch):
        """Test submit without key fails."""
        monkeypatch.delenv("BUGSPOT_API_KEY", raising=False)

        code = main(["--storage-dir", self.storage_dir, "submit", "-t", "t", "-d", "d"])

        assert code == 1
        assert "API key is required" in capsys.readouterr().err

    def test_pending_clear(self, capsys):
        """Test pending clear."""
        assert main(["--storage-dir", self.storage_dir, "pending", "clear"]) == 0
        assert "Removed 0 pending report(s)." in capsys.readouterr().out

    def test_no_command_prints_help(self, capsys):
        """Test no command prints help."""
        assert main([]) == 1
        assert "usage:" in capsys.readouterr().out
