"""Environment probe backed by the Python runtime and host-supplied view data."""
import locale
import os
import platform
from threading import Lock
from typing import Optional, Tuple

from bugspot import __version__
from bugspot.domain.context import ViewState
from bugspot.interfaces.environment import IEnvironmentProbe


def default_user_agent(app_name: Optional[str] = None) -> str:
    """Build a browser-style user agent string for the running interpreter."""
    system = platform.system() or "Unknown"
    release = platform.release()
    os_part = f"{system} {release}".strip()
    agent = f"bugspot-python/{__version__} ({os_part}; Python {platform.python_version()})"
    if app_name:
        agent = f"{app_name} {agent}"
    return agent


def detect_language() -> Optional[str]:
    """Negotiated language as a BCP 47 tag (``en-US``), or None if unknown."""
    lang = None
    try:
        lang = locale.getlocale()[0]
    except ValueError:
        lang = None
    if not lang:
        lang = os.environ.get("LC_ALL") or os.environ.get("LANG")
    if not lang or lang in ("C", "POSIX"):
        return None
    lang = lang.split(".", 1)[0]
    return lang.replace("_", "-")


def detect_platform() -> Optional[str]:
    parts = [platform.system(), platform.machine()]
    value = " ".join(p for p in parts if p)
    return value or None


class SystemEnvironmentProbe(IEnvironmentProbe):
    """Probe for a Python-hosted application.

    Static facts (user agent, language, platform) are read once at
    construction. The host pushes its location, window size and view state
    through :meth:`navigate`, :meth:`resize` and :meth:`update_view`.
    """

    def __init__(
        self,
        url: str = "",
        app_name: Optional[str] = None,
        viewport: Optional[Tuple[int, int]] = None,
        screen: Optional[Tuple[int, int]] = None,
        user_agent: Optional[str] = None,
    ):
        self._lock = Lock()
        self._user_agent = user_agent or default_user_agent(app_name)
        self._language = detect_language()
        self._platform = detect_platform()
        self._url = url
        self._referrer: Optional[str] = None
        self._viewport = viewport
        self._screen = screen or viewport
        self._view_state: Optional[ViewState] = None

    def navigate(self, url: str) -> None:
        """Move to a new location; the previous one becomes the referrer."""
        with self._lock:
            self._referrer = self._url or None
            self._url = url

    def resize(
        self,
        viewport: Tuple[int, int],
        screen: Optional[Tuple[int, int]] = None
    ) -> None:
        with self._lock:
            self._viewport = viewport
            if screen is not None:
                self._screen = screen
            elif self._screen is None:
                self._screen = viewport

    def update_view(
        self,
        active_element: Optional[str] = None,
        focused_element: Optional[str] = None,
        scroll_position: Tuple[int, int] = (0, 0)
    ) -> None:
        with self._lock:
            self._view_state = ViewState(
                active_element=active_element,
                focused_element=focused_element,
                scroll_position=scroll_position,
            )

    def user_agent(self) -> str:
        return self._user_agent

    def url(self) -> str:
        return self._url

    def referrer(self) -> Optional[str]:
        return self._referrer

    def viewport_size(self) -> Optional[Tuple[int, int]]:
        return self._viewport

    def screen_size(self) -> Optional[Tuple[int, int]]:
        return self._screen

    def language(self) -> Optional[str]:
        return self._language

    def platform(self) -> Optional[str]:
        return self._platform

    def view_state(self) -> Optional[ViewState]:
        return self._view_state
