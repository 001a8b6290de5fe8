"""Tests for SystemEnvironmentProbe."""
from bugspot.infrastructure.environment.system_probe import (
    SystemEnvironmentProbe,
    default_user_agent,
)


class TestSystemEnvironmentProbe:
    """Test the runtime-backed probe."""

    def test_user_agent_names_app(self):
        """Test user agent names app."""
        agent = default_user_agent("Storefront/2.1")

        assert agent.startswith("Storefront/2.1 bugspot-python/")
        assert "Python" in agent

    def test_navigate_sets_referrer(self):
        """Test navigate sets referrer."""
        probe = SystemEnvironmentProbe(url="app://home")

        assert probe.referrer() is None
        probe.navigate("app://settings")

        assert probe.url() == "app://settings"
        assert probe.referrer() == "app://home"

    def test_resize_defaults_screen_to_viewport(self):
        """Test resize defaults screen to viewport."""
        probe = SystemEnvironmentProbe()

        probe.resize((1024, 768))

        assert probe.viewport_size() == (1024, 768)
        assert probe.screen_size() == (1024, 768)

    def test_update_view(self):
        """Test update view."""
        probe = SystemEnvironmentProbe()

        probe.update_view(active_element="QLineEdit#search", scroll_position=(0, 120))

        state = probe.view_state()
        assert state.active_element == "QLineEdit#search"
        assert state.scroll_position == (0, 120)

    def test_explicit_user_agent(self):
        """Test explicit user agent."""
        assert SystemEnvironmentProbe(user_agent="Custom/1.0").user_agent() == "Custom/1.0"
