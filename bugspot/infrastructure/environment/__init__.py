"""
Host environment probes.
"""
from .system_probe import SystemEnvironmentProbe, default_user_agent

__all__ = ['SystemEnvironmentProbe', 'default_user_agent']
