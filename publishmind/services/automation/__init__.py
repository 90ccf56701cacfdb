"""Automation service dependency container."""

from .container import AutomationContainer, build_automation_container

__all__ = ["AutomationContainer", "build_automation_container"]
