"""Local browser editor and store API for publisher configurations."""

from pubconfig.ui.server import UIServerConfig, build_ui_url, create_ui_server, start_ui_server, status_for_error

__all__ = [
    "UIServerConfig",
    "build_ui_url",
    "create_ui_server",
    "start_ui_server",
    "status_for_error",
]
