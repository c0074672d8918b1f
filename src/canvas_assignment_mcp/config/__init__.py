"""Configuration helpers for the Canvas Assignment MCP Server.

Exposes a single public function `load_config` that reads environment
variables and returns a typed `AppConfig` instance with sensible
defaults. Values are validated and normalized where appropriate.
"""

from .env import AppConfig, is_valid_canvas_domain, load_config

__all__ = ["AppConfig", "is_valid_canvas_domain", "load_config"]
