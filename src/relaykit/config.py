"""
Configuration for relaykit.

Package names, default file locations per toolchain, grammar selection and
the environment-driven settings used when rendering new code.

Environment Variables:
    RELAYKIT_HTTP_ENDPOINT: GraphQL HTTP endpoint written into the environment file
    RELAYKIT_WEBSOCKET_ENDPOINT: GraphQL websocket endpoint (subscriptions only)
    RELAYKIT_MAX_LINE_WIDTH: Width above which inserted literals are split over lines (default: 80)
    RELAYKIT_DEFAULT_INDENT: Indent width used when a file gives no hint (default: 2)
"""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


REACT_RELAY_PACKAGE = "react-relay"
RELAY_RUNTIME_PACKAGE = "relay-runtime"
VITE_RELAY_PACKAGE = "vite-plugin-relay"
GRAPHQL_WS_PACKAGE = "graphql-ws"

VITE_CONFIG_FILE_NO_EXT = "vite.config"
NEXTJS_CONFIG_FILE = "next.config.js"
VITE_CONFIG_FACTORY = "defineConfig"
VITE_PLUGINS_PROPERTY = "plugins"
VITE_RELAY_IMPORT_NAME = "relay"
NEXTJS_EXPORT_NAME = "module.exports"
NEXTJS_COMPILER_PROPERTY = "compiler"
NEXTJS_RELAY_PROPERTY = "relay"

RELAY_ENV_FILE_NO_EXT = "src/RelayEnvironment"
SCHEMA_FILE_NAME = "schema.graphql"

RELAY_ENV_PROVIDER = "RelayEnvironmentProvider"
RELAY_ENV = "RelayEnvironment"
RELAY_ENV_INIT = "initRelayEnvironment"
RELAY_ENV_ATTRIBUTE = "environment"
RENDER_METHOD = "render"

# Main entry file per toolchain, without extension.
MAIN_FILE_NO_EXT = {
    "vite": "src/main",
    "cra": "src/index",
    "next": "pages/_app",
}

# Extension of the main entry file per toolchain and language variant.
MAIN_FILE_EXT = {
    ("vite", True): ".tsx",
    ("vite", False): ".jsx",
    ("cra", True): ".tsx",
    ("cra", False): ".js",
    ("next", True): ".tsx",
    ("next", False): ".js",
}

# Mapping of file extensions to tree-sitter grammar names
GRAMMARS = {
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
}

DEFAULT_HTTP_ENDPOINT = "http://localhost:5000/graphql"
DEFAULT_WEBSOCKET_ENDPOINT = "ws://localhost:5000/graphql"
DEFAULT_MAX_LINE_WIDTH = 80
DEFAULT_INDENT_WIDTH = 2


def _env_int(key: str, default: int) -> int:
    """Read integer from environment variable."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


@dataclass
class RelayKitSettings:
    """Settings loaded from RELAYKIT_* environment variables."""

    http_endpoint: str = field(default_factory=lambda: os.getenv(
        "RELAYKIT_HTTP_ENDPOINT", DEFAULT_HTTP_ENDPOINT
    ))
    websocket_endpoint: str = field(default_factory=lambda: os.getenv(
        "RELAYKIT_WEBSOCKET_ENDPOINT", DEFAULT_WEBSOCKET_ENDPOINT
    ))
    max_line_width: int = field(default_factory=lambda: _env_int(
        "RELAYKIT_MAX_LINE_WIDTH", DEFAULT_MAX_LINE_WIDTH
    ))
    default_indent_width: int = field(default_factory=lambda: _env_int(
        "RELAYKIT_DEFAULT_INDENT", DEFAULT_INDENT_WIDTH
    ))

    @property
    def default_indent(self) -> str:
        return " " * max(self.default_indent_width, 1)

    def to_dict(self) -> Dict[str, Any]:
        """Export settings as dictionary."""
        return {
            "http_endpoint": self.http_endpoint,
            "websocket_endpoint": self.websocket_endpoint,
            "max_line_width": self.max_line_width,
            "default_indent_width": self.default_indent_width,
        }


_settings: Optional[RelayKitSettings] = None


def get_settings() -> RelayKitSettings:
    """Get the settings singleton, loading it from the environment on first use."""
    global _settings
    if _settings is None:
        _settings = RelayKitSettings()
    return _settings


def reset_settings() -> None:
    """Reset the settings singleton (for testing)."""
    global _settings
    _settings = None
