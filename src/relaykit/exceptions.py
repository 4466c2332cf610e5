# Custom exceptions for relaykit

from typing import Optional


class RelayKitError(Exception):
    """Base exception for all application-specific errors."""
    pass


class ParseError(RelayKitError):
    """Raised when a file cannot be parsed by tree-sitter."""
    def __init__(
        self,
        file_path: str,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        self.file_path = file_path
        self.message = message
        self.line = line
        self.column = column
        location = f" (line {line}, column {column})" if line is not None else ""
        super().__init__(f"Failed to parse {file_path}{location}: {message}")


class AnchorNotFound(RelayKitError):
    """Raised when a file does not contain the expected integration point."""
    def __init__(self, expected_shape: str, file_path: str):
        self.expected_shape = expected_shape
        self.file_path = file_path
        super().__init__(f"Expected to find {expected_shape} in {file_path}.")


class UnsupportedShape(RelayKitError):
    """Raised when the integration point exists but has an unrecognized form."""
    def __init__(self, expected_shape: str, file_path: str, detail: str = ""):
        self.expected_shape = expected_shape
        self.file_path = file_path
        self.detail = detail
        message = f"Expected {expected_shape} in {file_path}."
        if detail:
            message += f" {detail}"
        super().__init__(message)


class FileAccessError(RelayKitError):
    """Raised when reading, writing or creating a path fails."""
    def __init__(self, path: str, message: str):
        self.path = path
        self.message = message
        super().__init__(f"{message}: {path}")


class ConfigError(RelayKitError):
    """Raised for configuration-related problems."""
    pass
