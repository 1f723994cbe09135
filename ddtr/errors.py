"""Exception types shared across the translation pipeline."""
from typing import Optional


class DdtrError(Exception):
    """Base exception for all custom errors."""


class ConfigurationError(DdtrError):
    """Raised when the configuration file is missing, malformed or inconsistent."""


class UnknownLanguageError(ConfigurationError):
    """Raised when a language code is not part of the supported set."""

    def __init__(self, code: str):
        super().__init__(f"Unknown language code: '{code}'")
        self.code = code


class OutputDirectoryError(ConfigurationError):
    """Raised when the output directory does not exist or is not a directory."""

    def __init__(self, path: str):
        super().__init__(f"Output directory does not exist: '{path}'")
        self.path = path


class BaiduApiError(DdtrError):
    """Raised when the translation service returns an error or cannot be reached."""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.code = code

    def __str__(self) -> str:
        message = super().__str__()
        if self.code:
            return f"[{self.code}] {message}"
        return message
