"""Custom exceptions for the font detection and bundling system."""

from enum import Enum
from typing import Any

from pydantic import ValidationError as PydanticValidationError


class FontifyError(Exception):
    """Base exception for all fontify errors."""

    def __init__(self, message: str, details: Any | None = None):
        super().__init__(message)
        self.details = details


class ValidationError(FontifyError):
    """Exception raised for input validation errors."""


class ConfigurationError(FontifyError):
    """Exception raised for configuration errors."""


class CatalogError(FontifyError):
    """Exception raised for font catalog lookups."""


class DownloadError(FontifyError):
    """Exception raised when a font binary cannot be fetched."""


class BundleError(FontifyError):
    """Exception raised while materializing a production bundle."""


class OperationCancelledError(FontifyError):
    """Exception raised when a caller cancels a running operation."""

    def __init__(self, operation: str):
        super().__init__(f"Operation cancelled: {operation}")


# Specific exception classes for TRY003 compliance
class FontNotFoundError(CatalogError):
    """Exception raised when a family is absent from the catalog."""

    def __init__(self, family: str):
        super().__init__(f'Font "{family}" not found in the font catalog')
        self.family = family

class NoFontFilesError(CatalogError):
    """Exception raised when the catalog stylesheet lists no usable files."""

    def __init__(self, family: str):
        super().__init__(f'No font files found for "{family}"')

class CatalogUnavailableError(CatalogError):
    """Exception raised when the catalog endpoint cannot be reached."""

    def __init__(self, url: str, error: str):
        super().__init__(f"Font catalog request failed for {url}: {error}")

class DownloadFailedError(DownloadError):
    """Exception raised when no variant of a family could be downloaded."""

    def __init__(self, family: str):
        super().__init__(f'Failed to download any font files for "{family}"')

class UnsupportedVariantError(ValidationError):
    """Exception raised for variant labels that map to no numeric weight."""

    def __init__(self, variant: str):
        super().__init__(f"Unsupported font variant: {variant}")

class EmptyVariantsError(ValidationError):
    """Exception raised when a bundle requests no variants."""

    def __init__(self):
        super().__init__("At least one font variant is required")

class OutputDirectoryError(ValidationError):
    """Exception raised for output directories that are unsafe to write to."""

    def __init__(self, output_dir: str, reason: str):
        super().__init__(f"Invalid output directory '{output_dir}': {reason}")

class NoWorkspaceError(ValidationError):
    """Exception raised when the project root does not exist."""

    def __init__(self, project_root: str):
        super().__init__(f"Project root not found: {project_root}")

class NoFontsSelectedError(ValidationError):
    """Exception raised when a bundle or install is requested for no fonts."""

    def __init__(self):
        super().__init__("No fonts selected")

class BundleWriteError(BundleError):
    """Exception raised when a bundle artifact cannot be written."""

    def __init__(self, path: str, error: str):
        super().__init__(f"Failed to write {path}: {error}")

class ConfigFileNotFoundError(ConfigurationError):
    """Exception raised when configuration file is not found."""

    def __init__(self, config_path: str):
        super().__init__(f"Configuration file not found: {config_path}")

class EmptyConfigFileError(ConfigurationError):
    """Exception raised when configuration file is empty."""

    def __init__(self, config_path: str):
        super().__init__(f"Empty configuration file: {config_path}")

class InvalidYamlError(ConfigurationError):
    """Exception raised for invalid YAML content."""

    def __init__(self, config_path: str, error: str):
        super().__init__(f"Invalid YAML in {config_path}: {error}")

class ConfigLoadError(ConfigurationError):
    """Exception raised when configuration loading fails."""

    def __init__(self, error: str):
        super().__init__(f"Failed to load configuration: {error}")

class ErrorKind(str, Enum):
    """Failure categories surfaced to callers and mapped to exit codes."""

    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    NOT_FOUND = "not_found"
    NETWORK = "network"
    FILESYSTEM = "filesystem"
    CANCELLED = "cancelled"
    INTERNAL = "internal"

    @property
    def exit_code(self) -> int:
        return _EXIT_CODES[self]

_EXIT_CODES = {
    ErrorKind.INTERNAL: 1,
    ErrorKind.VALIDATION: 2,
    ErrorKind.CONFIGURATION: 3,
    ErrorKind.NOT_FOUND: 4,
    ErrorKind.NETWORK: 5,
    ErrorKind.FILESYSTEM: 6,
    ErrorKind.CANCELLED: 7,
}

def error_kind_for(error: BaseException) -> ErrorKind:
    """Classify an exception into the failure category reported to callers."""
    if isinstance(error, OperationCancelledError):
        return ErrorKind.CANCELLED
    if isinstance(error, ValidationError):
        return ErrorKind.VALIDATION
    if isinstance(error, PydanticValidationError):
        return ErrorKind.VALIDATION
    if isinstance(error, ConfigurationError):
        return ErrorKind.CONFIGURATION
    if isinstance(error, FontNotFoundError | NoFontFilesError):
        return ErrorKind.NOT_FOUND
    if isinstance(error, CatalogError | DownloadError):
        return ErrorKind.NETWORK
    if isinstance(error, BundleWriteError | OSError):
        return ErrorKind.FILESYSTEM
    return ErrorKind.INTERNAL
