"""declguard custom exceptions."""


class DeclGuardError(Exception):
    """Base exception for declguard runtime errors."""


class ConfigurationError(DeclGuardError):
    """Raised when the pattern or suffix configuration is invalid."""

    def __init__(self, message: str, file_path: str | None = None):
        self.file_path = file_path
        if file_path:
            message = f"{file_path}: {message}"
        super().__init__(message)


class MalformedDeclarationError(DeclGuardError):
    """Raised when the host hands over a declaration without a usable name or kind."""


class ManifestError(DeclGuardError):
    """Raised when a declaration manifest cannot be read or has the wrong shape."""
