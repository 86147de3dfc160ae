"""Custom exceptions for jrekit."""


class JrekitError(Exception):
    """Base exception for all jrekit errors."""


class NoArtifactsError(JrekitError):
    """Raised when no JAR files can be found for the requested input."""


class UnknownPlatformError(JrekitError):
    """Raised when a platform key does not match any supported target."""

    def __init__(self, key: str, available: list[str]):
        self.key = key
        self.available = available
        super().__init__(f"Unknown platform: {key} (available: {', '.join(available)})")


class UnsupportedVersionError(JrekitError):
    """Raised when no release is known for the requested JDK version."""


class ToolNotFoundError(JrekitError):
    """Raised when jdeps or jlink cannot be located."""


class DownloadError(JrekitError):
    """Raised when an archive download fails or returns a non-200 status."""


class ExtractionError(JrekitError):
    """Raised when an archive cannot be unpacked or has an unrecognized layout."""


class LinkError(JrekitError):
    """Raised when jlink fails or produces an unusable image."""


class PackageError(JrekitError):
    """Raised when a portable package cannot be assembled."""
