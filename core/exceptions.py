"""Custom exceptions for the diagnostic report pipeline. No generic Exception usage."""

from __future__ import annotations


class DiagnosticReportError(Exception):
    """Base exception for hard parse failures."""

    def __init__(self, message: str, source: str | None = None) -> None:
        self.source = source or ""
        super().__init__(message)


class UnsupportedFormatError(DiagnosticReportError):
    """Declared report format is not one of TXT, XML, PDF."""

    def __init__(self, format_value: object, source: str | None = None) -> None:
        self.format_value = format_value
        super().__init__(f"Unsupported file type: {format_value}", source=source)


class SourceReadError(DiagnosticReportError):
    """Report source is missing, unreadable or empty."""

    pass


class InputTooLargeError(SourceReadError):
    """Report content exceeds the configured size cap."""

    pass


class ConfigError(DiagnosticReportError):
    """Invalid or missing configuration."""

    pass
