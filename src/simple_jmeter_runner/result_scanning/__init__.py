"""Result scanning domain exports."""

from .error_scanner import ErrorScanner, ResultScanError, ScanResult, ScanSummary

__all__ = [
    "ErrorScanner",
    "ResultScanError",
    "ScanResult",
    "ScanSummary",
]
