"""Mock implementations for testing."""

from .submitters import FailingSubmitter, RecordingSubmitter

__all__ = [
    "FailingSubmitter",
    "RecordingSubmitter",
]
