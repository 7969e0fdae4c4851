"""Service layer helpers for external integrations."""

from .cache import CacheKeys, get_cache
from .metrics_client import MetricsServiceError, RemoteMetricsAnalyzer
from .retry import RetryPolicy
from .storage import S3AudioStore, StorageError
from .tip_generator import BedrockTipGenerator, TipParseError
from .transcribe import TranscribeService, TranscriptionError, build_transcribe_service

__all__ = [
    "BedrockTipGenerator",
    "CacheKeys",
    "MetricsServiceError",
    "RemoteMetricsAnalyzer",
    "RetryPolicy",
    "S3AudioStore",
    "StorageError",
    "TipParseError",
    "TranscribeService",
    "TranscriptionError",
    "build_transcribe_service",
    "get_cache",
]
