"""Adapters for the hosted data backend."""

from .artifact_store import LocalArtifactStore, SupabaseArtifactStore
from .client import BackendClient, eq, in_
from .documents import SupabaseDocumentSource, documents_for_meter
from .errors import BackendError
from .meters import SupabaseMeterDirectory
from .protocols import ArtifactStore, DocumentSource, MeterDirectory, ReconciliationSource
from .reconciliation import SupabaseReconciliationSource
from .storage_paths import chart_file_name, chart_storage_path, sanitize_name

__all__ = [
    "ArtifactStore",
    "BackendClient",
    "BackendError",
    "DocumentSource",
    "LocalArtifactStore",
    "MeterDirectory",
    "ReconciliationSource",
    "SupabaseArtifactStore",
    "SupabaseDocumentSource",
    "SupabaseMeterDirectory",
    "SupabaseReconciliationSource",
    "chart_file_name",
    "chart_storage_path",
    "documents_for_meter",
    "eq",
    "in_",
    "sanitize_name",
]
