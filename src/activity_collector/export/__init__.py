"""Export envelope for aggregated datasets."""

from activity_collector.export.assembler import (
    EXPORT_SCHEMA_VERSION,
    ExportedDataset,
    build_export,
    compute_data_hash,
    is_export_fresh,
)

__all__ = [
    "EXPORT_SCHEMA_VERSION",
    "ExportedDataset",
    "build_export",
    "compute_data_hash",
    "is_export_fresh",
]
