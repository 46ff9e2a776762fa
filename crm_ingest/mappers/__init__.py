"""
crm_ingest/mappers package marker.
"""

from crm_ingest.mappers.record_shapes import (
    CUSTOMER_SHAPE,
    SENTIMENT_SHAPE,
    SHAPES,
    RecordShape,
    detect_shape,
)

__all__ = [
    "CUSTOMER_SHAPE",
    "SENTIMENT_SHAPE",
    "SHAPES",
    "RecordShape",
    "detect_shape",
]
