from .dates import NormalizedDate, normalize_date, parse_listing_date
from .fields import (
    FieldExtractor,
    FieldKind,
    FieldStatus,
    FieldValue,
    PriceBand,
    compile_patterns,
    extract_image_urls,
    humanize_slug,
)

__all__ = [
    "FieldExtractor",
    "FieldKind",
    "FieldStatus",
    "FieldValue",
    "NormalizedDate",
    "PriceBand",
    "compile_patterns",
    "extract_image_urls",
    "humanize_slug",
    "normalize_date",
    "parse_listing_date",
]
