"""
app/mappers package marker.
"""

from app.mappers.row_normalizer import DEFAULT_FIELD_ALIASES, RowNormalizer, resolve_field
from app.mappers.value_coercion import coerce_count, coerce_iso_date, coerce_number

__all__ = [
    "DEFAULT_FIELD_ALIASES",
    "RowNormalizer",
    "resolve_field",
    "coerce_count",
    "coerce_iso_date",
    "coerce_number",
]
