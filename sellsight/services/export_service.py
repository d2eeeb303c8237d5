"""
Product export in JSON or CSV form.
"""
import csv
import io
import json
from typing import Any, List, Sequence

from sellsight.schemas.product import Product

EXPORT_FORMATS = ("json", "csv")
LIST_SEPARATOR = "|"


def export_columns() -> List[str]:
    return [field.alias or name for name, field in Product.model_fields.items()]


def _csv_value(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, list):
        return LIST_SEPARATOR.join(
            json.dumps(item) if isinstance(item, dict) else str(item) for item in value
        )
    return value


def products_to_records(products: Sequence[Product]) -> List[dict]:
    return [product.model_dump(mode="json", by_alias=True) for product in products]


def products_to_csv(products: Sequence[Product]) -> str:
    """Header row of camelCase columns, then one row per product."""
    columns = export_columns()
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(columns)
    for record in products_to_records(products):
        writer.writerow([_csv_value(record.get(column)) for column in columns])
    return buffer.getvalue()
