import csv
import logging
from pathlib import Path

from openpyxl import load_workbook

from smartstock.services.ai_payload_service import coerce_extracted_products

logger = logging.getLogger(__name__)

_ALIAS_SPECS = (
    (("name",), "name"),
    (("nom",), "name"),
    (("product",), "name"),
    (("product", "name"), "name"),
    (("article",), "name"),
    (("designation",), "name"),
    (("désignation",), "name"),
    (("category",), "category"),
    (("categorie",), "category"),
    (("catégorie",), "category"),
    (("stock",), "current_stock"),
    (("qty",), "current_stock"),
    (("quantity",), "current_stock"),
    (("quantite",), "current_stock"),
    (("quantité",), "current_stock"),
    (("current", "stock"), "current_stock"),
    (("min",), "min_stock"),
    (("min", "stock"), "min_stock"),
    (("seuil",), "min_stock"),
    (("threshold",), "min_stock"),
    (("monthly",), "monthly_need"),
    (("monthly", "need"), "monthly_need"),
    (("besoin", "mensuel"), "monthly_need"),
    (("unit",), "unit"),
    (("unite",), "unit"),
    (("unité",), "unit"),
    (("price",), "unit_price"),
    (("prix",), "unit_price"),
    (("unit", "price"), "unit_price"),
    (("prix", "unit"), "unit_price"),
    (("currency",), "currency"),
    (("devise",), "currency"),
    (("supplier",), "supplier"),
    (("fournisseur",), "supplier"),
)

HEADER_ALIASES = {"".join(parts): target for parts, target in _ALIAS_SPECS}
REQUIRED_COLUMNS = {"name"}
SUPPORTED_SUFFIXES = (".xlsx", ".csv")


def _is_blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def _is_summary_value(value):
    return isinstance(value, str) and value.strip().lower().startswith("total")


def normalize_header(value):
    if value is None:
        return ""
    value_text = str(value).strip().lower()
    if not value_text:
        return ""
    for char in (" ", "-", ".", "/", "(", ")"):
        value_text = value_text.replace(char, "_")
    value_text = "_".join(part for part in value_text.split("_") if part)
    alias = HEADER_ALIASES.get(value_text.replace("_", ""))
    if alias:
        return alias
    return value_text


def rows_from_table(table):
    """Turn a header row followed by data rows into product dicts."""
    rows_iter = iter(table)
    headers = next(rows_iter, None)
    if not headers:
        return [], set()
    header_keys = [normalize_header(header) for header in headers]
    indices = [(idx, key) for idx, key in enumerate(header_keys) if key]
    columns = {key for _, key in indices}
    name_idx = header_keys.index("name") if "name" in header_keys else None

    rows = []
    for row in rows_iter:
        if row is None or all(_is_blank(value) for value in row):
            continue
        if name_idx is not None and name_idx < len(row):
            name_value = row[name_idx]
            if _is_blank(name_value) or _is_summary_value(name_value):
                continue
        rows.append({key: row[idx] for idx, key in indices if idx < len(row)})
    return rows, columns


def load_workbook_rows(path, sheet=None):
    workbook = load_workbook(path, data_only=True, read_only=True)
    try:
        worksheet = workbook[sheet] if sheet else workbook.worksheets[0]
        return rows_from_table(worksheet.iter_rows(values_only=True))
    finally:
        workbook.close()


def load_csv_rows(path):
    with open(path, newline="", encoding="utf-8-sig") as handle:
        sample = handle.read(4096)
        handle.seek(0)
        try:
            dialect = csv.Sniffer().sniff(sample, delimiters=",;\t")
        except csv.Error:
            dialect = csv.excel
        return rows_from_table(list(csv.reader(handle, dialect)))


def validate_columns(columns):
    missing = sorted(REQUIRED_COLUMNS - set(columns))
    if missing:
        raise ValueError("spreadsheet missing columns: {}".format(", ".join(missing)))


def read_spreadsheet(path, sheet=None):
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise ValueError("Only .xlsx and .csv files are supported.")
    if suffix == ".csv":
        rows, columns = load_csv_rows(path)
    else:
        rows, columns = load_workbook_rows(path, sheet=sheet)
    validate_columns(columns)
    return rows


def import_spreadsheet(store, path, *, site_id=None, actor=None, dry_run=False, settings=None):
    rows = read_spreadsheet(path)
    items = coerce_extracted_products(rows, store.categories, settings=settings)
    result = {"rows": len(rows), "imported": 0, "skipped": len(rows) - len(items)}
    if dry_run:
        result["imported"] = len(items)
        return result
    created = store.import_products(items, actor=actor, site_id=site_id)
    result["imported"] = len(created)
    logger.info("Imported %d products from %s", len(created), Path(path).name)
    return result


__all__ = [
    "HEADER_ALIASES",
    "import_spreadsheet",
    "load_csv_rows",
    "load_workbook_rows",
    "normalize_header",
    "read_spreadsheet",
    "rows_from_table",
    "validate_columns",
]
