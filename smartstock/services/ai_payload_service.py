"""Inputs for, and validation of, generative-AI payloads.

The AI service itself is an external collaborator. Everything it returns is
untrusted: only the top-level type is checked strictly, every field inside is
defaulted when missing or of the wrong type.
"""

import json
import logging
import math

from smartstock.config import get_settings
from smartstock.core.constants import CURRENCIES
from smartstock.schemas.report import AIReport, ChartPoint

logger = logging.getLogger(__name__)

EXTRACTION_FIELDS = (
    "name",
    "category",
    "currentStock",
    "minStock",
    "monthlyNeed",
    "unit",
    "unitPrice",
    "currency",
    "supplier",
)


class AIResponseError(ValueError):
    """The AI payload does not have the expected top-level shape."""


def build_analysis_input(products, logs, window=None):
    window = get_settings().AI_HISTORY_WINDOW if window is None else window
    # Store logs are newest first; the prompt wants the trailing slice in time order.
    recent = list(reversed(list(logs)[:window])) if window > 0 else []
    return {
        "products": [product.to_storage() for product in products],
        "history": [log.to_storage() for log in recent],
    }


def build_extraction_input(raw_text, categories):
    return {
        "rawText": raw_text or "",
        "categories": list(categories),
        "fields": list(EXTRACTION_FIELDS),
    }


def _decode(payload):
    if isinstance(payload, (bytes, bytearray)):
        payload = payload.decode("utf-8", errors="replace")
    if isinstance(payload, str):
        text = payload.strip() or "null"
        if text.startswith("```"):
            text = text.strip("`")
            if text.lower().startswith("json"):
                text = text[4:]
        try:
            return json.loads(text)
        except ValueError as exc:
            raise AIResponseError("AI response is not valid JSON") from exc
    return payload


def _pick(item, *keys):
    for key in keys:
        if key in item and item[key] is not None:
            return item[key]
    return None


def _as_text(value, default=""):
    if value is None or isinstance(value, (dict, list)):
        return default
    text = str(value).strip()
    return text or default


def _as_number(value, default=0.0):
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, str):
        value = value.replace(",", ".").strip()
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def _as_int(value, default=0):
    return int(round(_as_number(value, default)))


def _match_category(value, categories):
    text = _as_text(value)
    lowered = {name.lower(): name for name in categories}
    if text.lower() in lowered:
        return lowered[text.lower()]
    if "Autre" in categories:
        return "Autre"
    return categories[-1] if categories else text


def coerce_extracted_products(payload, categories, settings=None):
    settings = settings or get_settings()
    data = _decode(payload)
    if not isinstance(data, list):
        raise AIResponseError("AI extraction must return a JSON array")

    items = []
    dropped = 0
    for raw in data:
        if not isinstance(raw, dict):
            dropped += 1
            continue
        name = _as_text(raw.get("name"))
        if not name:
            dropped += 1
            continue
        currency = _as_text(raw.get("currency"), settings.DEFAULT_CURRENCY)
        if currency not in CURRENCIES:
            currency = settings.DEFAULT_CURRENCY
        item = {
            "name": name,
            "category": _match_category(raw.get("category"), list(categories)),
            "current_stock": max(0, _as_int(_pick(raw, "currentStock", "current_stock"), 0)),
            "min_stock": _as_int(_pick(raw, "minStock", "min_stock"), settings.DEFAULT_MIN_STOCK),
            "monthly_need": _as_int(
                _pick(raw, "monthlyNeed", "monthly_need"), settings.DEFAULT_MONTHLY_NEED
            ),
            "unit": _as_text(raw.get("unit"), settings.DEFAULT_UNIT),
            "unit_price": max(0.0, _as_number(_pick(raw, "unitPrice", "unit_price"), 0.0)),
            "currency": currency,
        }
        supplier = _as_text(raw.get("supplier"))
        if supplier:
            item["supplier"] = supplier
        items.append(item)

    if dropped:
        logger.warning("Dropped %d unusable items from AI extraction", dropped)
    return items


def _as_text_list(value):
    if not isinstance(value, list):
        return []
    return [text for text in (_as_text(entry) for entry in value) if text]


def coerce_report(payload) -> AIReport:
    data = _decode(payload)
    if not isinstance(data, dict):
        raise AIResponseError("AI report must return a JSON object")

    chart_data = []
    raw_chart = _pick(data, "chartData", "chart_data")
    if isinstance(raw_chart, list):
        for entry in raw_chart:
            if not isinstance(entry, dict):
                continue
            name = _as_text(_pick(entry, "name", "label"))
            if not name:
                continue
            chart_data.append(ChartPoint(name=name, value=_as_number(entry.get("value"), 0.0)))

    return AIReport(
        summary=_as_text(data.get("summary")),
        alerts=_as_text_list(data.get("alerts")),
        recommendations=_as_text_list(data.get("recommendations")),
        chart_data=chart_data,
    )


__all__ = [
    "AIResponseError",
    "EXTRACTION_FIELDS",
    "build_analysis_input",
    "build_extraction_input",
    "coerce_extracted_products",
    "coerce_report",
]
