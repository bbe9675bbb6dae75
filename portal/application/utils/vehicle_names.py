from __future__ import annotations

import json
from typing import Any

VEHICLE_NAME_FALLBACK = ("es", "en", "fr")
VEHICLE_NAME_PLACEHOLDER = "Vehicle"


def normalize_vehicle_name(raw: Any) -> dict[str, str]:
    """
    Collapse the shapes the backend uses for vehicle names into {locale: name}.

    Accepts a plain string, a JSON-encoded object, or an object keyed by locale.
    A plain string is filed under "es", the first fallback locale.
    """
    if raw is None:
        return {}
    if isinstance(raw, dict):
        return {str(k): str(v) for k, v in raw.items() if v not in (None, "")}
    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            return {}
        if text.startswith("{"):
            try:
                decoded = json.loads(text)
            except ValueError:
                decoded = None
            if isinstance(decoded, dict):
                return normalize_vehicle_name(decoded)
        return {"es": text}
    return {"es": str(raw)}


def resolve_vehicle_name(names: dict[str, str], locale: str) -> str:
    for candidate in (locale, *VEHICLE_NAME_FALLBACK):
        name = names.get(candidate)
        if name:
            return name
    return VEHICLE_NAME_PLACEHOLDER
