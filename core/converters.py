import math
import re
from dataclasses import fields, is_dataclass
from enum import Enum
from typing import Any, Optional

SQFT_TO_SQM = 0.092903
SQM_TO_SQFT = 10.76
WATTS_PER_TR = 3517.0
W_TO_BTU_HR = 3.412
LPS_TO_CFM = 2.119
GPM_TO_LPM = 3.785

# Read-only properties rendered alongside dataclass fields
DERIVED_FIELDS = ("total_tcl", "total_max_demand", "total_essential", "total_fire", "total_plant_kw", "approximate")


def sqft_to_sqm(area_sqft: float) -> float:
    return area_sqft * SQFT_TO_SQM


def sqm_to_sqft(area_sqm: float) -> float:
    return area_sqm * SQM_TO_SQFT


def watts_to_tr(watts: float) -> float:
    return watts / WATTS_PER_TR


def lps_to_cfm(lps: float) -> float:
    return lps * LPS_TO_CFM


def _blank(val: Any) -> bool:
    if val is None:
        return True
    if isinstance(val, float) and math.isnan(val):
        return True
    return isinstance(val, str) and not val.strip()


def to_float(val: Any, default: Optional[float] = None) -> Optional[float]:
    """Parses a number from user input. Blank input returns the default."""
    if _blank(val):
        return default
    if isinstance(val, bool):
        return float(val)
    return float(str(val).strip()) if isinstance(val, str) else float(val)


def to_int(val: Any, default: Optional[int] = None) -> Optional[int]:
    parsed = to_float(val)
    if parsed is None:
        return default
    return int(parsed)


def to_bool(val: Any, default: Optional[bool] = None) -> Optional[bool]:
    if _blank(val):
        return default
    if isinstance(val, str):
        return val.strip().lower() in ("1", "true", "yes", "y", "si", "s", "on")
    return bool(val)


def parse_working_count(config: str) -> int:
    """
    Number of duty units in a pump/fan set string.
    "2W+1S" -> 2, "3W" -> 3, "2 Main+SBY+Jky" -> 2, anything else -> 1.
    """
    text = (config or "").upper()
    match = re.search(r"(\d+)\s*(W\b|MAIN)", text)
    if match:
        return max(int(match.group(1)), 1)
    return 1


def camel_to_snake(name: str) -> str:
    name = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    return re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", name).lower()


def snake_to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def to_camel_dict(value: Any) -> Any:
    """Renders dataclasses, enums and containers as plain camelCase structures."""
    if is_dataclass(value) and not isinstance(value, type):
        out = {snake_to_camel(f.name): to_camel_dict(getattr(value, f.name)) for f in fields(value)}
        for extra in DERIVED_FIELDS:
            if hasattr(type(value), extra):
                out[snake_to_camel(extra)] = getattr(value, extra)
        return out
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {(snake_to_camel(k) if isinstance(k, str) else k): to_camel_dict(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_camel_dict(v) for v in value]
    return value
