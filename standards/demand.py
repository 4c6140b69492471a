from dataclasses import replace
from typing import Iterable

from core.models import LoadCategory, LoadTotals

# Applied when an item carries no factor of its own
DEFAULT_MDF = 0.6
DEFAULT_EDF = 0.6
DEFAULT_FDF = 0.0


def _or(value, default):
    return default if value is None else value


def apply_demand_factors(category: LoadCategory) -> LoadCategory:
    """
    Derives max demand, essential and fire kW for every item from its TCL.
    Derived values are recomputed, never accumulated, so re-applying is harmless.
    """
    items = [
        replace(
            item,
            max_demand_kw=item.tcl * _or(item.mdf, DEFAULT_MDF),
            essential_kw=item.tcl * _or(item.edf, DEFAULT_EDF),
            fire_kw=item.tcl * _or(item.fdf, DEFAULT_FDF),
        )
        for item in category.items
    ]
    return LoadCategory(category.name, items)


def sum_totals(categories: Iterable[LoadCategory]) -> LoadTotals:
    total = LoadTotals()
    for category in categories:
        total = total + category.totals
    return total
