from abc import ABC, abstractmethod
from typing import List

from .models import LoadCategory, LoadItem


class LoadCategoryCalculator(ABC):
    """Builds one named load category from inputs and a regulation context."""

    category: str = ""

    def __init__(self, context):
        self.context = context

    @abstractmethod
    def build_items(self, inputs) -> List[LoadItem]:
        """Itemised connected loads of the category. Returns items without demand totals."""
        pass

    def calculate(self, inputs) -> LoadCategory:
        """Performs the full calculation for the category. Returns (raw) LoadCategory."""
        return LoadCategory(self.category, self.build_items(inputs))

    def factored_item(self, key: tuple, description: str, tcl: float, **fields) -> LoadItem:
        """Item carrying the MDF/EDF/FDF of the factor stored under key (category, sub, description)."""
        factor = self.context.get_factor(*key)
        return LoadItem(description=description, tcl=tcl, mdf=factor.mdf, edf=factor.edf, fdf=factor.fdf, **fields)

    def unit_item(self, key: tuple, description: str, nos: float, kw_per_unit: float, **details) -> LoadItem:
        return self.factored_item(key, description, nos * kw_per_unit, nos=nos, kw_per_unit=kw_per_unit,
                                  details=details)
