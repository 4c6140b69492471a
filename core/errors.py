from dataclasses import dataclass
from typing import Optional


class LoadCalculationError(Exception):
    """Base class for every error raised by the calculation engine."""


class ValidationError(LoadCalculationError):
    """A required input is missing or unusable. Aborts the calculation run."""

    def __init__(self, field: str, message: Optional[str] = None):
        self.field = field
        super().__init__(message or f"Missing required field: {field}")


class RegulationUnavailable(LoadCalculationError):
    """No framework or regulation table could be resolved from a source.

    Never escapes the provider: it is converted into a warning diagnostic and
    the built-in defaults are used instead.
    """


class LookupMiss(LoadCalculationError):
    """A factor or unit-power table has no entry for the requested key."""

    def __init__(self, table: str, key: str):
        self.table = table
        self.key = key
        super().__init__(f"No entry for {key} in {table}")


@dataclass(frozen=True)
class Diagnostic:
    kind: str  # "LookupMiss" | "RegulationUnavailable" | "Approximation"
    message: str

    def __str__(self) -> str:
        return f"[{self.kind}] {self.message}"
