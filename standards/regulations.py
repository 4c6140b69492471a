import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from core.converters import to_bool, to_float
from core.errors import Diagnostic, LookupMiss, RegulationUnavailable
from core.models import FactorKey, LoadFactor
from standards import msedcl_tables as tables

logger = logging.getLogger(__name__)

DEFAULT_FACTOR = dict(watt_per_sqm=None, mdf=0.5, edf=0.5, fdf=0.0)

FACTOR_COLUMNS = ["category", "sub_category", "description", "watt_per_sqm", "mdf", "edf", "fdf", "notes"]
LOOKUP_COLUMNS = ["category", "lookup_key", "lookup_value", "result_value"]


# --- Regulation rows ---

@dataclass(frozen=True)
class Framework:
    code: str
    name: str
    is_default: bool = False


@dataclass(frozen=True)
class LoadStandard:
    premise_type: str
    minimum_load_w_per_sqm: Optional[float]
    area_measurement_type: str = "CARPET_AREA"
    description: str = ""


@dataclass(frozen=True)
class DTCThreshold:
    area_type_code: str
    threshold_kva: float
    action_required: str = ""
    distance_from_lt_pole_m: Optional[float] = None


@dataclass(frozen=True)
class SanctionedLimit:
    limit_type: str
    max_load_kw: float
    max_load_kva: float
    description: str = ""


@dataclass(frozen=True)
class SubstationBand:
    area_type_code: str
    min_load_after_df_mva: float
    max_load_after_df_mva: Optional[float]  # None is an open upper bound
    substation_type: str
    incoming_feeders_count: Optional[int] = None
    feeder_capacity_mva: Optional[float] = None
    special_requirements: Tuple[str, ...] = ()
    description: str = ""

    def contains(self, mva: float) -> bool:
        upper = math.inf if self.max_load_after_df_mva is None else self.max_load_after_df_mva
        return self.min_load_after_df_mva < mva <= upper


@dataclass(frozen=True)
class LandRequirementRow:
    infrastructure_type: str
    area_type_code: Optional[str]
    land_required_sqm: float
    additional_land_per_unit_sqm: Optional[float] = None
    description: str = ""

    def applies_to(self, area_type: str) -> bool:
        return not self.area_type_code or self.area_type_code == area_type


@dataclass(frozen=True)
class LeaseTerm:
    lease_duration_years: int
    annual_rent_amount: float
    total_upfront_payment: float
    encumbrance_free_required: bool
    registration_required: bool
    surrender_notice_months: int
    description: str = ""


@dataclass(frozen=True)
class InfrastructureSpec:
    infrastructure_type: str
    area_type_code: Optional[str]
    specification: str = ""
    mandatory: bool = True


@dataclass
class Regulations:
    frameworks: List[Framework]
    area_types: List[Dict[str, Any]] = field(default_factory=list)
    load_standards: List[LoadStandard] = field(default_factory=list)
    dtc_thresholds: List[DTCThreshold] = field(default_factory=list)
    sanctioned_limits: List[SanctionedLimit] = field(default_factory=list)
    power_factors: Dict[str, float] = field(default_factory=dict)
    diversity_factors: Dict[str, float] = field(default_factory=dict)
    substation_bands: List[SubstationBand] = field(default_factory=list)
    land_requirements: List[LandRequirementRow] = field(default_factory=list)
    lease_terms: List[LeaseTerm] = field(default_factory=list)
    infrastructure_specs: List[InfrastructureSpec] = field(default_factory=list)
    definitions: Dict[str, str] = field(default_factory=dict)
    builtin: bool = False

    @property
    def primary_framework(self) -> Framework:
        return self.frameworks[0]

    def power_factor(self, load_type: str) -> float:
        return self.power_factors.get(load_type, tables.DEFAULT_POWER_FACTOR)

    def load_standard(self, premise_type: str) -> Optional[LoadStandard]:
        return next((s for s in self.load_standards if s.premise_type == premise_type), None)

    def dtc_threshold(self, area_type: str) -> Optional[DTCThreshold]:
        return next((t for t in self.dtc_thresholds if t.area_type_code == area_type), None)

    def sanctioned_limit(self, limit_type: str) -> Optional[SanctionedLimit]:
        return next((l for l in self.sanctioned_limits if l.limit_type == limit_type), None)

    def substation_bands_for(self, area_type: str) -> List[SubstationBand]:
        bands = [b for b in self.substation_bands if b.area_type_code in (area_type, "ALL")]
        return sorted(bands, key=lambda b: b.min_load_after_df_mva)

    def land_requirement(self, infrastructure_type: str, area_type: str) -> Optional[LandRequirementRow]:
        return next((l for l in self.land_requirements
                     if l.infrastructure_type == infrastructure_type and l.applies_to(area_type)), None)

    def substation_land(self, area_type: str) -> Optional[LandRequirementRow]:
        return next((l for l in self.land_requirements
                     if "SUBSTATION" in l.infrastructure_type and l.applies_to(area_type)), None)

    def has_infrastructure_spec(self, infrastructure_type: str, area_type: str) -> bool:
        return any(s.infrastructure_type == infrastructure_type and s.area_type_code == area_type
                   for s in self.infrastructure_specs)

    def building_diversity_multiplier(self, area_type: str) -> float:
        """1 / DF for the area type, e.g. DF 2 -> 0.5. 1.0 when no factor is defined."""
        df = self.diversity_factors.get(area_type, self.diversity_factors.get("ALL"))
        return 1.0 / df if df else 1.0


def _opt_float(val) -> Optional[float]:
    return to_float(val)


def _str_list(val) -> Tuple[str, ...]:
    if val is None or (isinstance(val, float) and math.isnan(val)):
        return ()
    if isinstance(val, str):
        return tuple(s.strip() for s in val.split(";") if s.strip())
    return tuple(val)


def _opt_str(val) -> Optional[str]:
    if val is None or (isinstance(val, float) and math.isnan(val)):
        return None
    return str(val).strip() or None


def build_regulations(frameworks: Sequence[Framework], rows: Mapping[str, List[dict]],
                      builtin: bool = False) -> Regulations:
    """Turns raw table rows into a typed Regulations snapshot."""
    get = lambda name: rows.get(name) or []
    return Regulations(
        frameworks=list(frameworks),
        area_types=list(get("area_types")),
        load_standards=[
            LoadStandard(r["premise_type"], _opt_float(r.get("minimum_load_w_per_sqm")),
                         r.get("area_measurement_type") or "CARPET_AREA", r.get("description") or "")
            for r in get("load_standards")
        ],
        dtc_thresholds=[
            DTCThreshold(r["area_type_code"], float(r["threshold_kva"]), r.get("action_required") or "",
                         _opt_float(r.get("distance_from_lt_pole_m")))
            for r in get("dtc_thresholds")
        ],
        sanctioned_limits=[
            SanctionedLimit(r["limit_type"], float(r["max_load_kw"]), float(r["max_load_kva"]),
                            r.get("description") or "")
            for r in get("sanctioned_limits")
        ],
        # First framework wins: rows arrive ordered default framework first.
        power_factors=_first_wins((r["load_type"], float(r["power_factor"])) for r in get("power_factors")),
        diversity_factors=_first_wins((r["area_type_code"], float(r["diversity_factor"]))
                                      for r in get("diversity_factors")),
        substation_bands=[
            SubstationBand(
                r["area_type_code"], float(r["min_load_after_df_mva"]), _opt_float(r.get("max_load_after_df_mva")),
                r["substation_type"],
                int(r["incoming_feeders_count"]) if _opt_float(r.get("incoming_feeders_count")) is not None else None,
                _opt_float(r.get("feeder_capacity_mva")), _str_list(r.get("special_requirements")),
                r.get("description") or "",
            )
            for r in get("substation_requirements")
        ],
        land_requirements=[
            LandRequirementRow(r["infrastructure_type"], _opt_str(r.get("area_type_code")),
                               float(r["land_required_sqm"] or 0), _opt_float(r.get("additional_land_per_unit_sqm")),
                               r.get("description") or "")
            for r in get("land_requirements")
        ],
        lease_terms=[
            LeaseTerm(int(r["lease_duration_years"]), float(r["annual_rent_amount"]),
                      float(r["total_upfront_payment"]), bool(to_bool(r.get("encumbrance_free_required"), False)),
                      bool(to_bool(r.get("registration_required"), False)), int(r["surrender_notice_months"]),
                      r.get("description") or "")
            for r in get("lease_terms")
        ],
        infrastructure_specs=[
            InfrastructureSpec(r["infrastructure_type"], _opt_str(r.get("area_type_code")),
                               r.get("specification") or "", bool(to_bool(r.get("mandatory"), True)))
            for r in get("infrastructure_specs")
        ],
        definitions={r["term"]: r["definition"] for r in get("definitions")},
        builtin=builtin,
    )


def _first_wins(pairs: Iterable[Tuple[str, float]]) -> Dict[str, float]:
    out: Dict[str, float] = {}
    for key, value in pairs:
        out.setdefault(key, value)
    return out


def builtin_regulations() -> Regulations:
    fw = tables.BUILTIN_DEFAULTS["framework"]
    return build_regulations([Framework(fw["framework_code"], fw["framework_name"])],
                             tables.BUILTIN_DEFAULTS, builtin=True)


# --- Sources ---

class RegulationSource(ABC):
    """Read-only access to versioned factor and regulation data."""

    @abstractmethod
    def factor_rows(self) -> List[dict]:
        pass

    @abstractmethod
    def lookup_rows(self) -> List[dict]:
        pass

    @abstractmethod
    def frameworks(self) -> List[Framework]:
        pass

    @abstractmethod
    def project_frameworks(self, project_id) -> List[str]:
        """Framework codes explicitly selected for a project, in priority order."""
        pass

    @abstractmethod
    def regulation_rows(self, table: str, framework_codes: Sequence[str]) -> List[dict]:
        pass


class BuiltinRegulationSource(RegulationSource):
    """Serves the tables shipped in standards/msedcl_tables.py."""

    def __init__(self, frameworks: Optional[Mapping[str, dict]] = None,
                 project_selections: Optional[Mapping[Any, Sequence[str]]] = None):
        self._frameworks = dict(tables.FRAMEWORKS if frameworks is None else frameworks)
        self._selections = dict(project_selections or {})

    def factor_rows(self) -> List[dict]:
        return [dict(zip(FACTOR_COLUMNS, row)) for row in tables.LOAD_FACTOR_ROWS]

    def lookup_rows(self) -> List[dict]:
        rows = []
        for category, (lookup_key, values) in tables.LOOKUP_TABLES.items():
            for value, result in values.items():
                rows.append({"category": category, "lookup_key": lookup_key,
                             "lookup_value": value, "result_value": result})
        return rows

    def frameworks(self) -> List[Framework]:
        return [Framework(code, data["framework"]["framework_name"], bool(data["framework"].get("is_default")))
                for code, data in self._frameworks.items()]

    def project_frameworks(self, project_id) -> List[str]:
        return list(self._selections.get(project_id, []))

    def regulation_rows(self, table: str, framework_codes: Sequence[str]) -> List[dict]:
        rows = []
        for code in framework_codes:
            if code not in self._frameworks:
                raise RegulationUnavailable(f"Unknown regulatory framework: {code}")
            rows.extend(dict(r) for r in self._frameworks[code].get(table, []))
        return rows


class ExcelRegulationSource(RegulationSource):
    """
    Reads factor and regulation tables from a workbook, one sheet per table.
    Sheets: factors, lookups, frameworks, project_frameworks and one sheet per
    regulation table carrying a framework_code column.
    """

    def __init__(self, path):
        self.path = path
        self._sheets: Optional[Dict[str, pd.DataFrame]] = None

    def _load(self) -> Dict[str, pd.DataFrame]:
        if self._sheets is None:
            try:
                self._sheets = pd.read_excel(self.path, sheet_name=None)
            except (OSError, ValueError) as e:
                raise RegulationUnavailable(f"Cannot read regulation workbook {self.path}: {e}")
            logger.debug("Loaded regulation workbook %s (%d sheets)", self.path, len(self._sheets))
        return self._sheets

    def _records(self, sheet: str, required: bool = False) -> List[dict]:
        sheets = self._load()
        if sheet not in sheets:
            if required:
                raise RegulationUnavailable(f"Sheet '{sheet}' missing from {self.path}")
            return []
        df = sheets[sheet].astype(object).where(sheets[sheet].notna(), None)
        return df.to_dict("records")

    def factor_rows(self) -> List[dict]:
        return self._records("factors", required=True)

    def lookup_rows(self) -> List[dict]:
        return self._records("lookups", required=True)

    def frameworks(self) -> List[Framework]:
        return [Framework(str(r["framework_code"]), str(r.get("framework_name") or r["framework_code"]),
                          bool(to_bool(r.get("is_default"), False)))
                for r in self._records("frameworks")]

    def project_frameworks(self, project_id) -> List[str]:
        return [str(r["framework_code"]) for r in self._records("project_frameworks")
                if _same_id(r.get("project_id"), project_id)]

    def regulation_rows(self, table: str, framework_codes: Sequence[str]) -> List[dict]:
        rows = self._records(table)
        # Keep the requested framework order.
        return [r for code in framework_codes for r in rows if r.get("framework_code") == code]


def export_regulation_workbook(path_or_buffer, source: Optional[RegulationSource] = None):
    """Writes a source's tables as a workbook that ExcelRegulationSource can read back."""
    source = source or BuiltinRegulationSource()
    frameworks = source.frameworks()
    codes = [f.code for f in frameworks]
    with pd.ExcelWriter(path_or_buffer, engine="openpyxl") as writer:
        pd.DataFrame(source.factor_rows(), columns=FACTOR_COLUMNS).to_excel(writer, index=False, sheet_name="factors")
        pd.DataFrame(source.lookup_rows(), columns=LOOKUP_COLUMNS).to_excel(writer, index=False, sheet_name="lookups")
        pd.DataFrame([{"framework_code": f.code, "framework_name": f.name, "is_default": f.is_default}
                      for f in frameworks]).to_excel(writer, index=False, sheet_name="frameworks")
        for table in tables.REGULATION_TABLES:
            records = []
            for code in codes:
                for row in source.regulation_rows(table, [code]):
                    row = dict(row, framework_code=code)
                    for key, val in row.items():
                        if isinstance(val, (list, tuple)):
                            row[key] = "; ".join(val)
                    records.append(row)
            pd.DataFrame(records).to_excel(writer, index=False, sheet_name=table)
    return path_or_buffer


# --- Per-calculation context ---

class RegulationContext:
    """
    Factor and regulation cache for one calculation (one request or project).
    Never share an instance between projects.
    """

    def __init__(self, source: Optional[RegulationSource] = None, project_id=None):
        self.source = source or BuiltinRegulationSource()
        self.project_id = project_id
        self.diagnostics: List[Diagnostic] = []
        self._factors: Optional[Dict[FactorKey, LoadFactor]] = None
        self._lookups: Optional[Dict[Tuple[str, str], List[Tuple[Any, float]]]] = None
        self._regulations: Dict[Any, Regulations] = {}

    def record(self, kind: str, message: str):
        diagnostic = Diagnostic(kind, message)
        if diagnostic not in self.diagnostics:
            self.diagnostics.append(diagnostic)
            logger.warning(message)

    @property
    def approximate(self) -> bool:
        return bool(self.diagnostics)

    def warnings(self) -> List[str]:
        return [d.message for d in self.diagnostics]

    # Factors

    def load_factors(self) -> Dict[FactorKey, LoadFactor]:
        if self._factors is not None:
            return self._factors
        try:
            rows = self.source.factor_rows()
        except RegulationUnavailable as e:
            self.record("RegulationUnavailable", f"{e}; using default demand factors")
            rows = []
        factors = {}
        for n, row in enumerate(rows, 1):
            try:
                factor = _factor_from_row(row)
            except (KeyError, TypeError, ValueError) as e:
                self.record("RegulationUnavailable", f"Malformed load factor row {n} ({e}); row skipped")
                continue
            factors[factor.key] = factor
        logger.debug("Loaded %d load factors", len(factors))
        self._factors = factors
        return factors

    def get_factor(self, category: str, sub_category: Optional[str], description: str) -> LoadFactor:
        key = FactorKey.of(category, sub_category, description)
        try:
            return self._find_factor(key)
        except LookupMiss as miss:
            self.record("LookupMiss", f"{miss}, using defaults (0.5/0.5/0)")
            return LoadFactor(key.category, key.sub_category, key.description, **DEFAULT_FACTOR)

    def _find_factor(self, key: FactorKey) -> LoadFactor:
        factor = self.load_factors().get(key)
        if factor is None:
            raise LookupMiss("load factors", str(key))
        return factor

    # Unit power lookups

    def _lookup_index(self) -> Dict[Tuple[str, str], List[Tuple[Any, float]]]:
        if self._lookups is None:
            try:
                rows = self.source.lookup_rows()
            except RegulationUnavailable as e:
                self.record("RegulationUnavailable", f"{e}; using default unit powers")
                rows = []
            index: Dict[Tuple[str, str], List[Tuple[Any, float]]] = {}
            for n, row in enumerate(rows, 1):
                try:
                    entry = (_normalize_key(row["lookup_value"]), float(row["result_value"]))
                    index.setdefault((row["category"], row["lookup_key"]), []).append(entry)
                except (KeyError, TypeError, ValueError) as e:
                    self.record("RegulationUnavailable", f"Malformed unit power row {n} ({e}); row skipped")
            self._lookups = index
        return self._lookups

    def lookup_value(self, category: str, lookup_key: str, value) -> float:
        try:
            return self._find_value(category, lookup_key, value)
        except LookupMiss as miss:
            default = tables.LOOKUP_DEFAULTS.get(category, tables.LOOKUP_FALLBACK)
            self.record("LookupMiss", f"{miss}, using default {default}")
            return float(default)

    def _find_value(self, category: str, lookup_key: str, value) -> float:
        """Banded tables take the first band at or above the value; the rest match exactly."""
        rows = self._lookup_index().get((category, lookup_key), [])
        wanted = _normalize_key(value)
        if category in tables.BANDED_LOOKUPS and isinstance(wanted, float) and rows:
            bands = sorted((k, v) for k, v in rows if isinstance(k, float))
            for band, result in bands:
                if wanted <= band:
                    return result
            return bands[-1][1]
        for key, result in rows:
            if key == wanted:
                return result
        raise LookupMiss(category, f"{lookup_key}={value}")

    # Regulations

    def load_regulations(self, project_id=None) -> Regulations:
        project_id = self.project_id if project_id is None else project_id
        if project_id in self._regulations:
            return self._regulations[project_id]
        try:
            regulations = self._resolve(project_id)
        except RegulationUnavailable as e:
            self.record("RegulationUnavailable", f"{e}; using built-in defaults")
            regulations = builtin_regulations()
        self._regulations[project_id] = regulations
        return regulations

    def _resolve(self, project_id) -> Regulations:
        try:
            available = self.source.frameworks()
            by_code = {f.code: f for f in available}
            selected = []
            if project_id is not None:
                selected = [by_code[c] for c in self.source.project_frameworks(project_id) if c in by_code]
        except (KeyError, TypeError, ValueError) as e:
            raise RegulationUnavailable(f"Malformed framework data ({e!r})") from e
        if not selected:
            selected = [f for f in available if f.is_default][:1]
        if not selected:
            raise RegulationUnavailable("No regulatory framework found")
        # Default framework first, as selections are ordered.
        selected.sort(key=lambda f: not f.is_default)
        codes = [f.code for f in selected]
        rows = {table: self.source.regulation_rows(table, codes) for table in tables.REGULATION_TABLES}
        logger.info("Using regulatory framework(s): %s", ", ".join(codes))
        try:
            return build_regulations(selected, rows)
        except (KeyError, TypeError, ValueError) as e:
            raise RegulationUnavailable(f"Malformed regulation data for {', '.join(codes)} ({e!r})") from e


def _factor_from_row(row: Mapping[str, Any]) -> LoadFactor:
    category = _opt_str(row["category"])
    description = _opt_str(row["description"])
    if category is None or description is None:
        raise ValueError("category and description are required")
    return LoadFactor(
        category=category,
        sub_category=_opt_str(row.get("sub_category")) or "default",
        description=description,
        watt_per_sqm=to_float(row.get("watt_per_sqm")) or None,
        mdf=to_float(row.get("mdf"), 0.0),
        edf=to_float(row.get("edf"), 0.0),
        fdf=to_float(row.get("fdf"), 0.0),
        notes=_opt_str(row.get("notes")) or "",
        guideline=_opt_str(row.get("guideline")) or "",
    )


def _same_id(a, b) -> bool:
    # Sheets read a numeric column with blanks as floats: 12.0 matches 12.
    if _opt_str(a) is None or _opt_str(b) is None:
        return False
    return _normalize_key(str(a)) == _normalize_key(str(b))


def _normalize_key(value):
    if isinstance(value, str):
        stripped = value.strip()
        try:
            return float(stripped)
        except ValueError:
            return stripped.lower()
    return float(value)
