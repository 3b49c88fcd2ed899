"""
Unit registry for the Recipe Scaler.

Canonical unit table, alias lookup and same-category conversion through a
shared base unit (ml for volume, g for weight).
"""

from typing import Iterable, Iterator, Optional

from ..schemas import UnitDefinition

# --- Data Tables ---

# Factors are approximate US customary values.
DEFAULT_UNITS: tuple[UnitDefinition, ...] = (
    # Volume - US (base: ml)
    UnitDefinition(
        name="cup",
        abbreviations=("c", "c.", "C", "cups", "Cup", "Cups"),
        system="us", category="volume", base_conversion=236.588,
    ),
    UnitDefinition(
        name="tablespoon",
        abbreviations=("tbsp", "tbsp.", "T", "Tbsp", "Tbsp.", "TBSP", "tbs", "tbs.", "tbl",
                       "tablespoons", "Tablespoon", "Tablespoons"),
        system="us", category="volume", base_conversion=14.787,
    ),
    UnitDefinition(
        name="teaspoon",
        abbreviations=("tsp", "tsp.", "t", "Tsp", "Tsp.", "TSP", "teaspoons", "Teaspoon", "Teaspoons"),
        system="us", category="volume", base_conversion=4.929,
    ),
    UnitDefinition(
        name="fluid ounce",
        abbreviations=("fl oz", "fl. oz.", "fl oz.", "fl. oz", "floz", "fluid ounces"),
        system="us", category="volume", base_conversion=29.574,
    ),
    UnitDefinition(
        name="pint",
        abbreviations=("pt", "pt.", "pints", "Pint", "Pints"),
        system="us", category="volume", base_conversion=473.176,
    ),
    UnitDefinition(
        name="quart",
        abbreviations=("qt", "qt.", "quarts", "Quart", "Quarts"),
        system="us", category="volume", base_conversion=946.353,
    ),
    UnitDefinition(
        name="gallon",
        abbreviations=("gal", "gal.", "gallons", "Gallon", "Gallons"),
        system="us", category="volume", base_conversion=3785.41,
    ),

    # Volume - Metric
    UnitDefinition(
        name="milliliter",
        abbreviations=("ml", "mL", "ml.", "milliliters", "millilitre", "millilitres"),
        system="metric", category="volume", base_conversion=1.0,
    ),
    UnitDefinition(
        name="centiliter",
        abbreviations=("cl", "cL", "centiliters", "centilitre", "centilitres"),
        system="metric", category="volume", base_conversion=10.0,
    ),
    UnitDefinition(
        name="deciliter",
        abbreviations=("dl", "dL", "deciliters", "decilitre", "decilitres"),
        system="metric", category="volume", base_conversion=100.0,
    ),
    UnitDefinition(
        name="liter",
        abbreviations=("l", "L", "liters", "litre", "litres"),
        system="metric", category="volume", base_conversion=1000.0,
    ),

    # Weight - US (base: g)
    UnitDefinition(
        name="ounce",
        abbreviations=("oz", "oz.", "ounces", "Ounce", "Ounces"),
        system="us", category="weight", base_conversion=28.3495,
    ),
    UnitDefinition(
        name="pound",
        abbreviations=("lb", "lb.", "lbs", "lbs.", "pounds", "Pound", "Pounds"),
        system="us", category="weight", base_conversion=453.592,
    ),

    # Weight - Metric
    UnitDefinition(
        name="gram",
        abbreviations=("g", "g.", "gm", "gm.", "gr", "grams", "gramme", "grammes"),
        system="metric", category="weight", base_conversion=1.0,
    ),
    UnitDefinition(
        name="kilogram",
        abbreviations=("kg", "kg.", "kgs", "kilograms", "kilo", "kilos"),
        system="metric", category="weight", base_conversion=1000.0,
    ),
    UnitDefinition(
        name="milligram",
        abbreviations=("mg", "mg.", "milligrams"),
        system="metric", category="weight", base_conversion=0.001,
    ),

    # Informal
    UnitDefinition(
        name="pinch",
        abbreviations=("pinches",),
        system="us", category="volume", base_conversion=0.31,  # ~1/16 tsp
    ),
    UnitDefinition(
        name="dash",
        abbreviations=("dashes",),
        system="us", category="volume", base_conversion=0.62,  # ~1/8 tsp
    ),
    UnitDefinition(
        name="stick",
        abbreviations=("sticks",),
        system="us", category="weight", base_conversion=113.4,  # stick of butter
    ),
)


class UnitRegistry:
    """Immutable lookup over a fixed set of unit definitions.

    Lookup is exact (case-sensitive) first, then case-insensitive. Short
    abbreviations such as "t" (teaspoon) and "T" (tablespoon) only differ by
    case, so a folded key claimed by two different units is never resolved
    case-insensitively.
    """

    def __init__(self, units: Iterable[UnitDefinition] = DEFAULT_UNITS):
        self._units: dict[str, UnitDefinition] = {}
        self._exact: dict[str, str] = {}
        folded: dict[str, set[str]] = {}

        for unit in units:
            if unit.base_conversion <= 0:
                raise ValueError(f"Unit '{unit.name}' needs a positive conversion factor")
            if unit.name in self._units:
                raise ValueError(f"Unit '{unit.name}' is defined twice")
            self._units[unit.name] = unit

            for alias in (unit.name, *unit.abbreviations):
                owner = self._exact.get(alias)
                if owner is not None and owner != unit.name:
                    raise ValueError(f"Alias '{alias}' maps to both '{owner}' and '{unit.name}'")
                self._exact[alias] = unit.name
                folded.setdefault(alias.lower(), set()).add(unit.name)

        self._folded: dict[str, str] = {
            key: next(iter(owners)) for key, owners in folded.items() if len(owners) == 1
        }
        self.max_alias_words = max(
            (len(alias.split()) for alias in self._exact), default=1
        )

    def __iter__(self) -> Iterator[UnitDefinition]:
        return iter(self._units.values())

    def __len__(self) -> int:
        return len(self._units)

    def __contains__(self, name: str) -> bool:
        return name in self._units

    def get(self, name: Optional[str]) -> Optional[UnitDefinition]:
        """Definition by canonical name."""
        if not name:
            return None
        return self._units.get(name)

    def lookup(self, token: Optional[str]) -> Optional[UnitDefinition]:
        """Resolve a canonical name or alias to its unit definition."""
        if not token:
            return None

        raw = " ".join(token.split())
        candidates = [raw]
        if raw.endswith(".") and len(raw) > 1:
            candidates.append(raw[:-1])

        # 1. Exact match: case carries meaning for short abbreviations
        for candidate in candidates:
            name = self._exact.get(candidate)
            if name:
                return self._units[name]

        # 2. Case-insensitive match on unambiguous keys
        for candidate in candidates:
            name = self._folded.get(candidate.lower())
            if name:
                return self._units[name]

        return None

    def convert(self, value: float, from_unit: str, to_unit: str) -> Optional[float]:
        """
        Convert between two units of the same category.
        Returns None when a unit is unknown or the categories differ.
        """
        source = self.lookup(from_unit)
        target = self.lookup(to_unit)

        if not source or not target:
            return None
        if source.category != target.category:
            return None

        base_qty = value * source.base_conversion
        return base_qty / target.base_conversion


default_registry = UnitRegistry()
