import logging
import re
import uuid
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Optional

from ..core.text import clean_md, collapse_whitespace, strip_stray_punctuation
from ..schemas import IngredientQuantity, ParsedIngredient, Recipe, RecipeShell
from ..services.unit_conversion import UnitRegistry, default_registry
from .quantity_parser import QuantityParser

logger = logging.getLogger("recipe_scaler.parsing")

UNPARSED_ERROR = "Could not parse ingredient"

# Trailing phrases that qualify an ingredient rather than name it.
# Longest first so "plus more for serving" wins over "plus more".
NOTE_PHRASES = (
    "plus more for serving",
    "plus more to taste",
    "plus more",
    "at room temperature",
    "for garnish",
    "for serving",
    "for dusting",
    "as needed",
    "if needed",
    "to taste",
    "optional",
    "divided",
    "or more",
    "or less",
    "approximately",
    "about",
)

# Participles that prefix an ingredient name ("ground beef", "melted butter")
LEADING_PREPARATIONS = (
    "finely chopped",
    "roughly chopped",
    "coarsely chopped",
    "thinly sliced",
    "firmly packed",
    "lightly packed",
    "loosely packed",
    "freshly grated",
    "freshly ground",
    "chopped",
    "diced",
    "minced",
    "sliced",
    "crushed",
    "grated",
    "shredded",
    "julienned",
    "cubed",
    "melted",
    "softened",
    "sifted",
    "beaten",
    "peeled",
    "halved",
    "quartered",
    "toasted",
    "ground",
    "packed",
    "cooked",
)

# Weights for parse confidence
QUANTITY_CREDIT = 0.5
UNIT_CREDIT = 0.3
NAME_CREDIT = 0.2

_PARENS = re.compile(r"\(([^()]*)\)")
_NOTE_TAIL = [
    (phrase, re.compile(rf"(?:^|,\s*|\s+){re.escape(phrase)}\s*[.,]?\s*$", re.IGNORECASE))
    for phrase in NOTE_PHRASES
]
_LEADING_PREP = [
    (phrase, re.compile(rf"^{re.escape(phrase)}\s+", re.IGNORECASE))
    for phrase in LEADING_PREPARATIONS
]
_LEADING_OF = re.compile(r"^of\s+", re.IGNORECASE)


class IngredientParser:
    """
    Rule-based decomposition of one ingredient line into quantity, unit,
    name, preparation and notes.

    Never raises for content: a line that cannot be decomposed comes back
    with no quantity, the trimmed text as its name and zero confidence.
    """

    def __init__(self, registry: UnitRegistry = default_registry, quantities: Optional[QuantityParser] = None):
        self.registry = registry
        self.quantities = quantities or QuantityParser()

    def parse_ingredients(self, lines: Iterable[str], max_workers: int = 1) -> list[ParsedIngredient]:
        """Parse many lines. Output order always matches input order."""
        lines = list(lines)
        if max_workers <= 1 or len(lines) < 2:
            return [self.parse_ingredient(line) for line in lines]

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            return list(executor.map(self.parse_ingredient, lines))

    def parse_recipe(self, shell: RecipeShell, max_workers: int = 1) -> Recipe:
        """Turn a scraped recipe shell (raw lines) into a Recipe."""
        ingredients = self.parse_ingredients(shell.ingredients, max_workers=max_workers)
        unparsed = sum(1 for ing in ingredients if ing.quantity is None)
        logger.info(f"parser.recipe title={shell.title!r} lines={len(ingredients)} without_quantity={unparsed}")
        return Recipe(title=shell.title, servings=shell.servings, ingredients=ingredients)

    def parse_ingredient(self, text: str) -> ParsedIngredient:
        ingredient_id = str(uuid.uuid4())
        original = text.strip() if isinstance(text, str) else ""

        if len(original) < 2:
            return self._unparsed(ingredient_id, original)

        try:
            working = clean_md(original)
            working, notes = self._extract_notes(working)

            quantity, rest = self.quantities.extract(working)
            unit = None
            if quantity is not None:
                unit, rest = self._extract_unit(rest)

            rest, preparation = self._extract_preparation(rest)
            name = self._clean_name(rest)

            if quantity is None and not name:
                return self._unparsed(ingredient_id, original)

            return ParsedIngredient(
                id=ingredient_id,
                original=original,
                quantity=quantity,
                unit=unit,
                ingredient=name,
                preparation=preparation,
                notes=notes,
                parse_confidence=self._confidence(quantity, unit, name),
            )
        except Exception:
            logger.debug(f"Failed to parse ingredient {original!r}", exc_info=True)
            return self._unparsed(ingredient_id, original)

    def _extract_notes(self, text: str) -> tuple[str, Optional[str]]:
        """Parenthesised text and trailing qualifier phrases become notes."""
        notes = [note.strip() for note in _PARENS.findall(text) if note.strip()]
        text = collapse_whitespace(_PARENS.sub(" ", text))

        trailing: list[str] = []
        found = True
        while found and text:
            found = False
            for phrase, pattern in _NOTE_TAIL:
                match = pattern.search(text)
                if match:
                    trailing.insert(0, text[match.start():].strip(" ,."))
                    text = text[:match.start()].rstrip(" ,")
                    found = True
                    break

        notes.extend(trailing)
        return text, ", ".join(notes) if notes else None

    def _extract_unit(self, text: str) -> tuple[Optional[str], str]:
        """Greedy window: multi-word aliases ("fl oz") before single words."""
        words = text.split()
        for size in range(min(self.registry.max_alias_words, len(words)), 0, -1):
            token = " ".join(words[:size]).rstrip(",")
            unit = self.registry.lookup(token)
            if unit:
                return unit.name, " ".join(words[size:])
        return None, text

    def _extract_preparation(self, text: str) -> tuple[str, Optional[str]]:
        preparations: list[str] = []
        remaining = text.strip()

        # Everything after the first comma: "onions, peeled and diced"
        head, sep, tail = remaining.partition(",")
        if sep and head.strip() and strip_stray_punctuation(tail):
            preparations.append(strip_stray_punctuation(tail))
            remaining = head.strip()

        for phrase, pattern in _LEADING_PREP:
            if pattern.match(remaining):
                preparations.insert(0, phrase)
                remaining = pattern.sub("", remaining, count=1)
                break

        return remaining, ", ".join(preparations) if preparations else None

    def _clean_name(self, text: str) -> str:
        name = strip_stray_punctuation(text)
        name = _LEADING_OF.sub("", name)
        return strip_stray_punctuation(name)

    def _confidence(self, quantity: Optional[IngredientQuantity], unit: Optional[str], name: str) -> float:
        score = 0.0
        if quantity is not None:
            score += QUANTITY_CREDIT
        if unit:
            score += UNIT_CREDIT
        if len(name) >= 2:
            score += NAME_CREDIT
        return round(min(score, 1.0), 2)

    def _unparsed(self, ingredient_id: str, original: str) -> ParsedIngredient:
        return ParsedIngredient(
            id=ingredient_id,
            original=original,
            quantity=None,
            unit=None,
            ingredient=original,
            parse_confidence=0.0,
            parse_error=UNPARSED_ERROR,
        )
