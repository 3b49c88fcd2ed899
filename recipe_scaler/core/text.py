import re

# Characters left dangling once quantity, unit and clauses are cut out
STRAY_PUNCTUATION = " \t,;:.-–—*•"


def clean_md(text: str) -> str:
    """
    Sanitize markdown artifacts from scraped text.
    Removes:
    - Leading headers (#, ##)
    - Bold markers (**, __)
    - Leading bullets (-, *, •)
    """
    if not text:
        return ""

    # Remove bolding (**text** -> text)
    text = re.sub(r"(\*\*|__)(.*?)\1", r"\2", text)

    # Remove leading headers (# Title -> Title)
    text = re.sub(r"^\s*#+\s+", "", text)

    # Remove leading bullets (- Item -> Item)
    text = re.sub(r"^\s*[-*•]\s+", "", text)

    return collapse_whitespace(text)


def collapse_whitespace(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def strip_stray_punctuation(text: str) -> str:
    """Trim separators left at either end of a fragment ("flour," -> "flour")."""
    return collapse_whitespace(text).strip(STRAY_PUNCTUATION)


def pluralize(word: str) -> str:
    """English plural for unit names ("cup" -> "cups", "pinch" -> "pinches")."""
    if not word:
        return word
    if word.endswith(("s", "x", "z", "ch", "sh")):
        return word + "es"
    return word + "s"
