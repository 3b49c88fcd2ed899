from .ingredient_parser import IngredientParser
from .quantity_parser import QuantityParser, amount_value

__all__ = ["IngredientParser", "QuantityParser", "amount_value"]
