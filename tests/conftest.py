import pytest
from fastapi.testclient import TestClient

from recipe_scaler.main import app, limiter
from recipe_scaler.parsing import IngredientParser
from recipe_scaler.schemas import UnitDefinition
from recipe_scaler.services.fractions import FractionFormatter
from recipe_scaler.services.scaling import ScalingEngine
from recipe_scaler.services.unit_conversion import UnitRegistry


@pytest.fixture
def client():
    """Test client with a fresh rate-limit window."""
    limiter.reset()
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def registry():
    return UnitRegistry()


@pytest.fixture
def parser(registry):
    return IngredientParser(registry=registry)


@pytest.fixture
def engine(registry):
    return ScalingEngine(registry=registry, formatter=FractionFormatter(0.02))


@pytest.fixture
def metric_only_registry():
    """Registry double that only knows grams and milliliters."""
    return UnitRegistry([
        UnitDefinition(name="gram", abbreviations=("g",), system="metric", category="weight", base_conversion=1.0),
        UnitDefinition(name="milliliter", abbreviations=("ml",), system="metric", category="volume", base_conversion=1.0),
    ])
