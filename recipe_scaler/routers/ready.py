from fastapi import APIRouter, Depends

from ..deps import get_registry
from ..services.unit_conversion import UnitRegistry

router = APIRouter()


@router.get("/ready")
def ready(registry: UnitRegistry = Depends(get_registry)):
    return {"ok": True, "units": len(registry)}
