"""
Router for unit listing and conversion.
"""

from fastapi import APIRouter, Depends, Request

from ..core.envelope import success
from ..core.errors import AppError, ErrorCode
from ..deps import get_registry
from ..schemas import ApiResponse, UnitConvertRequest, UnitConvertResponse, UnitDefinition
from ..services.unit_conversion import UnitRegistry

router = APIRouter()


@router.get("", response_model=ApiResponse[list[UnitDefinition]])
def list_units(request: Request, registry: UnitRegistry = Depends(get_registry)):
    return success(request, list(registry))


@router.post("/convert", response_model=ApiResponse[UnitConvertResponse])
def convert_units(
    req: UnitConvertRequest,
    request: Request,
    registry: UnitRegistry = Depends(get_registry),
):
    """
    Convert a value between two units of the same category.
    Units are resolved by canonical name or alias; the response uses canonical names.
    """
    source = registry.lookup(req.from_unit)
    target = registry.lookup(req.to_unit)
    value = registry.convert(req.value, req.from_unit, req.to_unit)

    if value is None:
        if source is None or target is None:
            unknown = [u for u, d in ((req.from_unit, source), (req.to_unit, target)) if d is None]
            message = f"Unknown unit: {', '.join(unknown)}"
        else:
            message = f"Cannot convert {source.category} ({source.name}) to {target.category} ({target.name})"
        raise AppError(ErrorCode.VALIDATION_ERROR, message, {"fromUnit": req.from_unit, "toUnit": req.to_unit})

    return success(request, UnitConvertResponse(value=value, from_unit=source.name, to_unit=target.name))
