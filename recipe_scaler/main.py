# Recipe Scaler API Main Entry Point
import logging
import sys
import time
import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from .core.errors import register_exception_handlers
from .routers.ingredients import router as ingredients_router
from .routers.ready import router as ready_router
from .routers.recipes import router as recipes_router
from .routers.units import router as units_router
from .settings import settings

# Configure structured logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger("recipe_scaler")

# Rate limiter (per-IP)
limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])

app = FastAPI(title=settings.app_name, version="0.1.0")
app.state.limiter = limiter
register_exception_handlers(app)

app.add_middleware(SlowAPIMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def stamp_request(request: Request, call_next):
    """Request id and start time for the response envelope meta."""
    request.state.request_id = request.headers.get("X-Request-Id") or str(uuid.uuid4())
    request.state.started_at = time.perf_counter()
    response = await call_next(request)
    response.headers["X-Request-Id"] = request.state.request_id
    return response


app.include_router(ready_router, prefix="/api", tags=["ready"])
app.include_router(ingredients_router, prefix="/api/ingredients", tags=["ingredients"])
app.include_router(recipes_router, prefix="/api/recipes", tags=["recipes"])
app.include_router(units_router, prefix="/api/units", tags=["units"])
