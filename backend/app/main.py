"""
Meal planner backend: FastAPI service for meal plans and shopping lists.

Run with: uvicorn app.main:app --reload

Architecture:
- Shopping list generation from meal plans (recipe scaling + consolidation)
- Shopping list management (items, check-off, rename, delete)
- Supabase (PostgREST) for persistence
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import get_settings
from app.api import health
from app.api import meal_plans as meal_plans_api
from app.api import shopping_lists as shopping_lists_api
from app.errors import (
    ShoppingListError,
    request_validation_error_handler,
    shopping_list_error_handler,
)

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


app = FastAPI(
    title="meal-planner",
    description="Meal plans and consolidated shopping lists",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(ShoppingListError, shopping_list_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_error_handler)


@app.middleware("http")
async def verify_api_key(request: Request, call_next):
    """Verify API key for /api endpoints."""
    if not request.url.path.startswith("/api/"):
        return await call_next(request)

    # If no key configured, allow all (dev mode)
    if not settings.api_key:
        return await call_next(request)

    if request.headers.get("X-API-Key") != settings.api_key:
        client_host = request.client.host if request.client else "unknown"
        logger.warning(f"Invalid API key attempt from {client_host}")
        return JSONResponse(
            status_code=401,
            content={"error": "Unauthorized", "message": "Invalid or missing API key"},
        )

    return await call_next(request)


# Include routers
app.include_router(health.router, tags=["health"])
app.include_router(meal_plans_api.router)  # /api/meal-plans
app.include_router(shopping_lists_api.router)  # /api/shopping-lists


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "meal-planner",
        "version": "1.0.0",
        "docs": "/docs",
        "endpoints": {
            "health": "/health",
            "meal-plans": "/api/meal-plans",
            "shopping-lists": "/api/shopping-lists",
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=not settings.is_production,
    )
