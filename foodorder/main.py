"""
Food Ordering System - FastAPI Backend
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from foodorder.core.config import settings
from foodorder.core.database import engine
from foodorder.core.errors import ERROR_STATUS_CODES, FoodOrderError
from foodorder.api import admin, auth, food, orders
from foodorder.seed import init_db

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("Database ready")
    yield

# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Order placement, lifecycle tracking and admin panel API",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware; the session token travels in a custom header
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[settings.SESSION_HEADER],
)

@app.exception_handler(FoodOrderError)
async def foodorder_error_handler(request: Request, exc: FoodOrderError) -> JSONResponse:
    """Map FoodOrderError subclasses to HTTP responses."""
    status_code = ERROR_STATUS_CODES.get(type(exc), 500)
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "error_type": type(exc).__name__},
    )

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are reported as InvalidInput."""
    return JSONResponse(
        status_code=400,
        content={"detail": jsonable_encoder(exc.errors()), "error_type": "InvalidInput"},
    )

app.include_router(auth.router, prefix=settings.API_PREFIX)
app.include_router(orders.router, prefix=settings.API_PREFIX)
app.include_router(admin.router, prefix=settings.API_PREFIX)
app.include_router(food.router, prefix=settings.API_PREFIX)

# Health check endpoint
@app.get(f"{settings.API_PREFIX}/health")
async def health_check():
    """Health check endpoint"""
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.error("Health check failed", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "status": "unhealthy",
                "database": "disconnected",
                "timestamp": datetime.now().isoformat(),
            },
        )
    return {"status": "healthy", "database": "connected", "timestamp": datetime.now().isoformat()}

# API version info
@app.get("/")
async def root():
    """API root endpoint"""
    return {
        "message": "Food Ordering System API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": f"{settings.API_PREFIX}/health",
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("foodorder.main:app", host="0.0.0.0", port=8000)
