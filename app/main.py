"""
Migrant Legal Guide API
Legal assistant chat, document scanning and translation for migrant workers
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.api.routes import functions, chats, documents, directory, health
from app.core.config import settings
from app.core.database import engine
# Import all models to ensure they're registered with Base
from app.models import Base, Chat, Message, Document, Contact, Profile  # noqa: F401
from app.middleware.rate_limiting import RateLimitingMiddleware
from app.middleware.logging import StructuredLoggingMiddleware
from app.middleware.error_handling import ErrorHandlingMiddleware
from app.middleware.preflight import FunctionPreflightMiddleware
import logging
import os

app = FastAPI(
    title="Migrant Legal Guide API",
    description="Legal guidance for migrant workers: chat, document analysis, translation and contacts",
    version="1.0.0"
)

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


@app.on_event("startup")
async def startup_event():
    """Create database tables and check upstream configuration on startup"""
    try:
        logging.info("Starting database initialization...")

        # Missing keys are a warning only; the affected routes answer with errors
        if not (settings.ai_gateway_api_key or os.getenv("AI_GATEWAY_API_KEY")):
            logging.warning(
                "AI gateway API key is not configured. "
                "Document analysis and translation will not work without AI_GATEWAY_API_KEY."
            )
        if not (settings.dify_api_key or os.getenv("DIFY_API_KEY")):
            logging.warning("Dify API key is not configured. Chat will not work without DIFY_API_KEY.")

        Base.metadata.create_all(bind=engine)
        os.makedirs(settings.storage_path, exist_ok=True)
        logging.info("Database tables created successfully")

        from app.services.rate_limiter import rate_limiter
        rate_limiter.reset()
    except Exception as e:
        logging.error(f"Database initialization failed: {str(e)}")
        raise RuntimeError(f"Failed to initialize database: {str(e)}")


# Add middleware (order matters - last added is first executed)
# Error handling middleware sits innermost so the logging middleware sees its responses
app.add_middleware(ErrorHandlingMiddleware)

if settings.rate_limit_enabled:
    app.add_middleware(RateLimitingMiddleware)

app.add_middleware(StructuredLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Function preflights are answered before CORSMiddleware sees them
app.add_middleware(FunctionPreflightMiddleware)

# Include routers
app.include_router(functions.router, prefix="/api/functions", tags=["functions"])
app.include_router(chats.router, prefix="/api", tags=["chats"])
app.include_router(documents.router, prefix="/api", tags=["documents"])
app.include_router(directory.router, prefix="/api", tags=["directory"])
app.include_router(health.router, tags=["health"])


@app.get("/")
async def root():
    return {"message": "Migrant Legal Guide API is running"}
