"""Wellness Analytics API - FastAPI application entry point."""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .routes import dashboard, supporters

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Wellness Analytics API",
    description="Read-only API for permission-gated wellness analytics",
    version="1.0.0",
)

# Configure CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

# Include routers
app.include_router(dashboard.router)
app.include_router(supporters.router)


@app.get("/health")
async def health_check():
    """Health check endpoint for the API."""
    return {"status": "healthy", "service": "wellness-analytics-api"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "server.wellness_api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True,
    )
