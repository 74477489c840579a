"""
FastAPI Application
===================
Main entry point for the React Triage API.

Run with:
    uvicorn react_triage.web_api.main:app --reload
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from react_triage import __version__
from react_triage.web_api.config import settings
from react_triage.web_api.routers import health, scan

# Create application
app = FastAPI(
    title="React Triage API",
    description="Health checks for React and Next.js projects",
    version=__version__,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(scan.router, prefix="/scan", tags=["Scan"])


@app.get("/")
async def root():
    """Root endpoint - API info"""
    return {
        "name": "React Triage API",
        "version": __version__,
        "docs": "/docs" if settings.DEBUG else "disabled",
    }


# For running directly: python -m react_triage.web_api.main
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
