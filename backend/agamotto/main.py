# agamotto/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .config import settings
from .database import SessionLocal, init_db
from .logging_config import setup_logging
from .services.record_store import SQLRecordStore

# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="""
    ## Agamotto Time Tracker

    Personal time tracking backend: stopwatch sessions, tags, analytics and
    CSV backup/migration.

    ### Features:
    * **Sessions**: Save stopwatch sessions (one active/paused session at a time)
    * **Tags**: Named categories with unique colors from a fixed palette
    * **Import/Export**: CSV round trip with duplicate suppression and automatic tag creation
    * **Statistics**: Per-tag daily mean, median, mode, variance, z-scores and outlier filtering

    ### CSV Format:
    `Date,Time,Title,Duration (seconds),Rating,Comment,Tag,State`
    * **Date**: DD/MM/YYYY
    * **Time**: HH:MM:SS (24-hour)
    * **State**: completed, aborted or not_started

    ### Import Results:
    * **success**: Every row imported
    * **warning**: Some rows failed, were duplicates, or lost their tag
    * **error**: Nothing imported (invalid file or tag limit reached)
    """,
    debug=settings.DEBUG,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {
            "name": "sessions",
            "description": "Session management - List, read and save tracked sessions"
        },
        {
            "name": "tags",
            "description": "Tag management - Create, list and delete colored tags"
        },
        {
            "name": "transfer",
            "description": "CSV import and export"
        },
        {
            "name": "statistics",
            "description": "Per-tag analytics"
        },
        {
            "name": "config",
            "description": "Application state key/value entries"
        },
        {
            "name": "system",
            "description": "System endpoints - Health checks and API information"
        }
    ]
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Startup event
@app.on_event("startup")
async def startup_event():
    """Initialize logging, database tables and default tags"""
    # Setup logging first (creates log files)
    logger = setup_logging()
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")

    # Initialize database
    init_db()
    logger.info("Database initialized successfully")

    store = SQLRecordStore(SessionLocal())
    try:
        created = await store.initialize_default_tags()
        if created:
            logger.info(f"Seeded {created} default tags")
    finally:
        store.close()

# Shutdown event
@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown"""
    import logging
    logger = logging.getLogger(__name__)
    logger.info(f"Shutting down {settings.APP_NAME}...")

# Health check endpoint
@app.get("/health", tags=["system"])
async def health_check():
    """
    System Health Check

    Returns the current system status and version information.
    """
    return {
        "status": "healthy",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION
    }

# Root endpoint
@app.get("/", tags=["system"])
async def root():
    """
    API Root Information

    Welcome endpoint with basic API information and navigation links.
    """
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "redoc": "/redoc",
        "health": "/health"
    }

# Include API routers
from .api import sessions, tags, transfer, statistics, config

app.include_router(sessions.router, prefix="/api/sessions", tags=["sessions"])
app.include_router(tags.router, prefix="/api/tags", tags=["tags"])
app.include_router(transfer.router, prefix="/api/transfer", tags=["transfer"])
app.include_router(statistics.router, prefix="/api/statistics", tags=["statistics"])
app.include_router(config.router, prefix="/api/config", tags=["config"])
