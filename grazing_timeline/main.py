import logging
from fastapi import FastAPI, APIRouter
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from grazing_timeline import schemas
from grazing_timeline.core.database import engine, init_db
from grazing_timeline.core.settings import settings
from grazing_timeline.api_v1.endpoints import timeline

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(levelname)s - [%(name)s] - %(message)s"
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Starting up Grazing Timeline API...")
    try:
        await init_db()
    except Exception as e:
        logger.error(f"Failed to connect to database: {e}")
        raise

    yield

    # Shutdown
    logger.info("Shutting down Grazing Timeline API...")
    await engine.dispose()

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Timeline data for grazing plans: grazing events and recovery periods per asset or location.",
    version=settings.VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url=f"{settings.API_V1_STR}/docs",
    redoc_url=f"{settings.API_V1_STR}/redoc",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

# Create API v1 router
api_v1_router = APIRouter(prefix=settings.API_V1_STR)
api_v1_router.include_router(timeline.router, prefix="/plan", tags=["Grazing Timeline"])

# Include the v1 router in the main app
app.include_router(api_v1_router)

# Root endpoint
@app.get("/", tags=["Root"])
async def root():
    return {
        "message": f"Welcome to the {settings.PROJECT_NAME}",
        "version": settings.VERSION,
        "docs": f"{settings.API_V1_STR}/docs"
    }

# Health check endpoint
@app.get("/health", response_model=schemas.HealthStatus, tags=["Health"])
async def health_check():
    return schemas.HealthStatus(status="healthy", service="grazing-timeline", version=settings.VERSION)

if __name__ == "__main__":
    import uvicorn
    logger.info("Starting Uvicorn server for development...")
    uvicorn.run(app, host="0.0.0.0", port=8000, log_level="info")
