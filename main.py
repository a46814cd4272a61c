from fastapi import FastAPI
from fastapi.responses import JSONResponse

# Internal imports
from config import config
from data.database import create_tables
from api.experiment_routes import experiment_router
from api.conversion_routes import conversion_router

import contextlib
import logging
import middleware

logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Handles startup and shutdown events for the application.
    Code before 'yield' runs on startup.
    Code after 'yield' runs on shutdown.
    """
    logger.info("Application starting up: %s", config)
    try:
        create_tables()
        logger.info("Database tables initialized successfully.")
    except Exception as e:
        # The conversion mirror is best-effort; assignments keep working without it
        logger.error("Failed to initialize database tables: %s", e)

    yield

    logger.info("Application shutting down.")

# --- FastAPI App Initialization ---
app = FastAPI(
    lifespan=lifespan,
    title="Experiment Assignment API",
    version="1.0.0",
    description="A/B testing feature flags: sticky variant assignment, conversion tracking, and results."
)

# Add the middleware to the application
app.add_middleware(middleware.RequestIDMiddleware)

app.include_router(experiment_router)
app.include_router(conversion_router)


@app.get("/health")
def health_check():
    return JSONResponse(content={"status": "healthy"}, status_code=200)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
