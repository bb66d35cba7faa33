# jobbee/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.middleware import SlowAPIMiddleware

from jobbee.api.errors import register_exception_handlers
from jobbee.api.limiter import limiter
from jobbee.api.routes import auth, jobs, users
from jobbee.config import Config
from jobbee.database.mongodb import MongoDB
from jobbee.services.geocoder import create_geocoder
from jobbee.services.mailer import create_mailer

logging.basicConfig(level=Config.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the process-wide collaborators once and share them through app.state."""
    app.state.mongodb = MongoDB()
    app.state.geocoder = create_geocoder()
    app.state.mailer = create_mailer()
    logger.info(f"Jobbee API started in {Config.ENVIRONMENT} mode")
    yield
    app.state.mongodb.close()


# Initialize FastAPI app
app = FastAPI(
    title="Jobbee API",
    description="Job board API: accounts, job postings, geospatial search and resume applications",
    version="1.0.0",
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include API routers
app.include_router(jobs.router, prefix="/api/v1", tags=["Jobs"])
app.include_router(auth.router, prefix="/api/v1", tags=["Auth"])
app.include_router(users.router, prefix="/api/v1", tags=["Users"])


@app.get("/")
async def root():
    return {"status": "active", "message": "Jobbee API is running"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
