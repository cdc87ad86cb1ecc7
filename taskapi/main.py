import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .config import CORS_ORIGINS, LOG_FILE, LOG_LEVEL
from .database import create_tables
from .errors import register_error_handlers
from .logging_setup import setup_logging
from .routers import tasks

setup_logging(LOG_LEVEL, LOG_FILE)
logger = logging.getLogger("taskapi.access")

# Create FastAPI app
app = FastAPI(
    title="Task Manager API",
    description="Task CRUD API with filtering, sorting and statistics",
    version="1.0.0",
    docs_url="/api-docs",
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info("%s %s %s %.1fms", request.method, request.url.path, response.status_code, elapsed_ms)
    return response


# Include routers
app.include_router(tasks.router, prefix="/tasks", tags=["tasks"])

# Create tables on startup
@app.on_event("startup")
def on_startup():
    create_tables()

@app.get("/")
def read_root():
    return {"message": "Task Manager API"}

@app.get("/health")
def health_check():
    return {"status": "healthy"}
