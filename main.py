"""
ConceptGraph - AI-Assisted Concept Map Service (FastAPI)
========================================================

Async web service that turns AI-generated topic lists into non-overlapping,
horizontally growing concept maps and grows them on demand.

Version: See VERSION file (centralized version management)

Features:
- FastAPI with Pydantic models for type safety
- Uvicorn ASGI server
- Auto-generated OpenAPI documentation at /docs (DEBUG only)
- Unified colored logging to console and rotating log files
"""

import os
import sys
import io
import logging
from logging.handlers import TimedRotatingFileHandler
import time
from contextlib import asynccontextmanager
from dotenv import load_dotenv
from utils.env_utils import ensure_utf8_env_file

# Ensure .env file is UTF-8 encoded before loading
ensure_utf8_env_file()
# Load environment variables
load_dotenv()

# Create logs directory
os.makedirs("logs", exist_ok=True)

# Import config early (needed for logging setup)
from config.settings import config

# ============================================================================
# EARLY LOGGING SETUP
# ============================================================================

class UnifiedFormatter(logging.Formatter):
    """Unified logging formatter with ANSI color support."""

    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARN': '\033[33m',     # Yellow
        'ERROR': '\033[31m',    # Red
        'CRIT': '\033[35m',     # Magenta
        'RESET': '\033[0m',     # Reset
        'BOLD': '\033[1m',      # Bold
    }

    def format(self, record):
        timestamp = self.formatTime(record, '%H:%M:%S')

        level_map = {
            'DEBUG': 'DEBUG',
            'INFO': 'INFO',
            'WARNING': 'WARN',
            'ERROR': 'ERROR',
            'CRITICAL': 'CRIT'
        }
        level_name = level_map.get(record.levelname, record.levelname)

        color = self.COLORS.get(level_name, '')
        reset = self.COLORS['RESET']

        if level_name == 'CRIT':
            colored_level = f"{self.COLORS['BOLD']}{color}{level_name.ljust(5)}{reset}"
        else:
            colored_level = f"{color}{level_name.ljust(5)}{reset}"

        # Source abbreviation
        source = record.name
        if source == '__main__' or source == 'main':
            source = 'MAIN'
        elif source.startswith('routers'):
            source = 'API'
        elif source.startswith('config'):
            source = 'CONF'
        elif source.startswith('uvicorn'):
            source = 'SRVR'
        elif source == 'asyncio':
            source = 'ASYN'
        elif source.startswith('clients'):
            source = 'CLIE'
        elif source.startswith('services'):
            source = 'SERV'
        elif source.startswith('agents'):
            source = 'AGNT'
        elif source.startswith('openai'):
            source = 'OPEN'
        else:
            source = source[:4].upper()

        source = source.ljust(4)

        message = f"[{timestamp}] {colored_level} | {source} | {record.getMessage()}"
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return message

# Configure logging
unified_formatter = UnifiedFormatter()

# Use UTF-8 encoding for console output to handle accented characters
if hasattr(sys.stdout, 'buffer'):
    console_handler = logging.StreamHandler(
        io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8', line_buffering=True)
    )
else:
    console_handler = logging.StreamHandler(sys.stdout)
console_handler.setFormatter(unified_formatter)

# New log file every 3 days, 10 files kept
file_handler = TimedRotatingFileHandler(
    os.path.join("logs", "app.log"),
    when="D",
    interval=3,
    backupCount=10,
    encoding="utf-8"
)
file_handler.setFormatter(unified_formatter)

# Determine log level (override with DEBUG if VERBOSE_LOGGING is enabled)
if config.VERBOSE_LOGGING:
    log_level_str = 'DEBUG'
else:
    log_level_str = config.LOG_LEVEL
log_level = getattr(logging, log_level_str, logging.INFO)

logging.basicConfig(
    level=log_level,
    handlers=[console_handler, file_handler],
    force=True
)

# Configure Uvicorn's loggers to use our custom formatter
for uvicorn_logger_name in ['uvicorn', 'uvicorn.error']:
    uvicorn_logger = logging.getLogger(uvicorn_logger_name)
    uvicorn_logger.handlers = []  # Remove default handlers
    uvicorn_logger.addHandler(console_handler)
    uvicorn_logger.addHandler(file_handler)
    uvicorn_logger.propagate = False

# Create main logger early
logger = logging.getLogger(__name__)

# Suppress verbose HTTP client logs
logging.getLogger('httpx').setLevel(logging.WARNING)
logging.getLogger('httpcore').setLevel(logging.WARNING)
logging.getLogger('openai').setLevel(logging.WARNING)

logger.debug(f"Logging initialized: {log_level_str}")

# ============================================================================
# FASTAPI APPLICATION IMPORTS
# ============================================================================

from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from models import HealthResponse
from services.concept_map_session import session_manager
from services.llm_service import llm_service

# ============================================================================
# LIFESPAN CONTEXT (Startup/Shutdown Events)
# ============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    Handles application initialization and cleanup.
    """
    # Startup
    app.state.start_time = time.time()

    logger.info("=" * 80)
    logger.info("ConceptGraph Starting")
    logger.info("=" * 80)

    llm_service.initialize()

    yield

    # Shutdown
    logger.info("Shutting down...")
    session_manager.cleanup()
    llm_service.cleanup()

# ============================================================================
# FASTAPI APPLICATION INITIALIZATION
# ============================================================================

app = FastAPI(
    title="ConceptGraph API",
    description="AI-assisted hierarchical concept maps with FastAPI + Uvicorn",
    version=config.VERSION,
    # Swagger UI only in DEBUG mode
    docs_url="/docs" if config.DEBUG else None,
    redoc_url="/redoc" if config.DEBUG else None,
    lifespan=lifespan
)

# ============================================================================
# MIDDLEWARE CONFIGURATION
# ============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if config.DEBUG else [f"http://localhost:{config.PORT}"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Custom Request/Response Logging Middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """
    Log all HTTP requests and responses with timing information.
    """
    start_time = time.time()

    response = await call_next(request)

    response_time = time.time() - start_time
    client_host = request.client.host if request.client else "-"
    logger.debug(f"Request: {request.method} {request.url.path} from {client_host} Response: {response.status_code} in {response_time:.3f}s")

    # Generation and expansion wait on the LLM, typically 3-15s
    if request.url.path.startswith('/api/concept_map') and request.method == 'POST' and response_time > 20:
        logger.warning(f"Slow concept map request: {request.method} {request.url.path} took {response_time:.3f}s")
    elif not request.url.path.startswith('/api/concept_map') and response_time > 5:
        logger.warning(f"Slow request: {request.method} {request.url.path} took {response_time:.3f}s")

    return response

# ============================================================================
# GLOBAL EXCEPTION HANDLERS
# ============================================================================

@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """
    Handle HTTP exceptions.

    Returns FastAPI-standard format: {"detail": "error message"}
    """
    logger.warning(f"HTTP {exc.status_code}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail}
    )

@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle all unhandled exceptions"""
    logger.error(f"Unhandled exception: {type(exc).__name__}: {exc}", exc_info=True)

    error_response = {"error": "An unexpected error occurred. Please try again later."}

    # Add debug info in development mode
    if config.DEBUG:
        error_response["debug"] = str(exc)

    return JSONResponse(
        status_code=500,
        content=error_response
    )

# ============================================================================
# BASIC HEALTH CHECK ROUTES
# ============================================================================

@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Basic health check endpoint"""
    return HealthResponse(
        status="ok",
        version=config.VERSION,
        sessions=session_manager.count(),
        llm=llm_service.get_status(),
    )

# ============================================================================
# ROUTER REGISTRATION
# ============================================================================

from routers import concept_map

app.include_router(concept_map.router)

# ============================================================================
# APPLICATION ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    logger.info("=" * 80)
    logger.info("Starting FastAPI application with Uvicorn")
    logger.info(f"Server: http://{config.HOST}:{config.PORT}")
    if config.DEBUG:
        logger.info(f"API Docs: http://{config.HOST}:{config.PORT}/docs")
    logger.info("=" * 80)

    try:
        uvicorn.run(
            "main:app",
            host=config.HOST,
            port=config.PORT,
            reload=config.DEBUG,  # Auto-reload in debug mode
            log_level="info",
            log_config=None,  # Use our custom logging configuration
            timeout_graceful_shutdown=5,
            timeout_keep_alive=5
        )
    except KeyboardInterrupt:
        logger.info("Shutting down gracefully...")
