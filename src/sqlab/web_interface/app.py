# src/sqlab/web_interface/app.py
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sqlab import __version__
from sqlab.config.logging_config import LoggingConfig
from sqlab.database.connection_pool import dispose_global_connection_pool

# Configure logging
logging_config = LoggingConfig()
logging_config.configure()
logger = logging_config.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    dispose_global_connection_pool()
    logger.info("Database engines disposed")


# Create FastAPI app
app = FastAPI(
    title="SQLab API",
    description="Query console backend for SQLab adventures",
    version=__version__,
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Health check endpoint
@app.get("/health")
async def health_check():
    return {
        "status": "ok",
        "api_version": app.version
    }

# Import and include routers
from sqlab.web_interface.routes.database_routes import router as database_router
from sqlab.web_interface.routes.table_routes import router as table_router
from sqlab.web_interface.routes.query_routes import router as query_router

app.include_router(database_router, tags=["database"])
app.include_router(table_router, tags=["tables"])
app.include_router(query_router, tags=["queries"])


# Routes raise HTTPException for SQLab errors; the console reads the message from the "error" field
@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc):
    logger.debug(f"HTTP error {exc.status_code}: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc):
    messages = [f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()]
    logger.warning(f"Invalid request: {messages}")
    return JSONResponse(status_code=400, content={"error": "; ".join(messages)})


@app.exception_handler(Exception)
async def general_exception_handler(request, exc):
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
    return JSONResponse(status_code=500, content={"error": f"Internal server error: {str(exc)}"})
