import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import ALLOWED_ORIGINS
from .database import close_firebase, init_firebase
from .domain.clients.router import router as clients_router
from .domain.feedback.router import router as feedback_router
from .domain.scheduling.router import router as scheduling_router
from .domain.settings.router import router as settings_router
from .domain.teams.router import router as team_router
from .exceptions import DomainError, UnavailableError
from .routes.auth import router as auth_router

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("google").setLevel(logging.WARNING)
logging.getLogger("urllib3").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    try:
        init_firebase()
        logger.info("Firebase connection initialized")
    except Exception as e:
        logger.warning(f"Firebase initialization failed - requests will retry on demand: {e}")

    yield
    logger.info("Application shutting down...")
    close_firebase()


app = FastAPI(title="ClientDesk API", version="1.0.0", lifespan=lifespan)


@app.exception_handler(DomainError)
async def domain_exception_handler(request: Request, exc: DomainError):
    """Map domain errors to their HTTP status with a user-safe message"""
    if isinstance(exc, UnavailableError):
        logger.error(f"{request.method} {request.url.path} - {type(exc).__name__}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Convert 422 validation errors from HTTPBearer to 401 authentication errors
    when the issue is with the Authorization header
    """
    for error in exc.errors():
        if error.get("loc") and "authorization" in str(error.get("loc")).lower():
            logger.warning(
                f"Authentication failed for {request.url.path}: Missing or invalid Authorization header"
            )
            return JSONResponse(
                status_code=401,
                content={
                    "detail": "Not authenticated. Please provide a valid Bearer token in the Authorization header."
                },
            )

    logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=422, content=jsonable_errors(exc))


def jsonable_errors(exc: RequestValidationError) -> dict:
    # Validator errors carry the original ValueError in ctx, which is not JSON serializable
    errors = []
    for error in exc.errors():
        error = dict(error)
        if "ctx" in error:
            error["ctx"] = {k: str(v) for k, v in error["ctx"].items()}
        errors.append(error)
    return {"detail": errors}


logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

# Routes
app.include_router(auth_router)
app.include_router(settings_router)
app.include_router(team_router)
app.include_router(clients_router)
app.include_router(feedback_router)
app.include_router(scheduling_router)


@app.get("/")
def root():
    return {"message": "ClientDesk API is running"}


@app.get("/health")
def health():
    return {"status": "healthy"}
