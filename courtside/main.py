import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import models  # noqa: F401 - register tables with Base
from .config import ALLOWED_ORIGINS
from .database import create_tables, engine
from .domain.coaches.router import router as coach_profiles_router
from .domain.equipment.router import router as equipment_router
from .domain.equipment_bookings.router import router as equipment_bookings_router
from .domain.facilities.router import router as facilities_router
from .domain.facility_bookings.router import router as facility_bookings_router
from .domain.reviews.router import router as reviews_router
from .domain.sessions.router import router as sessions_router
from .domain.users.router import router as users_router
from .shared.exceptions import DomainException

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("botocore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    create_tables(engine)

    yield
    logger.info("Application shutting down...")


app = FastAPI(title="Courtside API", version="1.0.0", lifespan=lifespan)


@app.exception_handler(DomainException)
async def domain_exception_handler(request: Request, exc: DomainException):
    if exc.status_code >= 500:
        logger.error(f"❌ {request.method} {request.url.path}: {exc.code} - {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path}: {exc.status_code} {exc.code}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": {"message": exc.message, "code": exc.code, "details": exc.details}},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=422, content={"detail": jsonable_errors(exc)})


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    """Pydantic error ctx can hold exception objects; keep only what serializes"""
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]


@app.middleware("http")
async def log_requests(request: Request, call_next):
    try:
        response = await call_next(request)
        return response
    except Exception as e:
        logger.error(f"{request.method} {request.url.path} - Error: {str(e)}")
        raise


logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

# Routes
app.include_router(users_router)
app.include_router(facilities_router)
app.include_router(facility_bookings_router)
app.include_router(equipment_router)
app.include_router(equipment_bookings_router)
app.include_router(coach_profiles_router)
app.include_router(sessions_router)
app.include_router(reviews_router)


@app.get("/")
def root():
    return {"message": "Courtside API is running"}


@app.get("/health")
def health():
    return {"status": "healthy"}
