# app/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.exceptions import Conflict, InvalidArgument, NotFound, StoreFailure

# Import every model so Base.metadata knows all tables
from app.db.base_class import Base
from app.db.session import engine
from app.models.user import User  # noqa: F401
from app.models.friendship import Friendship  # noqa: F401

from app.routers import auth, friends

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create any missing tables on startup
    Base.metadata.create_all(bind=engine)
    logger.info("%s started", settings.PROJECT_NAME)
    yield
    logger.info("%s shutting down", settings.PROJECT_NAME)


app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message, **extra})


@app.exception_handler(InvalidArgument)
def invalid_argument_handler(request: Request, exc: InvalidArgument):
    return _error(400, exc.message)


@app.exception_handler(Conflict)
def conflict_handler(request: Request, exc: Conflict):
    return _error(400, exc.message, status=exc.status)


@app.exception_handler(NotFound)
def not_found_handler(request: Request, exc: NotFound):
    return _error(404, exc.message)


@app.exception_handler(RequestValidationError)
def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    field = ".".join(str(part) for part in errors[0]["loc"][1:]) if errors else ""
    message = f"Invalid value for {field}" if field else "Invalid request"
    return _error(400, message, errors=jsonable_encoder(errors))


@app.exception_handler(StoreFailure)
def store_failure_handler(request: Request, exc: StoreFailure):
    logger.error("Store failure on %s %s", request.method, request.url.path)
    return _error(500, "Internal server error")


app.include_router(auth.router, prefix=f"{settings.API_PREFIX}/auth", tags=["auth"])
app.include_router(friends.router, prefix=f"{settings.API_PREFIX}/friends", tags=["friends"])


@app.get("/")
def read_root():
    return {"message": f"{settings.PROJECT_NAME} is running!"}
