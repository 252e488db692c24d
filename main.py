# main.py

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException
import config
from database import ensure_indexes
from models.employee import describe_validation_error
from routers import auth_router, employee_router
from utils.upload_utils import get_upload_root

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    if config.JWT_SECRET == config.DEFAULT_JWT_SECRET:
        logger.warning(
            "JWT_SECRET is the built-in default%s; set JWT_SECRET before exposing this service",
            " and open registration is on" if config.ALLOW_REGISTRATION else "",
        )
    await ensure_indexes()
    yield

def create_app() -> FastAPI:
    app = FastAPI(title="Employee Management", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Errors go out as {"message": ...}, which is what the client displays
    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"message": describe_validation_error(exc)})

    @app.exception_handler(PyMongoError)
    async def storage_error_handler(request: Request, exc: PyMongoError):
        logger.exception("Storage failure on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"message": "Internal server error"})

    app.include_router(auth_router.router)
    app.include_router(employee_router.router)

    # Uploaded images, referenced from records as "uploads/<file>"
    app.mount(
        f"/{config.UPLOAD_URL_PREFIX}",
        StaticFiles(directory=str(get_upload_root())),
        name="uploads",
    )

    @app.get("/")
    def read_root():
        return {"message": "Welcome to Employee Management"}

    return app

app = create_app()
