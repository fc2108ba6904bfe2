from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.api.v1 import api_router
from src.core.config import settings
from src.core.database import close_db, init_db
from src.core.exceptions import CodeGenerationExhausted
from src.core.logging import configure_logging

logger = logging.getLogger(__name__)

# where clients should send users after a missing quiz, user or attempt
SAFE_REDIRECT = "/dashboard"


@asynccontextmanager
async def lifespan(_: FastAPI):
    await init_db()
    yield
    close_db()


async def not_found_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code != 404:
        return await http_exception_handler(request, exc)
    return JSONResponse(status_code=404, content={"detail": exc.detail, "redirect": SAFE_REDIRECT})


async def code_exhausted_handler(request: Request, exc: CodeGenerationExhausted):
    logger.error("Quiz creation failed: %s", exc)
    return JSONResponse(
        status_code=503,
        content={"detail": "Could not allocate a quiz code right now. Please try again."},
    )


def make_app():
    configure_logging()
    app = FastAPI(title="QuizCode", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(StarletteHTTPException, not_found_handler)
    app.add_exception_handler(CodeGenerationExhausted, code_exhausted_handler)
    app.include_router(
        api_router,
    )
    return app


app = make_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
        proxy_headers=True,
        forwarded_allow_ips="*",
    )
