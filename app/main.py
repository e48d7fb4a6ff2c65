import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator

from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.api.v1 import community, member
from app.core.logging import RequestLoggingMiddleware, setup_logging
from app.models.database import get_db, get_engine

from engine.community import CommunityEngineError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    yield
    await get_engine().dispose()


async def engine_error_handler(request: Request, exc: CommunityEngineError) -> JSONResponse:
    logger.warning("Forecast engine rejected input on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": str(exc), "error": type(exc).__name__},
    )


def create_app() -> FastAPI:
    setup_logging(json_format=settings.log_json)

    application = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.cors_origins.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_middleware(RequestLoggingMiddleware)

    application.add_exception_handler(CommunityEngineError, engine_error_handler)

    application.include_router(
        community.router, prefix="/api/v1/community", tags=["community"]
    )
    application.include_router(member.router, prefix="/api/v1/member", tags=["member"])

    @application.get("/health")
    async def health_check(db: AsyncSession = Depends(get_db)) -> dict:
        result: dict = {"status": "ok", "services": {}}

        try:
            await db.execute(text("SELECT 1"))
            result["services"]["database"] = "ok"
        except Exception as e:
            result["services"]["database"] = f"error: {e}"
            result["status"] = "degraded"

        return result

    return application


app = create_app()
