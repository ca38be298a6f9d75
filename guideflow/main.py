from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from guideflow.config import settings
from guideflow.database import check_health, close_database, init_database
from guideflow.exception_handlers import register_exception_handlers
from guideflow.guides.router import router as guides_router
from guideflow.logging_config import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    await init_database()
    yield
    await close_database()


app = FastAPI(
    title="GuideFlow",
    description="Onboarding guide builder: Markdown and CSV content import",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(guides_router, prefix="/api/v1/guides", tags=["guides"])


@app.get("/api/v1/health")
async def health():
    await check_health()
    return {"status": "healthy"}
