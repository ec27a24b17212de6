"""FastAPI application: clinical transcript parsing and extraction API."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from clinical_scribe.config import settings
from clinical_scribe.routes import router

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.llm_enabled:
        logger.info(
            "LLM enhancement configured at: %s (model: %s)",
            settings.llm_base_url,
            settings.llm_model,
        )
    else:
        logger.info("LLM enhancement disabled; using deterministic note generation.")
    yield
    logger.info("Shutting down.")


app = FastAPI(
    title="Clinical Scribe",
    description="Transcript parsing and clinical signal extraction for visit documentation",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


@app.get("/health")
async def health():
    return {
        "status": "ok",
        "llm_enabled": settings.llm_enabled,
        "model": settings.llm_model if settings.llm_enabled else None,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "clinical_scribe.main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
    )
