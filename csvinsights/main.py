"""
CSV Insights — FastAPI application entry point.

Run with:  uvicorn csvinsights.main:app --reload
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import datasets
from .core.config import settings
from .middleware import ErrorHandlerMiddleware, RequestLoggerMiddleware

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
)
logger = logging.getLogger("csvinsights")

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
)

# Last added runs outermost: request logging sees the translated error status.
app.add_middleware(ErrorHandlerMiddleware)
app.add_middleware(RequestLoggerMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(datasets.router, prefix=settings.API_PREFIX)


@app.get("/health")
async def health():
    return {"status": "healthy", "version": settings.APP_VERSION}


logger.info("%s %s ready (max_rows=%d, max_charts=%d)",
            settings.APP_NAME, settings.APP_VERSION, settings.MAX_ROWS, settings.MAX_CHARTS)
