# app/main.py
import logging

from fastapi import FastAPI

from app.api.routes import router as api_router
from app.config import settings


def _configure_logging() -> None:
    """開発中は必ずコンソールに出したいので、ルートロガーにハンドラを直付け。"""
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter(
                "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
                "%Y-%m-%d %H:%M:%S",
            )
        )
        root.addHandler(handler)
    root.setLevel(settings.log_level.upper())


_configure_logging()

app = FastAPI(title="Financing Site Scanner")

app.include_router(api_router, prefix="/api")


@app.get("/")
def root() -> dict:
    """サービス概要とエンドポイント一覧。"""
    return {
        "service": "Financing Site Scanner",
        "version": "0.1.0",
        "description": "Scans websites to detect financing and quoting offers",
        "endpoints": {
            "POST /api/analyze": "Crawl a site (JSON body: url, include_text)",
            "GET /api/analyze?url=": "Crawl a site via query string",
            "GET /api/analyze?url=x&debug=true": "Also returns extracted text for troubleshooting",
            "POST /api/analyze-page": "Analyze the given page only",
            "GET /api/keywords": "Keyword taxonomy",
            "GET /api/health": "Health check",
        },
    }
