"""
FastAPI GuestFlow Landing
Marketing page and waitlist subscription endpoint
"""

import logging
import os
from pathlib import Path
from typing import Dict, Any, List

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, Response
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.subscribe_handler import SubscribeHandler, SubscribeResult, SUBSCRIBERS_KEY
from app.subscriber_store import build_store

load_dotenv()


# ---- Environment / Paths (Vercel-friendly) ----

PROJECT_ROOT = Path(__file__).resolve().parents[1]
TEMPLATES_DIR = PROJECT_ROOT / "templates"

# Vercel KV injects KV_URL; plain Redis deployments usually set REDIS_URL
KV_URL = os.getenv("KV_URL") or os.getenv("REDIS_URL", "")
SUBSCRIBE_PATH = "/api/subscribe"
SUBSCRIBERS_COLLECTION = os.getenv("SUBSCRIBERS_KEY", SUBSCRIBERS_KEY)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# getLevelName returns a string for names it does not know
if not isinstance(logging.getLevelName(LOG_LEVEL), int):
    LOG_LEVEL = "INFO"

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# Initialize FastAPI app
app = FastAPI(
    title="GuestFlow",
    description="Landing page and launch waitlist for GuestFlow",
    version="1.0.0"
)

# Add CORS middleware (configure allowed origins via env var)
origins_raw = os.getenv("CORS_ALLOW_ORIGINS", "*")
allow_origins: List[str] = [o.strip() for o in origins_raw.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins if allow_origins else ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# Initialize handlers
subscriber_store = build_store(KV_URL)
subscribe_handler = SubscribeHandler(subscriber_store, collection=SUBSCRIBERS_COLLECTION)


# Serve templates directory as static (page script)
if TEMPLATES_DIR.exists():
    app.mount("/static", StaticFiles(directory=str(TEMPLATES_DIR)), name="static")


@app.get("/", response_class=HTMLResponse)
async def home():
    """
    Serve the landing page

    Returns:
        HTML page with hero, features, pricing and the email form
    """
    html_path = TEMPLATES_DIR / "index.html"

    if not html_path.exists():
        raise HTTPException(status_code=500, detail="Template file not found")

    with open(html_path, 'r', encoding='utf-8') as file:
        html_content = file.read()

    return HTMLResponse(content=html_content)


@app.get("/health")
async def health_check() -> Dict[str, Any]:
    """
    Health check endpoint for monitoring

    Returns:
        Status message and the configured store backend
    """
    return {
        "status": "running",
        "store": subscriber_store.backend,
        "collection": SUBSCRIBERS_COLLECTION,
    }


def _to_response(result: SubscribeResult) -> Response:
    if result.media_type == "text/plain":
        return PlainTextResponse(result.payload, status_code=result.status_code)
    return JSONResponse(result.payload, status_code=result.status_code)


@app.api_route(
    SUBSCRIBE_PATH,
    methods=["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"],
)
async def subscribe(request: Request) -> Response:
    """
    Add an email to the launch waitlist

    Body:
        {"email": "user@example.com"}

    Returns:
        200/400/500 with {"message": ...}, or 405 as plain text for non-POST
    """
    body = await request.body()
    return _to_response(subscribe_handler.handle(request.method, body))


@app.exception_handler(StarletteHTTPException)
async def method_not_allowed_handler(request: Request, exc: StarletteHTTPException) -> Response:
    """
    Answer methods the subscribe route does not list (TRACE, custom verbs)
    with the same plain-text 405 as the listed ones
    """
    if exc.status_code == 405 and request.url.path == SUBSCRIBE_PATH:
        return _to_response(subscribe_handler.handle(request.method, b""))
    return await http_exception_handler(request, exc)


# Run with: uvicorn app.main:app --reload
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
