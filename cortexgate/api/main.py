import os
import time
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from typing import Optional

from cortexgate.config.settings import get_settings
from cortexgate.storage.repository import list_items
from cortexgate.archiver.archive_service import (
    ItemNotFound,
    archive_item,
    discard_item,
    display_path,
)
from cortexgate.utils.logging_setup import setup_logging

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

MIME_TYPES = {
    ".html": "text/html",
    ".css": "text/css",
    ".js": "application/javascript",
    ".json": "application/json",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
}
DEFAULT_MIME_TYPE = "application/octet-stream"
INDEX_DOCUMENT = "index.html"


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    s = get_settings()
    logger.info("CortexGate server")
    logger.info("  Dashboard:    http://localhost:%s", s.port)
    logger.info("  Inbox:        %s", s.inbox_dir)
    logger.info("  Second Brain: %s", s.second_brain_dir)
    yield
    logger.info("Shutting down...")


#%% APP

app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type"],
)
# Compressão gzip para a listagem de itens
app.add_middleware(GZipMiddleware, minimum_size=512)


@app.middleware("http")
async def cors_and_request_log(request: Request, call_next):
    # Preflight: qualquer OPTIONS responde 204 sem corpo
    if request.method == "OPTIONS":
        return Response(status_code=204, headers=CORS_HEADERS)

    logger.info("%s %s", request.method, request.url.path)
    response = await call_next(request)
    for key, value in CORS_HEADERS.items():
        response.headers.setdefault(key, value)
    return response


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    # erros do roteamento (405 etc.) no mesmo formato {error: ...} da API
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=exc.headers)


@app.exception_handler(ItemNotFound)
async def item_not_found_handler(request: Request, exc: ItemNotFound):
    return JSONResponse({"error": "Item not found"}, status_code=404)


@app.exception_handler(Exception)
async def internal_error_handler(request: Request, exc: Exception):
    logger.exception("Error handling %s %s", request.method, request.url.path)
    return JSONResponse(
        {"error": "Internal server error"}, status_code=500, headers=CORS_HEADERS
    )


@app.get("/health")
def health():
    return {"status": "ok", "ts": int(time.time())}


@app.get("/api/items")
def api_list_items():
    try:
        items = list_items()
    except OSError:
        logger.exception("Error listing items")
        return JSONResponse({"error": "Failed to list items"}, status_code=500)
    return [item.as_written() for item in items]


# POST
@app.post("/api/save/{item_id}")
def api_save_item(item_id: str):
    try:
        result = archive_item(item_id)
    except OSError:
        logger.exception("Error saving item %s", item_id)
        return JSONResponse({"error": "Failed to save item"}, status_code=500)
    return {"success": True, "saved_to": display_path(result.saved_to)}


# DELETE
@app.delete("/api/dismiss/{item_id}")
def api_dismiss_item(item_id: str):
    try:
        discard_item(item_id)
    except OSError:
        logger.exception("Error dismissing item %s", item_id)
        return JSONResponse({"error": "Failed to dismiss item"}, status_code=500)
    return {"success": True}


def resolve_static_path(root: str, url_path: str) -> Optional[str]:
    """
    Caminho absoluto do arquivo estático, ou None se escapar da raiz.
    """
    rel = url_path.lstrip("/") or INDEX_DOCUMENT
    root = os.path.realpath(root)
    full = os.path.realpath(os.path.join(root, rel))
    if os.path.commonpath([root, full]) != root:
        return None
    return full


# Static (sempre por último: captura qualquer outro caminho)
@app.get("/{url_path:path}")
def static_files(url_path: str):
    file_path = resolve_static_path(get_settings().static_dir, url_path)
    if file_path is None:
        return PlainTextResponse("Forbidden", status_code=403)
    if not os.path.isfile(file_path):
        return PlainTextResponse("Not Found", status_code=404)

    ext = os.path.splitext(file_path)[1].lower()
    return FileResponse(file_path, media_type=MIME_TYPES.get(ext, DEFAULT_MIME_TYPE))


def run():
    import uvicorn
    s = get_settings()
    uvicorn.run("cortexgate.api.main:app", host=s.host, port=s.port)


if __name__ == "__main__":
    run()
