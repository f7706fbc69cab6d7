import logging

from fastapi import FastAPI, Query
from fastapi.exceptions import RequestValidationError
from fastapi.requests import Request
from fastapi.responses import JSONResponse

from prompt_catalog import config, core, loader, models

logger = logging.getLogger(__name__)


app = FastAPI(title="Prompt Catalog")

_ERROR_RESPONSES = {
    400: {"model": models.ErrorResponse},
    404: {"model": models.ErrorResponse},
}


@app.exception_handler(loader.ContentError)
async def content_error_handler(request: Request, exc: loader.ContentError) -> JSONResponse:
    logger.error(f"Content error: {exc}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"status": "error", "message": exc.message},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    messages = "; ".join(
        f"{'.'.join(str(loc) for loc in e['loc'])}: {e['msg']}" for e in exc.errors()
    )
    return JSONResponse(
        status_code=422,
        content={"status": "error", "message": messages},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error")
    return JSONResponse(
        status_code=500,
        content={"status": "error", "message": "Internal server error"},
    )


@app.get("/")
async def root():
    return {
        "service": "Prompt Catalog",
        "usage": "GET /content?category=agents, GET /search?q=review, GET /files/{path}",
        "docs": "/docs",
    }


@app.get("/content", response_model=list[models.FileTreeItem])
def content(category: str = config.ALL_TAB) -> list[models.FileTreeItem]:
    return core.get_filtered_content(category)


@app.get("/stats", response_model=models.StatsResponse)
def stats() -> models.StatsResponse:
    return core.get_content_stats()


@app.get("/definitions", response_model=models.ContentDefinitions)
def definitions() -> models.ContentDefinitions:
    return core.get_definitions()


@app.get("/search", response_model=list[models.FileTreeItem])
def search(q: str = Query(min_length=1)) -> list[models.FileTreeItem]:
    return core.search(q)


@app.get("/files/{path:path}", response_model=models.FileContentResponse, responses=_ERROR_RESPONSES)
def file_content(path: str) -> models.FileContentResponse:
    return models.FileContentResponse(path=path, content=core.get_file_content(path))


@app.get("/index", response_model=models.ContentIndex)
def index() -> models.ContentIndex:
    return core.build_content_index()


@app.post("/reload")
def reload():
    core.reload()
    return {"status": "ok"}
