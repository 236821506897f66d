from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from bookshelf.internal.covers import CoverResolver
from bookshelf.internal.env_settings import Settings
from bookshelf.internal.exceptions import BadRequest, NotFound, StoreUnavailable
from bookshelf.internal.rehost import ImageRehoster
from bookshelf.internal.repositories import LibraryRepository
from bookshelf.internal.sheets import GspreadTable
from bookshelf.internal.sources import UnifiedSearch, default_clients
from bookshelf.internal.storage import S3FileStorage
from bookshelf.routers import api
from bookshelf.util.log import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = Settings()

    rehoster: ImageRehoster | None = None
    if settings.storage.is_configured:
        rehoster = ImageRehoster(S3FileStorage(settings.storage))
    else:
        logger.warning("File storage is not configured, covers will not be rehosted")

    if not settings.sheets.is_configured:
        logger.warning("Google Sheet is not configured, library calls will fail")

    resolver = CoverResolver()
    app.state.repository = LibraryRepository(GspreadTable(settings.sheets))
    app.state.cover_resolver = resolver
    app.state.rehoster = rehoster
    app.state.unified_search = UnifiedSearch(
        default_clients(settings.sources),
        resolver,
        rehoster=rehoster if settings.sources.rehost_search_covers else None,
        default_sources=settings.sources.default_sources,
        max_results=settings.app.search_limit,
    )
    logger.info("Bookshelf started", debug=settings.app.debug)
    yield


app = FastAPI(title="Bookshelf", lifespan=lifespan)
app.include_router(api.router)


@app.exception_handler(BadRequest)
async def bad_request_handler(_: Request, exc: BadRequest):
    return JSONResponse(status_code=400, content={"detail": exc.message})


@app.exception_handler(NotFound)
async def not_found_handler(_: Request, exc: NotFound):
    return JSONResponse(status_code=404, content={"detail": exc.message})


@app.exception_handler(StoreUnavailable)
async def store_unavailable_handler(_: Request, exc: StoreUnavailable):
    logger.error("Library store unavailable", error=exc.message)
    return JSONResponse(status_code=503, content={"detail": exc.message})


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "bookshelf.main:app",
        host="0.0.0.0",
        port=8000,
        reload=Settings().app.debug,
    )
