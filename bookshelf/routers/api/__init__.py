from fastapi import APIRouter

from bookshelf.routers.api.books import router as books_router
from bookshelf.routers.api.search import router as search_router

router = APIRouter(prefix="/api")
# search routes first so /books/search and /books/price win over /books/{record_id}
router.include_router(search_router)
router.include_router(books_router)
