import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from docshelf.api.http import documents_router, search_router
from docshelf.config import settings
from docshelf.core.db import init_models
from docshelf.core.errors import DocshelfError, NotFound, StorageFailure, ValidationFailure

logger = logging.getLogger(__name__)


def configure_logging(level: str = settings.LOG_LEVEL) -> None:
    """Настройка корневого логгера"""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    await init_models()
    logger.info("docshelf started")
    yield


app = FastAPI(
    title="docshelf",
    description="Хранение, просмотр и поиск документов по категориям и тегам",
    version="1.0.0",
    lifespan=lifespan
)

# Настройка CORS для работы с frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # В продакшене указать конкретные домены
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def error_body(exc: DocshelfError) -> dict:
    """Тело ответа: сообщение в detail и структурированная ошибка"""
    return {"detail": exc.message, "error": exc.to_dict()}


@app.exception_handler(ValidationFailure)
async def validation_failure_handler(request: Request, exc: ValidationFailure):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error_body(exc))


@app.exception_handler(NotFound)
async def not_found_handler(request: Request, exc: NotFound):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=error_body(exc))


@app.exception_handler(StorageFailure)
async def storage_failure_handler(request: Request, exc: StorageFailure):
    logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An error occurred while accessing documents."}
    )


# Подключаем роутеры
app.include_router(documents_router)
app.include_router(search_router)


@app.get("/")
async def root():
    """Корневой эндпоинт"""
    return {
        "message": "docshelf API",
        "version": "1.0.0",
        "docs": "/docs"
    }
