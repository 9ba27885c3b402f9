from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chronicle import __version__
from chronicle.api.http import health_router, posts_router, search_router
from chronicle.core.config import settings
from chronicle.core.db import init_models
from chronicle.core.logging import configure_logging

configure_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_models()
    yield


app = FastAPI(
    title="Chronicle",
    description="Поиск и курсорная пагинация опубликованных постов",
    version=__version__,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Подключаем роутеры
app.include_router(health_router)
app.include_router(search_router)
app.include_router(posts_router)


@app.get("/")
async def root():
    """Корневой эндпоинт"""
    return {
        "message": "Chronicle API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health"
    }
