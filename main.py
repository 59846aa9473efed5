from contextlib import asynccontextmanager

from fastapi import FastAPI
from app.routers import posts, sheets
from app.core.config import settings
from app.core.logx import logger
from app.storage.database import init_db


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.AUTO_CREATE_TABLES:
        init_db()
        logger.info("Database tables are ready")
    yield


app = FastAPI(title=settings.PROJECT_NAME, version=settings.PROJECT_VERSION, lifespan=lifespan)

# 注册路由
app.include_router(posts.posts_router)
app.include_router(sheets.sheets_router)

# uvicorn main:app
# uvicorn main:app --reload
@app.get("/")
def root():
    return {"message": f"Welcome to {settings.PROJECT_NAME}"}
