from datetime import datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.models.base import Base
from app.models.post import PostStatus
from app.schemas.post import PostEntity, SheetEntity
from app.service.post_svc import PostService, SheetService
from app.storage.post.SQLAlchemyPostRepository import SQLAlchemyPostRepository, SQLAlchemySheetRepository

FIXED_NOW = datetime(2024, 5, 1, 12, 0, 0)


@pytest.fixture
def engine():
    # 内存库 + StaticPool，保证所有连接看到同一个数据库
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def post_repo(db):
    return SQLAlchemyPostRepository(db)


@pytest.fixture
def sheet_repo(db):
    return SQLAlchemySheetRepository(db)


@pytest.fixture
def post_service(post_repo):
    return PostService(post_repo, clock=lambda: FIXED_NOW)


@pytest.fixture
def sheet_service(sheet_repo):
    return SheetService(sheet_repo, clock=lambda: FIXED_NOW)


def _insert(repo, entity, visits: int, likes: int):
    # 计数器只能通过原子自增写入
    created = repo.create(entity)
    if visits:
        repo.update_visit(visits, created.id)
    if likes:
        repo.update_likes(likes, created.id)
    return repo.get_by_id(created.id)


@pytest.fixture
def make_post(post_repo):
    """直接通过仓库插入文章，跳过业务校验"""

    def _make(url: str, status: PostStatus = PostStatus.PUBLISHED, visits: int = 0, likes: int = 0, **fields) -> PostEntity:
        fields.setdefault("title", url.title())
        return _insert(post_repo, PostEntity(url=url, status=status, **fields), visits, likes)

    return _make


@pytest.fixture
def make_sheet(sheet_repo):
    def _make(url: str, status: PostStatus = PostStatus.PUBLISHED, visits: int = 0, likes: int = 0, **fields) -> SheetEntity:
        fields.setdefault("title", url.title())
        return _insert(sheet_repo, SheetEntity(url=url, status=status, **fields), visits, likes)

    return _make
