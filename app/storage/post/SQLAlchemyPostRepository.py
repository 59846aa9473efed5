from typing import List, Optional, Type
from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from app.models.post import BasePost, PostStatus
from app.schemas.page import Direction, Order, Page, PageRequest
from app.schemas.post import PostEntity, SheetEntity
from app.storage.post.post_interface import IBasePostRepository, POST
from app.core.exceptions import InvalidArgument
from app.core.db import transaction


class SQLAlchemyBasePostRepository(IBasePostRepository[POST]):
    """
    使用 SQLAlchemy 实现的文章仓库（泛型）
    - 子类通过 entity 指定文章变体，查询自动限定在该变体的 type 上
    - 返回的实体都与会话脱离，业务层修改它们不会被意外 flush
    """

    entity: Type[POST]

    # create 时忽略的字段：计数器从 0 开始，只走原子自增
    GENERATED_FIELDS = {"id", "update_time", "visits", "likes"}
    # update 时不覆盖的字段：创建时间只在创建时写入
    IMMUTABLE_FIELDS = GENERATED_FIELDS | {"create_time"}

    def __init__(self, db: Session):
        self.db = db

    # ---------- 内部基础查询 ----------

    def _base_query(self) -> Query:
        """只查询当前变体的文章"""
        return self.db.query(BasePost).filter(BasePost.type == self.entity.post_type.value)

    def _get_orm_by_id(self, post_id: int) -> Optional[BasePost]:
        return self._base_query().filter(BasePost.id == post_id).first()

    def _to_entity(self, orm_obj: BasePost) -> POST:
        return self.entity.model_validate(orm_obj)

    def _apply_sort(self, query: Query, orders: List[Order]) -> Query:
        columns = BasePost.__table__.columns
        for order in orders:
            if order.field not in columns:
                raise InvalidArgument(f"Unknown sort field: {order.field}", error_data=order.field)
            column = columns[order.field]
            query = query.order_by(column.desc() if order.direction == Direction.DESC else column.asc())
        return query

    def _paginate(self, base_q: Query, pageable: PageRequest) -> Page[POST]:
        total = base_q.count()
        rows: List[BasePost] = (
            self._apply_sort(base_q, pageable.sort)
            .offset(pageable.offset)
            .limit(pageable.page_size)
            .all()
        )

        items = [self._to_entity(row) for row in rows]
        return Page[self.entity](
            total=total,
            count=len(items),
            page=pageable.page,
            page_size=pageable.page_size,
            items=items,
        )

    # ---------- 通用增删改查 ----------

    def create(self, entity: POST) -> POST:
        """
        插入一条文章记录：
        - 忽略实体上的 id、计数器和修改时间，由数据库和 ORM 默认值生成
        - create_time 为空时使用 ORM 默认值
        """
        payload = entity.model_dump(exclude=self.GENERATED_FIELDS, exclude_none=True)
        orm_obj = BasePost(**payload, type=self.entity.post_type.value)

        with transaction(self.db):
            self.db.add(orm_obj)

        # 刷新以获取 id 和默认值
        self.db.refresh(orm_obj)
        return self._to_entity(orm_obj)

    def update(self, entity: POST) -> Optional[POST]:
        orm_obj = self._get_orm_by_id(entity.id)
        if orm_obj is None:
            return None

        update_data = entity.model_dump(exclude=self.IMMUTABLE_FIELDS)
        with transaction(self.db):
            for field, value in update_data.items():
                setattr(orm_obj, field, value)

        self.db.refresh(orm_obj)
        return self._to_entity(orm_obj)

    def get_by_id(self, entity_id: int) -> Optional[POST]:
        orm_obj = self._get_orm_by_id(entity_id)
        return self._to_entity(orm_obj) if orm_obj else None

    def exists_by_id(self, entity_id: int) -> bool:
        return self._get_orm_by_id(entity_id) is not None

    def list_all(self) -> List[POST]:
        rows = self._base_query().order_by(BasePost.id.asc()).all()
        return [self._to_entity(row) for row in rows]

    def find_all(self, pageable: PageRequest) -> Page[POST]:
        return self._paginate(self._base_query(), pageable)

    def count(self) -> int:
        return self._base_query().count()

    def delete_by_id(self, entity_id: int) -> bool:
        orm_obj = self._get_orm_by_id(entity_id)
        if orm_obj is None:
            return False

        with transaction(self.db):
            self.db.delete(orm_obj)

        return True

    # ---------- 统计 ----------

    def count_visit(self) -> Optional[int]:
        total = (
            self.db.query(func.sum(BasePost.visits))
            .filter(BasePost.type == self.entity.post_type.value)
            .scalar()
        )
        # MySQL 的 SUM 返回 Decimal
        return int(total) if total is not None else None

    def count_like(self) -> Optional[int]:
        total = (
            self.db.query(func.sum(BasePost.likes))
            .filter(BasePost.type == self.entity.post_type.value)
            .scalar()
        )
        return int(total) if total is not None else None

    def count_by_status(self, status: PostStatus) -> int:
        return self._base_query().filter(BasePost.status == status.value).count()

    def count_by_url(self, url: str) -> int:
        return self._base_query().filter(BasePost.url == url).count()

    def count_by_id_not_and_url(self, post_id: int, url: str) -> int:
        return (
            self._base_query()
            .filter(BasePost.id != post_id, BasePost.url == url)
            .count()
        )

    # ---------- 查询 ----------

    def get_by_url(self, url: str) -> Optional[POST]:
        orm_obj = self._base_query().filter(BasePost.url == url).first()
        return self._to_entity(orm_obj) if orm_obj else None

    def get_by_url_and_status(self, url: str, status: PostStatus) -> Optional[POST]:
        orm_obj = (
            self._base_query()
            .filter(BasePost.url == url, BasePost.status == status.value)
            .first()
        )
        return self._to_entity(orm_obj) if orm_obj else None

    def find_all_by_status(self, status: PostStatus) -> List[POST]:
        rows = (
            self._base_query()
            .filter(BasePost.status == status.value)
            .order_by(BasePost.id.asc())
            .all()
        )
        return [self._to_entity(row) for row in rows]

    def find_page_by_status(self, status: PostStatus, pageable: PageRequest) -> Page[POST]:
        base_q = self._base_query().filter(BasePost.status == status.value)
        return self._paginate(base_q, pageable)

    def find_all_by_status_and_create_time_after(
        self, status: PostStatus, create_time: datetime, pageable: PageRequest
    ) -> Page[POST]:
        base_q = self._base_query().filter(
            BasePost.status == status.value,
            BasePost.create_time > create_time,
        )
        return self._paginate(base_q, pageable)

    def find_all_by_status_and_create_time_before(
        self, status: PostStatus, create_time: datetime, pageable: PageRequest
    ) -> Page[POST]:
        base_q = self._base_query().filter(
            BasePost.status == status.value,
            BasePost.create_time < create_time,
        )
        return self._paginate(base_q, pageable)

    # ---------- 计数器原子自增 ----------

    def update_visit(self, visits: int, post_id: int) -> int:
        """
        UPDATE posts SET visits = visits + :visits WHERE id = :post_id AND type = :type
        """
        with transaction(self.db):
            affected_rows = (
                self._base_query()
                .filter(BasePost.id == post_id)
                .update({BasePost.visits: BasePost.visits + visits}, synchronize_session=False)
            )
        return affected_rows

    def update_likes(self, likes: int, post_id: int) -> int:
        with transaction(self.db):
            affected_rows = (
                self._base_query()
                .filter(BasePost.id == post_id)
                .update({BasePost.likes: BasePost.likes + likes}, synchronize_session=False)
            )
        return affected_rows


class SQLAlchemyPostRepository(SQLAlchemyBasePostRepository[PostEntity]):
    """普通文章仓库"""

    entity = PostEntity


class SQLAlchemySheetRepository(SQLAlchemyBasePostRepository[SheetEntity]):
    """独立页面仓库"""

    entity = SheetEntity
