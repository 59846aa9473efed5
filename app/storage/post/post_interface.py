# app/storage/post/post_interface.py

from datetime import datetime
from typing import List, Optional, Protocol, TypeVar

from app.models.post import PostStatus
from app.schemas.page import Page, PageRequest
from app.schemas.post import BasePostEntity

DOMAIN = TypeVar("DOMAIN")
POST = TypeVar("POST", bound=BasePostEntity)


class ICrudRepository(Protocol[DOMAIN]):
    """
    通用增删改查仓库协议
    CrudService 依赖本接口，不关心具体数据源
    """

    def create(self, entity: DOMAIN) -> DOMAIN:
        """插入新记录，返回带主键的实体"""
        ...

    def update(self, entity: DOMAIN) -> Optional[DOMAIN]:
        """按主键更新记录，记录不存在时返回 None"""
        ...

    def get_by_id(self, entity_id: int) -> Optional[DOMAIN]:
        ...

    def exists_by_id(self, entity_id: int) -> bool:
        ...

    def list_all(self) -> List[DOMAIN]:
        ...

    def find_all(self, pageable: PageRequest) -> Page[DOMAIN]:
        """分页 + 排序查询全部记录"""
        ...

    def count(self) -> int:
        ...

    def delete_by_id(self, entity_id: int) -> bool:
        """硬删除，返回是否删除成功"""
        ...


class IBasePostRepository(ICrudRepository[POST], Protocol[POST]):
    """
    文章仓库接口协议（数据层抽象接口）
    - 泛型参数为具体的文章变体（文章 / 独立页面）
    - 所有查询都只作用于该变体
    """

    def count_visit(self) -> Optional[int]:
        """访问量总和，没有数据时返回 None"""
        ...

    def count_like(self) -> Optional[int]:
        """点赞数总和，没有数据时返回 None"""
        ...

    def count_by_status(self, status: PostStatus) -> int:
        ...

    def get_by_url(self, url: str) -> Optional[POST]:
        ...

    def get_by_url_and_status(self, url: str, status: PostStatus) -> Optional[POST]:
        ...

    def find_all_by_status(self, status: PostStatus) -> List[POST]:
        ...

    def find_page_by_status(self, status: PostStatus, pageable: PageRequest) -> Page[POST]:
        ...

    def find_all_by_status_and_create_time_after(
        self, status: PostStatus, create_time: datetime, pageable: PageRequest
    ) -> Page[POST]:
        """create_time 严格大于给定时间"""
        ...

    def find_all_by_status_and_create_time_before(
        self, status: PostStatus, create_time: datetime, pageable: PageRequest
    ) -> Page[POST]:
        """create_time 严格小于给定时间"""
        ...

    def update_visit(self, visits: int, post_id: int) -> int:
        """
        访问量原子自增
        - 返回受影响的行数
        """
        ...

    def update_likes(self, likes: int, post_id: int) -> int:
        """
        点赞数原子自增
        - 返回受影响的行数
        """
        ...

    def count_by_url(self, url: str) -> int:
        ...

    def count_by_id_not_and_url(self, post_id: int, url: str) -> int:
        """统计除 post_id 之外使用该 url 的文章数"""
        ...
