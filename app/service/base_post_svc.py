from typing import Callable, Generic, List, Optional
from datetime import datetime

from app.core.asserts import has_text, is_blank, is_true, not_none
from app.core.exceptions import AlreadyExists, BadRequest, NotFound
from app.core.ids import Unassigned
from app.core.logx import logger
from app.core.render import MarkdownRenderer, render_markdown
from app.core.security import hash_password, verify_password
from app.core.time import now, to_local
from app.models.post import PostStatus
from app.schemas.page import Order, Page, PageRequest
from app.service.crud_svc import CrudService
from app.storage.post.post_interface import IBasePostRepository, POST

# 加密文章对外展示的提示语
ENCRYPTED_TIP = "The post is encrypted by author"


class BasePostService(Generic[POST]):
    """
    文章业务服务（泛型，适用于所有文章变体）：
    - 参数校验失败抛 InvalidArgument，且一定发生在访问仓库之前
    - 通用的增删改查委托给持有的 CrudService
    - 文章专属查询直接调用 IBasePostRepository
    """

    def __init__(
        self,
        repository: IBasePostRepository[POST],
        name: str = "Post",
        renderer: MarkdownRenderer = render_markdown,
        clock: Callable[[], datetime] = now,
    ):
        self.repository = repository
        self.crud = CrudService(repository, name)
        self.renderer = renderer
        self.clock = clock

    #---------------------------------------- 统计 -----------------------------------------

    def count_visit(self) -> int:
        return self.repository.count_visit() or 0

    def count_like(self) -> int:
        return self.repository.count_like() or 0

    def count_by_status(self, status: PostStatus) -> int:
        not_none(status, "Post status must not be null")

        return self.repository.count_by_status(status)

    #---------------------------------------- 查询 -----------------------------------------

    def get_by_url(self, url: str) -> POST:
        has_text(url, "Url must not be blank")

        post = self.repository.get_by_url(url)
        if post is None:
            raise NotFound("The post does not exist", error_data=url)
        return post

    def get_by(self, status: PostStatus, url: str) -> POST:
        not_none(status, "Post status must not be null")
        has_text(url, "Post url must not be blank")

        post = self.repository.get_by_url_and_status(url, status)
        if post is None:
            raise NotFound(
                f"The post with status {status.name} and url {url} was not existed",
                error_data=url,
            )
        return post

    def list_all_by(self, status: PostStatus) -> List[POST]:
        not_none(status, "Post status must not be null")

        return self.repository.find_all_by_status(status)

    def list_pre_posts(self, date: datetime, size: int) -> List[POST]:
        """
        创建时间在 date 之后、离 date 最近的 size 篇已发布文章（升序）
        """
        not_none(date, "Date must not be null")
        is_true(size is not None and size > 0, "Size must not be less than 1")
        date = to_local(date)

        pageable = PageRequest(page=0, page_size=size, sort=[Order.asc("create_time")])
        return self.repository.find_all_by_status_and_create_time_after(
            PostStatus.PUBLISHED, date, pageable
        ).items

    def list_next_posts(self, date: datetime, size: int) -> List[POST]:
        """
        创建时间在 date 之前、离 date 最近的 size 篇已发布文章（降序）
        """
        not_none(date, "Date must not be null")
        is_true(size is not None and size > 0, "Size must not be less than 1")
        date = to_local(date)

        pageable = PageRequest(page=0, page_size=size, sort=[Order.desc("create_time")])
        return self.repository.find_all_by_status_and_create_time_before(
            PostStatus.PUBLISHED, date, pageable
        ).items

    def get_pre_post(self, date: datetime) -> Optional[POST]:
        posts = self.list_pre_posts(date, 1)
        return posts[0] if posts else None

    def get_next_post(self, date: datetime) -> Optional[POST]:
        posts = self.list_next_posts(date, 1)
        return posts[0] if posts else None

    #---------------------------------------- 分页 -----------------------------------------

    def page_latest(self, top: int) -> Page[POST]:
        is_true(top is not None and top > 0, "Top number must not be less than 0")

        latest_pageable = PageRequest(page=0, page_size=top, sort=[Order.desc("edit_time")])
        return self.crud.list_all(latest_pageable)

    def page_by(self, pageable: PageRequest) -> Page[POST]:
        not_none(pageable, "Page info must not be null")

        return self.crud.list_all(pageable)

    def page_by_status(self, status: PostStatus, pageable: PageRequest) -> Page[POST]:
        not_none(status, "Post status must not be null")
        not_none(pageable, "Page info must not be null")

        return self.repository.find_page_by_status(status, pageable)

    #---------------------------------------- 计数器 -----------------------------------------

    def increase_visit(self, post_id: int, visits: int = 1) -> None:
        is_true(visits is not None and visits > 0, "Visits to increase must not be less than 1")
        not_none(post_id, "Post id must not be null")

        affected_rows = self.repository.update_visit(visits, post_id)

        if affected_rows != 1:
            error = BadRequest(
                f"Failed to increase visits {visits} for post with id {post_id}",
                error_data=post_id,
            )
            logger.error(f"Post with id: [{post_id}] may not be found, affected rows: {affected_rows}")
            raise error

    def increase_like(self, post_id: int, likes: int = 1) -> None:
        is_true(likes is not None and likes > 0, "Likes to increase must not be less than 1")
        not_none(post_id, "Post id must not be null")

        affected_rows = self.repository.update_likes(likes, post_id)

        if affected_rows != 1:
            error = BadRequest(
                f"Failed to increase likes {likes} for post with id {post_id}",
                error_data=post_id,
            )
            logger.error(f"Post with id: [{post_id}] may not be found, affected rows: {affected_rows}")
            raise error

    #---------------------------------------- 增 / 改 -----------------------------------------

    def create_or_update_by(self, post: POST) -> POST:
        """
        创建或更新文章：
        1. 校验 url 没有被其他文章占用
        2. 从原文重新渲染 format_content
        3. id 未分配则创建；否则写入 edit_time 后更新
        """
        not_none(post, "Post must not be null")

        self._url_must_not_exist(post)

        post.format_content = self.renderer(post.original_content)

        if isinstance(post.identity, Unassigned):
            return self.crud.create(post)

        post.edit_time = self.clock()
        return self.crud.update(post)

    def filter_if_encrypt(self, post: POST) -> POST:
        """
        加密文章把摘要、原文、渲染内容都替换成提示语
        - 只修改内存中的实体，不会持久化
        """
        not_none(post, "Post must not be null")

        if not is_blank(post.password):
            post.summary = ENCRYPTED_TIP
            post.original_content = ENCRYPTED_TIP
            post.format_content = ENCRYPTED_TIP

        return post

    def set_password(self, post: POST, plain_password: Optional[str]) -> POST:
        """
        设置访问密码：空白表示取消加密，否则保存 argon2 哈希
        """
        not_none(post, "Post must not be null")

        post.password = None if is_blank(plain_password) else hash_password(plain_password)
        return post

    def password_matches(self, post: POST, plain_password: Optional[str]) -> bool:
        not_none(post, "Post must not be null")

        return verify_password(plain_password, post.password)

    #---------------------------------------- 通用增删改查 -----------------------------------------

    def get_by_id(self, post_id: int) -> POST:
        return self.crud.get_by_id(post_id)

    def fetch_by_id(self, post_id: int) -> Optional[POST]:
        return self.crud.get_by_id_of_nullable(post_id)

    def list_all(self) -> List[POST]:
        return self.crud.list_all()

    def count(self) -> int:
        return self.crud.count()

    def remove_by_id(self, post_id: int) -> POST:
        return self.crud.remove_by_id(post_id)

    def _url_must_not_exist(self, post: POST) -> None:
        not_none(post, "Post must not be null")

        if isinstance(post.identity, Unassigned):
            # 新文章
            count = self.repository.count_by_url(post.url)
        else:
            # 已有文章，排除自身
            count = self.repository.count_by_id_not_and_url(post.id, post.url)

        if count > 0:
            raise AlreadyExists(f"The {self.crud.name.lower()} url has been exist", error_data=post.url)
