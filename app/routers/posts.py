from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.schemas.page import Direction, Order, Page, PageRequest
from app.schemas.post import (
    PostEntity,
    PostParam,
    PostOut,
    PostNeighborsOut,
    PostCountsOut,
    PostUnlock,
)
from app.models.post import PostStatus
from app.core.biz_response import BizResponse
from app.service.post_svc import PostService

from app.storage.database import get_post_repo
from app.storage.post.post_interface import IBasePostRepository

from app.core.exceptions import BlogError, PostPasswordMismatch
from app.core.logx import logger

posts_router = APIRouter(prefix="/posts", tags=["posts"])


def get_post_service(post_repo: IBasePostRepository[PostEntity] = Depends(get_post_repo)) -> PostService:
    return PostService(post_repo)


def _page_out(page: Page[PostEntity], service: PostService) -> Page[PostOut]:
    """分页结果转换为对外结构，加密文章先脱敏"""
    items = [PostOut.from_entity(service.filter_if_encrypt(post)) for post in page.items]
    return Page[PostOut](
        total=page.total,
        count=page.count,
        page=page.page,
        page_size=page.page_size,
        items=items,
    )


# --------------------------------- 统计 ---------------------------------
@posts_router.get("/counts", response_model=PostCountsOut)
def count_posts(service: PostService = Depends(get_post_service)):
    """
    访问量总和、点赞数总和、各状态文章数
    """
    try:
        counts = PostCountsOut(
            visits=service.count_visit(),
            likes=service.count_like(),
            by_status={status.name: service.count_by_status(status) for status in PostStatus},
        )
        return BizResponse(data=counts)
    except Exception as e:
        logger.exception(e)
        return BizResponse(data=None, msg=str(e), status_code=500)


# --------------------------------- 访客：列表，详情，上一篇/下一篇 ---------------------------------
@posts_router.get("/latest", response_model=Page[PostOut])
def list_latest_posts(
    top: int = 10,
    service: PostService = Depends(get_post_service),
):
    """
    最近编辑的 top 篇文章
    """
    try:
        page = service.page_latest(top)
        return BizResponse(data=_page_out(page, service))
    except BlogError as e:
        return BizResponse(data=None, msg=str(e), status_code=e.status_code)
    except Exception as e:
        logger.exception(e)
        return BizResponse(data=None, msg=str(e), status_code=500)


@posts_router.get("/", response_model=Page[PostOut])
def list_posts(
    page: int = Query(0, ge=0),
    page_size: int = Query(10, ge=1, le=100),
    status: Optional[PostStatus] = None,
    sort: str = "create_time",
    direction: Direction = Direction.DESC,
    service: PostService = Depends(get_post_service),
):
    """
    分页获取文章列表
    - 传 status 时只返回该状态的文章
    """
    try:
        pageable = PageRequest(page=page, page_size=page_size, sort=[Order(field=sort, direction=direction)])
        if status is None:
            result = service.page_by(pageable)
        else:
            result = service.page_by_status(status, pageable)
        return BizResponse(data=_page_out(result, service))
    except BlogError as e:
        return BizResponse(data=None, msg=str(e), status_code=e.status_code)
    except Exception as e:
        logger.exception(e)
        return BizResponse(data=None, msg=str(e), status_code=500)


@posts_router.get("/status/{status}")
def list_posts_by_status(
    status: PostStatus,
    service: PostService = Depends(get_post_service),
):
    """
    不分页获取某个状态下的全部文章
    """
    try:
        posts = [PostOut.from_entity(service.filter_if_encrypt(post)) for post in service.list_all_by(status)]
        return BizResponse(data=posts)
    except BlogError as e:
        return BizResponse(data=None, msg=str(e), status_code=e.status_code)
    except Exception as e:
        logger.exception(e)
        return BizResponse(data=None, msg=str(e), status_code=500)


@posts_router.get("/url/{url}", response_model=PostOut)
def get_post_by_url(
    url: str,
    service: PostService = Depends(get_post_service),
):
    """
    访客查看已发布文章：
    - 访问量 +1
    - 加密文章只返回提示语
    """
    try:
        post = service.get_by(PostStatus.PUBLISHED, url)
        service.increase_visit(post.id)
        post.visits += 1
        return BizResponse(data=PostOut.from_entity(service.filter_if_encrypt(post)))
    except BlogError as e:
        return BizResponse(data=None, msg=str(e), status_code=e.status_code)
    except Exception as e:
        logger.exception(e)
        return BizResponse(data=None, msg=str(e), status_code=500)


@posts_router.get("/url/{url}/neighbors", response_model=PostNeighborsOut)
def get_post_neighbors(
    url: str,
    service: PostService = Depends(get_post_service),
):
    """
    上一篇 / 下一篇（按创建时间）
    """
    try:
        post = service.get_by(PostStatus.PUBLISHED, url)
        pre_post = service.get_pre_post(post.create_time)
        next_post = service.get_next_post(post.create_time)
        neighbors = PostNeighborsOut(
            pre=PostOut.from_entity(service.filter_if_encrypt(pre_post)) if pre_post else None,
            next=PostOut.from_entity(service.filter_if_encrypt(next_post)) if next_post else None,
        )
        return BizResponse(data=neighbors)
    except BlogError as e:
        return BizResponse(data=None, msg=str(e), status_code=e.status_code)
    except Exception as e:
        logger.exception(e)
        return BizResponse(data=None, msg=str(e), status_code=500)


@posts_router.post("/url/{url}/unlock", response_model=PostOut)
def unlock_post(
    url: str,
    payload: PostUnlock,
    service: PostService = Depends(get_post_service),
):
    """
    输入访问密码查看加密文章的完整内容
    """
    try:
        post = service.get_by(PostStatus.PUBLISHED, url)
        if not service.password_matches(post, payload.password):
            raise PostPasswordMismatch(url=url)
        return BizResponse(data=PostOut.from_entity(post))
    except BlogError as e:
        return BizResponse(data=None, msg=str(e), status_code=e.status_code)
    except Exception as e:
        logger.exception(e)
        return BizResponse(data=None, msg=str(e), status_code=500)


@posts_router.post("/{post_id}/likes")
def like_post(
    post_id: int,
    likes: int = 1,
    service: PostService = Depends(get_post_service),
):
    """
    点赞
    """
    try:
        service.increase_like(post_id, likes)
        return BizResponse(data=True)
    except BlogError as e:
        return BizResponse(data=False, msg=str(e), status_code=e.status_code)
    except Exception as e:
        logger.exception(e)
        return BizResponse(data=False, msg=str(e), status_code=500)


# --------------------------------- 作者：查看，创建，更新，删除 ---------------------------------
@posts_router.get("/id/{post_id}", response_model=PostOut)
def get_post_by_id(
    post_id: int,
    service: PostService = Depends(get_post_service),
):
    """
    作者后台查看文章（不脱敏，不计访问量）
    """
    try:
        return BizResponse(data=PostOut.from_entity(service.get_by_id(post_id)))
    except BlogError as e:
        return BizResponse(data=None, msg=str(e), status_code=e.status_code)
    except Exception as e:
        logger.exception(e)
        return BizResponse(data=None, msg=str(e), status_code=500)


@posts_router.post("/", response_model=PostOut)
def create_post(
    payload: PostParam,
    service: PostService = Depends(get_post_service),
):
    """
    创建文章：
    - url 不能与已有文章重复
    - 保存时从原文渲染 html
    """
    try:
        post = payload.update(PostEntity(title=payload.title, url=payload.url))
        if payload.password is not None:
            service.set_password(post, payload.password)
        created = service.create_or_update_by(post)
        return BizResponse(data=PostOut.from_entity(created))
    except BlogError as e:
        return BizResponse(data=None, msg=str(e), status_code=e.status_code)
    except Exception as e:
        logger.exception(e)
        return BizResponse(data=None, msg=str(e), status_code=500)


@posts_router.put("/{post_id}", response_model=PostOut)
def update_post(
    post_id: int,
    payload: PostParam,
    service: PostService = Depends(get_post_service),
):
    """
    更新文章：
    - password 不传表示保持原密码
    - 更新时写入 edit_time，create_time 保持不变
    """
    try:
        post = payload.update(service.get_by_id(post_id))
        if payload.password is not None:
            service.set_password(post, payload.password)
        updated = service.create_or_update_by(post)
        return BizResponse(data=PostOut.from_entity(updated))
    except BlogError as e:
        return BizResponse(data=None, msg=str(e), status_code=e.status_code)
    except Exception as e:
        logger.exception(e)
        return BizResponse(data=None, msg=str(e), status_code=500)


@posts_router.delete("/{post_id}")
def delete_post(
    post_id: int,
    service: PostService = Depends(get_post_service),
):
    """
    硬删除文章
    """
    try:
        service.remove_by_id(post_id)
        return BizResponse(data=True)
    except BlogError as e:
        return BizResponse(data=False, msg=str(e), status_code=e.status_code)
    except Exception as e:
        logger.exception(e)
        return BizResponse(data=False, msg=str(e), status_code=500)
