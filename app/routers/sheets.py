from fastapi import APIRouter, Depends, Query

from app.schemas.page import Order, Page, PageRequest
from app.schemas.post import SheetEntity, PostParam, PostOut
from app.models.post import PostStatus
from app.core.biz_response import BizResponse
from app.service.post_svc import SheetService

from app.storage.database import get_sheet_repo
from app.storage.post.post_interface import IBasePostRepository

from app.core.exceptions import BlogError
from app.core.logx import logger

sheets_router = APIRouter(prefix="/sheets", tags=["sheets"])


def get_sheet_service(sheet_repo: IBasePostRepository[SheetEntity] = Depends(get_sheet_repo)) -> SheetService:
    return SheetService(sheet_repo)


@sheets_router.get("/", response_model=Page[PostOut])
def list_sheets(
    page: int = Query(0, ge=0),
    page_size: int = Query(10, ge=1, le=100),
    service: SheetService = Depends(get_sheet_service),
):
    """
    分页获取独立页面（后台）
    """
    try:
        result = service.page_by(PageRequest(page=page, page_size=page_size, sort=[Order.desc("create_time")]))
        items = [PostOut.from_entity(sheet) for sheet in result.items]
        return BizResponse(data=Page[PostOut](
            total=result.total,
            count=result.count,
            page=result.page,
            page_size=result.page_size,
            items=items,
        ))
    except BlogError as e:
        return BizResponse(data=None, msg=str(e), status_code=e.status_code)
    except Exception as e:
        logger.exception(e)
        return BizResponse(data=None, msg=str(e), status_code=500)


@sheets_router.get("/url/{url}", response_model=PostOut)
def get_sheet_by_url(
    url: str,
    service: SheetService = Depends(get_sheet_service),
):
    """
    访客查看已发布的独立页面，访问量 +1
    """
    try:
        sheet = service.get_by(PostStatus.PUBLISHED, url)
        service.increase_visit(sheet.id)
        sheet.visits += 1
        return BizResponse(data=PostOut.from_entity(service.filter_if_encrypt(sheet)))
    except BlogError as e:
        return BizResponse(data=None, msg=str(e), status_code=e.status_code)
    except Exception as e:
        logger.exception(e)
        return BizResponse(data=None, msg=str(e), status_code=500)


@sheets_router.post("/", response_model=PostOut)
def create_sheet(
    payload: PostParam,
    service: SheetService = Depends(get_sheet_service),
):
    try:
        sheet = payload.update(SheetEntity(title=payload.title, url=payload.url))
        if payload.password is not None:
            service.set_password(sheet, payload.password)
        created = service.create_or_update_by(sheet)
        return BizResponse(data=PostOut.from_entity(created))
    except BlogError as e:
        return BizResponse(data=None, msg=str(e), status_code=e.status_code)
    except Exception as e:
        logger.exception(e)
        return BizResponse(data=None, msg=str(e), status_code=500)


@sheets_router.put("/{sheet_id}", response_model=PostOut)
def update_sheet(
    sheet_id: int,
    payload: PostParam,
    service: SheetService = Depends(get_sheet_service),
):
    try:
        sheet = payload.update(service.get_by_id(sheet_id))
        if payload.password is not None:
            service.set_password(sheet, payload.password)
        updated = service.create_or_update_by(sheet)
        return BizResponse(data=PostOut.from_entity(updated))
    except BlogError as e:
        return BizResponse(data=None, msg=str(e), status_code=e.status_code)
    except Exception as e:
        logger.exception(e)
        return BizResponse(data=None, msg=str(e), status_code=500)


@sheets_router.delete("/{sheet_id}")
def delete_sheet(
    sheet_id: int,
    service: SheetService = Depends(get_sheet_service),
):
    try:
        service.remove_by_id(sheet_id)
        return BizResponse(data=True)
    except BlogError as e:
        return BizResponse(data=False, msg=str(e), status_code=e.status_code)
    except Exception as e:
        logger.exception(e)
        return BizResponse(data=False, msg=str(e), status_code=500)
