from app.schemas.post import PostEntity, SheetEntity
from app.service.base_post_svc import BasePostService
from app.storage.post.post_interface import IBasePostRepository


class PostService(BasePostService[PostEntity]):
    """普通文章业务服务"""

    def __init__(self, repository: IBasePostRepository[PostEntity], **kwargs):
        super().__init__(repository, name="Post", **kwargs)


class SheetService(BasePostService[SheetEntity]):
    """独立页面业务服务"""

    def __init__(self, repository: IBasePostRepository[SheetEntity], **kwargs):
        super().__init__(repository, name="Sheet", **kwargs)
