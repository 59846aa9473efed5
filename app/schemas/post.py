from typing import ClassVar, Dict, Optional
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.core.asserts import is_blank
from app.core.exceptions import InvalidArgument
from app.core.ids import Assigned, EntityId, id_state
from app.models.post import PostStatus, PostType

# 文章实体：业务层与仓库层之间传递的对象，与 ORM 会话脱离
class BasePostEntity(BaseModel):
    """
    文章实体的公共字段，文章 / 独立页面都满足这套字段
    - id 为 None 表示新实体，通过 identity 获取显式状态
    - password 保存的是 argon2 哈希
    """
    post_type: ClassVar[PostType]

    id: Optional[int] = None                     # 主键
    title: str                                   # 标题
    url: str                                     # 访问路径
    status: PostStatus = PostStatus.DRAFT        # 发布状态
    summary: Optional[str] = None                # 摘要
    original_content: str = ""                   # 原文（markdown）
    format_content: Optional[str] = None         # 渲染后的 html
    password: Optional[str] = None               # 访问密码（哈希）
    thumbnail: Optional[str] = None              # 缩略图
    visits: int = 0                              # 访问量
    likes: int = 0                               # 点赞数
    top_priority: int = 0                        # 置顶优先级
    disallow_comment: bool = False               # 禁止评论
    create_time: Optional[datetime] = None       # 创建时间
    edit_time: Optional[datetime] = None         # 编辑时间
    update_time: Optional[datetime] = None       # 修改时间

    model_config = ConfigDict(from_attributes=True)

    @property
    def identity(self) -> EntityId:
        return id_state(self.id)


class PostEntity(BasePostEntity):
    post_type: ClassVar[PostType] = PostType.POST


class SheetEntity(BasePostEntity):
    post_type: ClassVar[PostType] = PostType.SHEET


# 创建 / 更新文章
class PostParam(BaseModel):
    """
    作者创建或更新文章时提交的数据
    - password: 明文，None 表示不修改，空字符串表示取消加密
    - create_time: 可选，只在创建时生效（导入旧文章时使用），更新已有文章时传入会被拒绝
    """
    title: str = Field(min_length=1, max_length=100)
    url: str = Field(min_length=1, max_length=255)
    status: PostStatus = PostStatus.DRAFT
    original_content: str = ""
    summary: Optional[str] = None
    thumbnail: Optional[str] = None
    password: Optional[str] = None
    top_priority: int = 0
    disallow_comment: bool = False
    create_time: Optional[datetime] = None

    model_config = ConfigDict(extra="forbid")

    def update(self, entity: BasePostEntity) -> BasePostEntity:
        """把参数写到实体上（密码由业务层单独处理）"""
        if self.create_time is not None and isinstance(entity.identity, Assigned):
            raise InvalidArgument("Create time can only be set when creating", error_data=entity.id)
        for field, value in self.model_dump(exclude={"password", "create_time"}).items():
            setattr(entity, field, value)
        if self.create_time is not None:
            entity.create_time = self.create_time
        return entity


# 查看文章
class PostOut(BaseModel):
    """
    对外返回的文章信息
    - 不包含密码
    - encrypted 表示文章是否加密（加密文章的内容已被替换为提示语）
    """
    id: int
    title: str
    url: str
    status: PostStatus
    summary: Optional[str] = None
    original_content: str
    format_content: Optional[str] = None
    thumbnail: Optional[str] = None
    visits: int
    likes: int
    top_priority: int
    disallow_comment: bool
    create_time: Optional[datetime] = None
    edit_time: Optional[datetime] = None
    update_time: Optional[datetime] = None
    encrypted: bool = False

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_entity(cls, entity: BasePostEntity) -> "PostOut":
        return cls(
            **entity.model_dump(exclude={"password"}),
            encrypted=not is_blank(entity.password),
        )


class PostNeighborsOut(BaseModel):
    """
    上一篇 / 下一篇
    - pre: 创建时间紧随其后的文章
    - next: 创建时间紧邻其前的文章
    """
    pre: Optional[PostOut] = None
    next: Optional[PostOut] = None


class PostCountsOut(BaseModel):
    visits: int
    likes: int
    by_status: Dict[str, int]


class PostUnlock(BaseModel):
    password: str = Field(min_length=1)

    model_config = ConfigDict(extra="forbid")
