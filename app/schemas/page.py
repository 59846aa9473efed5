from enum import Enum
from typing import Generic, List, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class Direction(str, Enum):
    ASC = "asc"
    DESC = "desc"


class Order(BaseModel):
    """
    单个排序条件
    - field: 实体字段名（如 create_time / edit_time）
    """
    field: str
    direction: Direction = Direction.ASC

    model_config = ConfigDict(frozen=True)

    @classmethod
    def asc(cls, field: str) -> "Order":
        return cls(field=field, direction=Direction.ASC)

    @classmethod
    def desc(cls, field: str) -> "Order":
        return cls(field=field, direction=Direction.DESC)


class PageRequest(BaseModel):
    """
    分页请求：
    - page: 页码（从 0 开始）
    - page_size: 每页数量
    - sort: 排序条件，按顺序生效
    """
    page: int = Field(default=0, ge=0)
    page_size: int = Field(default=10, ge=1)
    sort: List[Order] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def offset(self) -> int:
        return self.page * self.page_size


class Page(BaseModel, Generic[T]):
    """
    分页结果：
    - total: 满足条件的总数
    - count: 当前页返回的数量
    - items: 当前页数据
    """
    total: int
    count: int
    page: int = 0
    page_size: int = 10
    items: List[T]

    @property
    def pages(self) -> int:
        return (self.total + self.page_size - 1) // self.page_size
