from dataclasses import dataclass
from typing import Optional, Union


class Unassigned:
    """
    实体尚未持久化，还没有主键
    - 与合法的 0 / 负数主键区分开
    """

    _instance: Optional["Unassigned"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "Unassigned"


@dataclass(frozen=True)
class Assigned:
    """实体已持久化，value 为数据库主键"""

    value: int


UNASSIGNED = Unassigned()

EntityId = Union[Unassigned, Assigned]


def id_state(raw_id: Optional[int]) -> EntityId:
    """把 ORM / schema 上可空的 id 转换成显式的状态"""
    if raw_id is None:
        return UNASSIGNED
    return Assigned(raw_id)
