from typing import Generic, List, Optional, TypeVar, Union

from app.core.asserts import not_none
from app.core.exceptions import InvalidArgument, NotFound
from app.core.ids import Assigned, Unassigned, id_state
from app.core.logx import logger
from app.schemas.page import Page, PageRequest
from app.storage.post.post_interface import ICrudRepository

DOMAIN = TypeVar("DOMAIN")


class CrudService(Generic[DOMAIN]):
    """
    通用增删改查服务：
    - 只依赖 ICrudRepository，由具体业务服务持有并委托调用（组合，而不是继承）
    - name 用于拼接错误信息，例如 "Post was not found or has been deleted"
    """

    def __init__(self, repository: ICrudRepository[DOMAIN], name: str):
        self.repository = repository
        self.name = name

    # ---------- 查 ----------

    def fetch_by_id(self, entity_id: int) -> Optional[DOMAIN]:
        not_none(entity_id, f"{self.name} id must not be null")
        return self.repository.get_by_id(entity_id)

    def get_by_id(self, entity_id: int) -> DOMAIN:
        entity = self.fetch_by_id(entity_id)
        if entity is None:
            raise NotFound(f"{self.name} was not found or has been deleted", error_data=entity_id)
        return entity

    def get_by_id_of_nullable(self, entity_id: int) -> Optional[DOMAIN]:
        """找不到时返回 None，不抛 NotFound"""
        return self.fetch_by_id(entity_id)

    def exists_by_id(self, entity_id: int) -> bool:
        not_none(entity_id, f"{self.name} id must not be null")
        return self.repository.exists_by_id(entity_id)

    def must_exist_by_id(self, entity_id: int) -> None:
        if not self.exists_by_id(entity_id):
            raise NotFound(f"{self.name} was not found", error_data=entity_id)

    def list_all(self, pageable: Optional[PageRequest] = None) -> Union[List[DOMAIN], Page[DOMAIN]]:
        """
        不传 pageable 返回全部记录，传入则返回分页结果
        """
        if pageable is None:
            return self.repository.list_all()
        return self.repository.find_all(pageable)

    def count(self) -> int:
        return self.repository.count()

    # ---------- 增 / 改 ----------

    def create(self, entity: DOMAIN) -> DOMAIN:
        not_none(entity, f"{self.name} to create must not be null")
        if not isinstance(id_state(entity.id), Unassigned):
            raise InvalidArgument(f"{self.name} to create must not carry an id", error_data=entity.id)

        created = self.repository.create(entity)
        logger.info(f"Created {self.name.lower()} id={created.id}")
        return created

    def update(self, entity: DOMAIN) -> DOMAIN:
        not_none(entity, f"{self.name} to update must not be null")
        state = id_state(entity.id)
        if not isinstance(state, Assigned):
            raise InvalidArgument(f"{self.name} to update must carry an id")

        updated = self.repository.update(entity)
        if updated is None:
            raise NotFound(f"{self.name} was not found or has been deleted", error_data=state.value)

        logger.info(f"Updated {self.name.lower()} id={state.value}")
        return updated

    # ---------- 删 ----------

    def remove_by_id(self, entity_id: int) -> DOMAIN:
        """
        硬删除，返回被删除的实体
        """
        entity = self.get_by_id(entity_id)
        self.repository.delete_by_id(entity_id)
        logger.info(f"Removed {self.name.lower()} id={entity_id}")
        return entity
