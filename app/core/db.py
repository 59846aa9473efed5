from contextlib import contextmanager

from sqlalchemy.orm import Session


@contextmanager
def transaction(db: Session):
    """
    仓库层写操作的事务边界：
    - 正常结束则 commit
    - 出现异常则 rollback 并继续抛出
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
