from datetime import datetime
from zoneinfo import ZoneInfo

from app.core.config import settings


def now() -> datetime:
    """返回配置时区（默认东八区）的当前时间"""
    return settings.get_now()


def to_local(value: datetime) -> datetime:
    """
    把带时区的时间换算到配置时区
    - 数据库里存的是配置时区的钟面时间，比较前必须先换算
    - 不带时区的时间视为已经是配置时区，原样返回
    """
    if value.tzinfo is None:
        return value
    return value.astimezone(ZoneInfo(settings.TIME_ZONE))
