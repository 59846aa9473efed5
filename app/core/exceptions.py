# domain_exceptions.py
from typing import Any, Optional


class BlogError(Exception):
    """
    业务异常基类：
    - status_code: 路由层转换成 BizResponse 时使用的状态码
    - error_data: 便于排查的附加数据（如查询用的 url、id）
    """

    status_code = 400

    def __init__(self, message: str, error_data: Optional[Any] = None):
        self.message = message
        self.error_data = error_data
        super().__init__(message)


class InvalidArgument(BlogError):
    """
    参数校验失败时抛出：
    - 必填参数为 None / 空白字符串
    - 数量、页大小等要求为正数的参数 <= 0
    在访问仓库之前就会抛出
    """

    status_code = 400


class NotFound(BlogError):
    """
    查询不到目标数据时抛出：
    - 例如 get_by_url / get_by_id
    - error_data 携带查询使用的 key
    """

    status_code = 404


class AlreadyExists(BlogError):
    """
    唯一性冲突时抛出：
    - 目前用于文章 url 已被其他文章占用
    """

    status_code = 400


class BadRequest(BlogError):
    """
    写操作结果不符合预期时抛出：
    - 计数自增影响的行数不等于 1（文章不存在或数据异常）
    """

    status_code = 400


class PostPasswordMismatch(BlogError):
    """加密文章的访问密码不正确"""

    status_code = 403

    def __init__(self, url: Optional[str] = None, message: str = "Post password does not match"):
        super().__init__(message, error_data=url)
