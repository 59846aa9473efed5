from typing import Any, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


class BizResponse(JSONResponse):
    """
    统一响应结构：
    {
        "code": 状态码（与 HTTP 状态码一致）,
        "msg":  提示信息,
        "data": 业务数据
    }
    """

    def __init__(self, data: Any = None, msg: Optional[str] = "success", status_code: int = 200):
        content = {
            "code": status_code,
            "msg": msg,
            "data": jsonable_encoder(data),
        }
        super().__init__(content=content, status_code=status_code)
