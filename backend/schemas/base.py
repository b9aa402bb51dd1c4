from pydantic import BaseModel
from typing import Optional, Any


class BaseResponse(BaseModel):
    # 统一响应结构（便于前后端约定）
    code: int = 0
    message: str = "success"
    data: Optional[Any] = None


def success_response(data=None, message="success"):
    return {"code": 0, "message": message, "data": data}


def error_response(code: int, message: str, data=None):
    return {"code": code, "message": message, "data": data}
