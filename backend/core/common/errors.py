"""编辑流程的统一异常定义。

仓储层与流程引擎只抛出这里的异常, 不做本地恢复; HTTP 层统一转换为
``error_response`` 结构。
"""

from typing import Any, Dict, Optional


class WorkflowError(Exception):
    """所有领域异常的基类"""

    code: str = "WORKFLOW_ERROR"
    http_status: int = 400

    def __init__(self, message: str = "", details: Optional[Dict[str, Any]] = None):
        super().__init__(message or self.code)
        self.message = message or self.code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.code, "message": self.message, **self.details}


class NotFound(WorkflowError):
    code = "NOT_FOUND"
    http_status = 404


class InvalidTransition(WorkflowError):
    code = "INVALID_TRANSITION"
    http_status = 409


class Forbidden(WorkflowError):
    code = "FORBIDDEN"
    http_status = 403


class ValidationError(WorkflowError):
    code = "VALIDATION_ERROR"
    http_status = 422


class UpstreamFailure(WorkflowError):
    """身份/资料/存储等外部服务失败, 核心不重试"""

    code = "UPSTREAM_FAILURE"
    http_status = 502


class ConflictError(WorkflowError):
    """条件写入未命中: 记录在读取之后已被其他请求修改"""

    code = "CONFLICT"
    http_status = 409
