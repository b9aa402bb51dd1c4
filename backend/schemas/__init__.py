from schemas.base import BaseResponse, success_response, error_response
from schemas.articles import TransitionRequest, ArticleUpdate
from schemas.categories import CategoryCreate, CategoryUpdate
from schemas.auth import RegisterRequest


__all__ = [
    "BaseResponse",
    "success_response",
    "error_response",
    "TransitionRequest",
    "ArticleUpdate",
    "CategoryCreate",
    "CategoryUpdate",
    "RegisterRequest",
]
