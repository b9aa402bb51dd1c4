from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status

from core.articles import visibility_filter
from schemas import success_response, error_response


router = APIRouter(prefix="/public", tags=["公开访问"])


@router.get("/articles", summary="已发布文章列表")
async def list_published(category: Optional[str] = Query(None)):
    articles = await visibility_filter.list_public(category)
    return success_response(
        {
            "list": [a.model_dump(by_alias=True, mode="json") for a in articles],
            "total": len(articles),
        }
    )


@router.get("/articles/{article_id}", summary="已发布文章详情")
async def get_published(article_id: str):
    """未发布的文章与不存在的文章返回同样的 404"""
    article = await visibility_filter.get_public(article_id)
    if article is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=error_response(code=40401, message="文章不存在"),
        )
    return success_response(article.model_dump(by_alias=True, mode="json"))
