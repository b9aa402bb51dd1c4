from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status as fast_status

from core.articles import (
    Article,
    ArticleDraft,
    ImageUpload,
    article_editor,
    visibility_filter,
    workflow_engine,
)
from core.auth.deps import get_current_actor
from core.auth.model import Actor
from core.common.errors import NotFound, WorkflowError
from core.common.log import logger
from schemas import ArticleUpdate, TransitionRequest, success_response, error_response


router = APIRouter(prefix="/articles", tags=["文章管理"])


def article_out(article: Article, actor: Optional[Actor] = None) -> dict:
    data = article.model_dump(by_alias=True, mode="json")
    if actor is not None:
        data["allowedTransitions"] = [
            s.value for s in workflow_engine.allowed_targets(article, actor)
        ]
    return data


async def _read_image(image: Optional[UploadFile]) -> Optional[ImageUpload]:
    if image is None or not image.filename:
        return None
    return ImageUpload(
        data=await image.read(),
        filename=image.filename,
        content_type=image.content_type or "image/jpeg",
    )


@router.get("", summary="工作台文章列表")
async def list_articles(actor: Actor = Depends(get_current_actor)):
    """编辑看到全部文章, 记者只看到自己的文章"""
    try:
        articles = await visibility_filter.list_for(actor)
        return success_response(
            {"list": [article_out(a, actor) for a in articles], "total": len(articles)}
        )
    except WorkflowError:
        raise
    except Exception as e:
        logger.error(f"获取文章列表失败: {str(e)}")
        raise HTTPException(
            status_code=fast_status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=error_response(code=50001, message=f"获取文章列表失败: {str(e)}"),
        )


@router.post("", summary="创建文章")
async def create_article(
    title: str = Form(""),
    subtitle: str = Form(""),
    body: str = Form(""),
    category: str = Form(""),
    image: Optional[UploadFile] = File(None),
    actor: Actor = Depends(get_current_actor),
):
    draft = ArticleDraft(title=title, subtitle=subtitle, body=body, category=category)
    article = await article_editor.create_article(actor, draft, await _read_image(image))
    return success_response(article_out(article, actor))


@router.get("/{article_id}", summary="获取文章详情")
async def get_article(article_id: str, actor: Actor = Depends(get_current_actor)):
    article = await visibility_filter.get_for_actor(actor, article_id)
    if article is None:
        raise NotFound(f"文章不存在: {article_id}")
    return success_response(article_out(article, actor))


@router.put("/{article_id}", summary="修改文章内容")
async def update_article(
    article_id: str,
    payload: ArticleUpdate,
    actor: Actor = Depends(get_current_actor),
):
    fields = payload.model_dump(exclude_unset=True)
    article = await article_editor.update_article(actor, article_id, fields)
    return success_response(article_out(article, actor))


@router.post("/{article_id}/image", summary="替换文章配图")
async def replace_image(
    article_id: str,
    image: UploadFile = File(...),
    actor: Actor = Depends(get_current_actor),
):
    article = await article_editor.update_article(
        actor, article_id, {}, await _read_image(image)
    )
    return success_response(article_out(article, actor))


@router.delete("/{article_id}", summary="删除文章")
async def delete_article(article_id: str, actor: Actor = Depends(get_current_actor)):
    await article_editor.delete_article(actor, article_id)
    return success_response(message="文章已删除")


@router.post("/{article_id}/transition", summary="变更文章状态")
async def transition_article(
    article_id: str,
    payload: TransitionRequest,
    actor: Actor = Depends(get_current_actor),
):
    article = await workflow_engine.transition(article_id, actor, payload.status)
    return success_response(article_out(article, actor))
