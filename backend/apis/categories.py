from fastapi import APIRouter, Depends

from core.auth.deps import require_editor
from core.auth.model import Actor
from core.categories import category_registry
from schemas import CategoryCreate, CategoryUpdate, success_response


router = APIRouter(prefix="/categories", tags=["分类管理"])


@router.get("", summary="获取分类列表", description="按名称升序返回全部分类")
async def list_categories():
    categories = await category_registry.list()
    return success_response(
        data={
            "list": [c.model_dump(by_alias=True) for c in categories],
            "total": len(categories),
        }
    )


@router.post("", summary="创建分类")
async def create_category(
    category: CategoryCreate,
    _editor: Actor = Depends(require_editor),
):
    created = await category_registry.create(category.name, category.description)
    return success_response(data=created.model_dump(by_alias=True))


@router.post("/bootstrap", summary="初始化默认分类", description="仅在分类表为空时写入")
async def bootstrap_categories(_editor: Actor = Depends(require_editor)):
    inserted = await category_registry.bootstrap()
    return success_response(data={"inserted": inserted})


@router.put("/{category_id}", summary="更新分类")
async def update_category(
    category_id: str,
    category: CategoryUpdate,
    _editor: Actor = Depends(require_editor),
):
    updated = await category_registry.update(
        category_id, category.model_dump(exclude_unset=True)
    )
    return success_response(data=updated.model_dump(by_alias=True))


@router.delete("/{category_id}", summary="删除分类")
async def delete_category(
    category_id: str,
    _editor: Actor = Depends(require_editor),
):
    await category_registry.delete(category_id)
    return success_response(message="Category deleted successfully")
