from typing import Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Category(BaseModel):
    """文章分类（栏目）"""

    model_config = ConfigDict(
        from_attributes=True, alias_generator=to_camel, populate_by_name=True
    )

    id: str
    name: str
    description: Optional[str] = None
    created_at: Optional[str] = None   # ISO datetime string
