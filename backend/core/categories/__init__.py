"""分类领域模块。"""

from core.integrations.supabase.client import supabase_client
from core.categories.registry import CategoryRegistry, DEFAULT_CATEGORIES
from core.categories.model import Category


category_registry = CategoryRegistry(supabase_client)

__all__ = ["category_registry", "CategoryRegistry", "Category", "DEFAULT_CATEGORIES"]
