"""文章领域模块。"""

from core.articles.model import Article, ArticleDraft, ArticleStatus
from core.articles.repo import ArticleRepository
from core.articles.workflow import WorkflowEngine, TRANSITIONS
from core.articles.visibility import VisibilityFilter, can_view, visible_articles
from core.articles.editor import ArticleEditor, ImageUpload
from core.categories import category_registry
from core.integrations.supabase.client import supabase_client
from core.integrations.supabase.storage import supabase_storage_articles


article_repo = ArticleRepository(supabase_client)
workflow_engine = WorkflowEngine(article_repo)
visibility_filter = VisibilityFilter(article_repo)
article_editor = ArticleEditor(article_repo, category_registry, supabase_storage_articles)

__all__ = [
    "article_repo",
    "workflow_engine",
    "visibility_filter",
    "article_editor",
    "Article",
    "ArticleDraft",
    "ArticleStatus",
    "ArticleRepository",
    "WorkflowEngine",
    "TRANSITIONS",
    "VisibilityFilter",
    "ArticleEditor",
    "ImageUpload",
    "can_view",
    "visible_articles",
]
