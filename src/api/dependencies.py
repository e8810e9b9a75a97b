"""FastAPI dependencies for injection."""
from functools import lru_cache

from fastapi import Depends

from core.config import Settings, get_settings
from core.record_cache import RecordCache, RedisRecordCache
from core.redis import get_redis_client
from services.expression_evaluator import ExpressionEvaluator, JinjaExpressionEvaluator
from services.user_store import UserStore


def get_record_cache(settings: Settings = Depends(get_settings)) -> RecordCache:
    """Redis-backed record cache; a miss on every fetch when Redis is not set up."""
    return RedisRecordCache(get_redis_client(), ttl=settings.users_cache_ttl)


def get_user_store(
    settings: Settings = Depends(get_settings),
    cache: RecordCache = Depends(get_record_cache),
) -> UserStore:
    """A fresh store per request, so its in-memory memo lives for one request."""
    return UserStore(settings.accounts_dir, cache)


@lru_cache
def get_expression_evaluator() -> ExpressionEvaluator:
    """Shared evaluator; it only holds compiled expressions."""
    return JinjaExpressionEvaluator()


__all__ = [
    "get_expression_evaluator",
    "get_record_cache",
    "get_settings",
    "get_user_store",
]
