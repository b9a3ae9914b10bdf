from functools import lru_cache

from humanizer_ai.services.rewrite_client import RewriteClient


@lru_cache
def get_rewrite_client() -> RewriteClient:
    return RewriteClient()
