"""Repository layer for data access.

This layer abstracts external dependencies (databases, caches, vendor APIs)
behind protocol-based interfaces. This enables:
- Easy swapping of implementations (memory -> Redis, Baidu -> Hunyuan, etc.)
- Unit testing with fake implementations
- Clear separation of concerns

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from .baidu_dish_provider import BaiduDishProvider
from .deepseek_language_model import DeepSeekLanguageModel
from .hunyuan_vision_provider import HunyuanVisionProvider
from .memory_cache import InMemoryExpiringCache
from .redis_cache import RedisExpiringCache
from .sql_repository import SqlCommentRepository, SqlUnitOfWork
from .token_issuers import BaiduTokenIssuer, WeChatTokenIssuer
from .wechat_client import WeChatClient

__all__ = [
    "BaiduDishProvider",
    "BaiduTokenIssuer",
    "DeepSeekLanguageModel",
    "HunyuanVisionProvider",
    "InMemoryExpiringCache",
    "RedisExpiringCache",
    "SqlCommentRepository",
    "SqlUnitOfWork",
    "WeChatClient",
    "WeChatTokenIssuer",
]
