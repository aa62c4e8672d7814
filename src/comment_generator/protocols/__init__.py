"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (memory -> Redis, Baidu -> Hunyuan, etc.)
- Unit testing with fake implementations
- Clear separation of concerns

Usage:
    ```python
    from comment_generator.protocols import ExpiringCache, VisionProvider

    # Type hints work with any implementation
    cache: ExpiringCache = InMemoryExpiringCache()  # works
    cache: ExpiringCache = RedisExpiringCache()     # also works
    ```
"""

from .comment_store import CommentStore, CommentUnitOfWork
from .expiring_cache import ExpiringCache
from .language_model import LanguageModel
from .token_issuer import IssuedToken, TokenIssuer
from .vision_provider import VisionProvider

__all__ = [
    "CommentStore",
    "CommentUnitOfWork",
    "ExpiringCache",
    "IssuedToken",
    "LanguageModel",
    "TokenIssuer",
    "VisionProvider",
]
