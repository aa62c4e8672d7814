import os
from dataclasses import dataclass
from functools import lru_cache

import redis
from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./comments.db")

    # Expiring cache: "memory" or "redis"
    cache_backend: str = os.getenv("CACHE_BACKEND", "memory")
    cache_key_prefix: str = os.getenv("CACHE_KEY_PREFIX", "comment_generator")
    category_cache_ttl: int = int(os.getenv("CATEGORY_CACHE_TTL", "300"))

    # Redis
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")

    # Vision: "baidu" or "hunyuan"
    vision_provider: str = os.getenv("VISION_PROVIDER", "baidu")
    vision_top_k: int = int(os.getenv("VISION_TOP_K", "3"))
    vision_filter_threshold: float = float(os.getenv("VISION_FILTER_THRESHOLD", "0.9"))
    vision_min_confidence: float = float(os.getenv("VISION_MIN_CONFIDENCE", "0.2"))
    vision_non_subject_label: str = os.getenv("VISION_NON_SUBJECT_LABEL", "非菜")
    image_fetch_timeout: float = float(os.getenv("IMAGE_FETCH_TIMEOUT", "15"))

    # Baidu dish recognition
    baidu_api_key: str | None = os.getenv("BAIDU_API_KEY")
    baidu_secret_key: str | None = os.getenv("BAIDU_SECRET_KEY")
    baidu_token_url: str = os.getenv(
        "BAIDU_TOKEN_URL", "https://aip.baidubce.com/oauth/2.0/token"
    )
    baidu_dish_url: str = os.getenv(
        "BAIDU_DISH_URL", "https://aip.baidubce.com/rest/2.0/image-classify/v2/dish"
    )
    baidu_token_margin: int = int(os.getenv("BAIDU_TOKEN_MARGIN", "300"))

    # Hunyuan multimodal vision
    hunyuan_api_key: str | None = os.getenv("HUNYUAN_API_KEY")
    hunyuan_vision_model: str = os.getenv("HUNYUAN_VISION_MODEL", "hunyuan-t1-vision")
    hunyuan_base_url: str = os.getenv(
        "HUNYUAN_BASE_URL", "https://api.hunyuan.cloud.tencent.com/v1"
    )

    # WeChat mini program
    wechat_app_id: str | None = os.getenv("WECHAT_APP_ID")
    wechat_app_secret: str | None = os.getenv("WECHAT_APP_SECRET")
    wechat_base_url: str = os.getenv("WECHAT_BASE_URL", "https://api.weixin.qq.com")
    wechat_token_margin: int = int(os.getenv("WECHAT_TOKEN_MARGIN", "60"))

    # Language model (OpenAI-compatible chat completions)
    llm_api_key: str | None = os.getenv("DEEPSEEK_API_KEY")
    llm_base_url: str = os.getenv("LLM_BASE_URL", "https://api.deepseek.com/v1")
    llm_model: str = os.getenv("LLM_MODEL", "deepseek-chat")
    llm_temperature: float = float(os.getenv("LLM_TEMPERATURE", "0.85"))
    generation_timeout: float = float(os.getenv("GENERATION_TIMEOUT", "30"))

    # Generation
    default_target_words: int = int(os.getenv("DEFAULT_TARGET_WORDS", "120"))
    min_target_words: int = int(os.getenv("MIN_TARGET_WORDS", "50"))
    max_target_words: int = int(os.getenv("MAX_TARGET_WORDS", "800"))
    food_category_name: str = os.getenv("FOOD_CATEGORY_NAME", "美食")
    food_category_keyword: str = os.getenv("FOOD_CATEGORY_KEYWORD", "food")

    # Category seeding
    seed_dir: str = os.getenv("SEED_DIR", "./seed")

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "true").lower() == "true"

    @property
    def baidu_configured(self) -> bool:
        """Check if both Baidu credentials are present."""
        return bool(self.baidu_api_key and self.baidu_secret_key)

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.cache_backend not in ("memory", "redis"):
            raise ValueError(
                f"CACHE_BACKEND must be 'memory' or 'redis', got {self.cache_backend!r}"
            )

        if self.vision_provider not in ("baidu", "hunyuan"):
            raise ValueError(
                f"VISION_PROVIDER must be 'baidu' or 'hunyuan', got {self.vision_provider!r}"
            )

        if not 0 <= self.vision_min_confidence <= 1:
            raise ValueError("VISION_MIN_CONFIDENCE must be between 0 and 1")

        if self.vision_top_k < 1:
            raise ValueError("VISION_TOP_K must be at least 1")

        if not self.min_target_words <= self.default_target_words <= self.max_target_words:
            raise ValueError(
                "DEFAULT_TARGET_WORDS must lie between MIN_TARGET_WORDS and MAX_TARGET_WORDS"
            )

        if self.generation_timeout <= 0:
            raise ValueError("GENERATION_TIMEOUT must be positive")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def get_redis_client() -> redis.Redis:
    """Create a Redis client instance."""
    return redis.from_url(
        settings.redis_url,
        password=settings.redis_password,
        decode_responses=False,
    )
