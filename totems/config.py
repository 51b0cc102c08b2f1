from pydantic import validator
from pydantic_settings import BaseSettings
from typing import Optional, Dict, Any


class Settings(BaseSettings):
    # Database
    DB_USER: str = "user"
    DB_PASSWORD: str = "password"
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_NAME: str = "totems"
    DATABASE_URL: Optional[str] = None

    @validator("DATABASE_URL", pre=True, always=True)
    def assemble_db_connection(cls, v: Optional[str], values: Dict[str, Any]) -> Any:
        if isinstance(v, str):
            return v
        return (
            f"postgresql+psycopg2://{values.get('DB_USER')}:{values.get('DB_PASSWORD')}@"
            f"{values.get('DB_HOST')}:{values.get('DB_PORT')}/{values.get('DB_NAME')}"
        )

    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10

    # Creation fees (smallest unit)
    MIN_BASE_FEE: int = 500000000000000
    BURNED_FEE: int = 100000000000000

    @validator("BURNED_FEE")
    def burned_fee_within_base_fee(cls, v: int, values: Dict[str, Any]) -> int:
        base_fee = values.get("MIN_BASE_FEE")
        if base_fee is not None and v > base_fee:
            raise ValueError("BURNED_FEE cannot exceed MIN_BASE_FEE")
        return v

    # Creation limits
    MAX_ALLOCATIONS: int = 50
    MAX_MODS: int = 200
    TICKER_MAX_LENGTH: int = 10
    NAME_MIN_LENGTH: int = 3
    NAME_MAX_LENGTH: int = 32
    DESCRIPTION_MAX_LENGTH: int = 500

    # Collaborators
    PROXY_MOD_ADDRESS: Optional[str] = None
    TREASURY_ADDRESS: str = "0x0000000000000000000000000000000000000000"

    # Monitoring
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"

    # API
    API_HOST: str = "127.0.0.1"
    API_PORT: int = 8083
    DEFAULT_PAGE_SIZE: int = 50
    MAX_PAGE_SIZE: int = 500

    # Cache Redis
    REDIS_URL: str = "redis://localhost:6379/0"
    CACHE_TTL: int = 300
    CACHE_ENABLED: bool = True

    REGISTRY_VERSION: str = "1.0.0"

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
