from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    JWT_SECRET: str
    ADMIN_USERNAME: str
    ADMIN_PASSWORD: str

    MONGO_URI: str
    MONGO_DB: str = "productDB"

    HOST: str = "0.0.0.0"
    PORT: int = 5000
    API_PREFIX: str = "/api"
    LOG_LEVEL: str = "INFO"

    JWT_ALGORITHM: str = "HS256"
    TOKEN_TTL_HOURS: int = 24

    # PUT /products/{id} has historically been open; flip this to guard it
    REQUIRE_AUTH_ON_UPDATE: bool = False

    class Config:
        env_file = ".env"


@lru_cache
def get_settings() -> Settings:
    return Settings()
