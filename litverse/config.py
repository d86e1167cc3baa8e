from typing import Optional
from pydantic_settings import BaseSettings
from urllib.parse import quote_plus

class Settings(BaseSettings):
    ENV: str = "local"
    log_level: str = "INFO"
    client_url: str = "http://localhost:3000"

    postgres_user: str = "litverse"
    postgres_password: str = ""
    postgres_db: str = "litverse"
    postgres_host: str = "localhost"
    postgres_port: str = "5432"

    # full SQLAlchemy URL, wins over the postgres_* parts when set
    database_uri: Optional[str] = None

    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7

    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    ai_timeout_seconds: float = 10.0

    free_shipping_threshold: float = 50.00
    flat_shipping_rate: float = 5.99
    tax_rate: float = 0.08

    @property
    def database_url(self):
        if self.database_uri:
            return self.database_uri
        encoded_password = quote_plus(self.postgres_password)
        return (
            f"postgresql+psycopg2://{self.postgres_user}:"
            f"{encoded_password}@{self.postgres_host}:"
            f"{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def ai_enabled(self) -> bool:
        return bool(self.openai_api_key) and self.openai_api_key != "your-openai-api-key-here"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "allow"

settings = Settings()
