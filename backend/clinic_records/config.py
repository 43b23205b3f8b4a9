from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from sqlalchemy.engine import URL
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    """Records store settings."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # MySQL
    mysql_host: str = Field(default="localhost")
    mysql_user: str = Field(default="root")
    mysql_password: str = Field(default="")
    mysql_port: int = Field(default=3306)
    mysql_database: str = Field(default="clinic")

    # Full SQLAlchemy URL, wins over the MYSQL_* values when set
    database_url: Optional[str] = Field(default=None)

    sql_echo: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    @property
    def sqlalchemy_url(self) -> str:
        if self.database_url:
            return self.database_url
        url = URL.create(
            "mysql+aiomysql",
            username=self.mysql_user,
            password=self.mysql_password or None,
            host=self.mysql_host,
            port=self.mysql_port,
            database=self.mysql_database,
        )
        return url.render_as_string(hide_password=False)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
