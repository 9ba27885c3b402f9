from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str
    sql_echo: bool = False
    log_level: str = "INFO"

    # Поиск
    search_default_page_size: int = 10
    search_max_page_size: int = 50
    search_timeout_seconds: float = 5.0
    author_facet_limit: int = 50

    model_config = {"env_file": ".env", "extra": "ignore"}

settings = Settings()
