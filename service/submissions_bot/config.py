from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Supabase
    supabase_url: str
    supabase_anon_key: str
    submissions_table: str = "submissions"
    list_limit: int = 999

    # Telegram
    telegram_bot_token: str
    telegram_webhook_secret: str = ""  # Optional: for webhook verification
    admin_chat_id: int  # Only this chat may use the bot

    # Document downloads
    temp_dir: str = "temp"
    download_timeout_seconds: float = 60.0

    # Trailing line on every message the bot sends
    attribution_line: str = "Made by 👩‍💻《D4X3D》"

    # Environment
    environment: str = "development"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
