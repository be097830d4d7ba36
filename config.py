# config.py
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from errors import ConfigurationError, MISSING_API_KEY

# Nạp .env cùng thư mục backend
ENV_FILE = Path(__file__).resolve().parent / ".env"
load_dotenv(dotenv_path=ENV_FILE)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(extra="ignore", env_file=ENV_FILE)

    # Thứ tự ưu tiên: biến build frontend -> API_KEY -> GEMINI_API_KEY
    vite_gemini_api_key: Optional[str] = None
    api_key: Optional[str] = None
    gemini_api_key: Optional[str] = None

    gemini_model: str = "gemini-2.5-flash"
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    use_google_search: bool = False

    # Ví dụ: ALLOWED_ORIGINS="http://localhost:5173,https://nls-tool.vercel.app"
    allowed_origins: str = ""
    log_level: str = "INFO"
    port: int = 8000

    @property
    def origins(self) -> List[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

    @property
    def resolved_api_key(self) -> Optional[str]:
        # chuỗi rỗng coi như chưa đặt
        return self.vite_gemini_api_key or self.api_key or self.gemini_api_key or None

    def require_api_key(self) -> str:
        key = self.resolved_api_key
        if not key:
            raise ConfigurationError(MISSING_API_KEY)
        return key


@lru_cache
def get_settings() -> Settings:
    return Settings()
