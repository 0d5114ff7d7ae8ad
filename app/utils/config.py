from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_env: str = "development"
    host: str = "0.0.0.0"
    port: int = 8000
    # GitHub
    github_token: str = ""
    github_user: str = "iitjeelf"
    github_api_base_url: str = "https://api.github.com"
    github_user_agent: str = "LFJC-Portal"
    github_branch: str = "main"
    repo_description_label: str = "LFJC"
    # Google Apps Script webhook (answer key -> PDF)
    google_script_url: str = ""
    # Seconds; unset means no client-side timeout
    http_timeout: Optional[float] = None

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


def get_settings() -> Settings:
    """Reads configuration fresh from the environment for each request."""
    return Settings()
