from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    app_name: str = "sitesmith"
    api_host: str = "0.0.0.0"
    api_port: int = 8080

    database_url: str = "sqlite:///./sitesmith.db"
    redis_url: str = "redis://localhost:6379/0"

    public_dir: str = "./public"
    public_url_prefix: str = "/public"

    default_provider: str = "gemini"
    default_user_id: str = "default"
    max_output_tokens: int = 4000
    inter_file_delay_seconds: float = 1.0

    # Credential fallback, consulted only when no key is stored for the provider
    google_api_key: str | None = None
    gemini_api_key: str | None = None
    openai_api_key: str | None = None
    anthropic_api_key: str | None = None

    def env_api_key(self, provider: str) -> str | None:
        if provider == "gemini":
            return self.google_api_key or self.gemini_api_key
        if provider == "openai":
            return self.openai_api_key
        if provider == "claude":
            return self.anthropic_api_key
        return None

settings = Settings()
