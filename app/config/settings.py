from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""  # anon key; requests are made as the calling user so RLS applies
    supabase_service_role_key: Optional[str] = None  # Required to create profiles at registration

    # Code runner
    runner_provider: str = "wandbox"  # wandbox | piston
    runner_timeout_seconds: float = 30.0
    wandbox_url: str = "https://wandbox.org/api/compile.json"
    wandbox_compiler: str = "gcc-head"
    wandbox_options: str = "warning,gnu++2b"
    wandbox_compiler_option_raw: str = "-O2"
    piston_url: str = "https://emkc.org/api/v2/piston/execute"
    piston_language: str = "c++"
    piston_version: str = "*"

    # Chat
    message_history_limit: int = 200

    # Terminal sessions
    terminal_max_sessions: int = 500
    terminal_session_ttl_seconds: int = 1800

    # Realtime
    realtime_enabled: bool = True

    # App
    app_name: str = "codeforge-backend"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "*"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"
    run_rate_limit: str = "30/minute"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def allows_any_origin(self) -> bool:
        return "*" in self.get_cors_origins_list()

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
