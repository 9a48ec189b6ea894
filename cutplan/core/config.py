from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App Settings
    app_title: str = "Cut Plan API"
    port: int = 8000
    host: str = "0.0.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Category filter defaults
    min_confidence: float = 0.7

    # Cluster detection
    cluster_max_gap: float = 20.0  # seconds between takes of the same content
    repetition_similarity: float = 0.85

    # Resolution / timeline
    integrity_epsilon: float = 1e-6

    # Playback auto-skip
    skip_epsilon: float = 0.1  # absorbs frame rounding on the jump target
    max_repeat_jumps: int = 3

    # Sessions
    session_max_age: int = 86400  # seconds a review session is kept after creation

    # Export
    export_framerate: int = 24

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

settings = Settings()
