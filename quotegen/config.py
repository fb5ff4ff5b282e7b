from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    LOCALE: str = "en_IN"
    DEFAULT_TERMS: str = "Net 30 days. Please make payment within 30 days of receiving this quotation."
    FONT_URL: str = "https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600;700&display=swap"

    # Page setup handed to the renderer
    PAGE_FORMAT: str = "A4"
    PAGE_MARGIN_MM: float = 10.0
    PRINT_BACKGROUND: bool = True
    RENDERER_MAX_CONCURRENT: int = 4

    # Transport
    MAX_BODY_BYTES: int = 50 * 1024 * 1024
    CORS_ORIGINS: str = "*"
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"


settings = Settings()
