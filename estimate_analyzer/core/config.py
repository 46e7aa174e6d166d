from pydantic import Field
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    app_name: str = Field("estimate-analyzer", alias="APP_NAME")
    app_env: str = Field("dev", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    # Azure Document Intelligence (optional remote page-text source)
    az_di_endpoint: str | None = Field(default=None, alias="AZ_DI_ENDPOINT")
    az_di_api_key: str | None = Field(default=None, alias="AZ_DI_API_KEY")

    # Google Sheets sync
    google_sheets_id: str | None = Field(default=None, alias="GOOGLE_SHEETS_ID")
    service_account_key: str | None = Field(default=None, alias="SERVICE_ACCOUNT_KEY")  # Service account JSON
    sheets_range: str = Field("Estimates!A:V", alias="SHEETS_RANGE")
    sheets_max_retries: int = Field(3, alias="SHEETS_MAX_RETRIES")

    # Storage (empty = in-memory)
    estimate_db_path: str | None = Field(default=None, alias="ESTIMATE_DB_PATH")

    # CORS allowed origins (comma-separated list for production deployment)
    cors_origins: str = Field("http://localhost:3000,http://127.0.0.1:3000", alias="CORS_ORIGINS")

    # Upload handling
    max_upload_mb: float = Field(25.0, alias="MAX_UPLOAD_MB")

    # Run the server-side validation pass and let it push records to review
    strict_validation: bool = Field(False, alias="STRICT_VALIDATION")

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

settings = Settings()
