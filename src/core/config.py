from pydantic import Field
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    app_name: str = Field("delco-repair-invoicing", alias="APP_NAME")
    app_env: str = Field("dev", alias="APP_ENV")

    # Logging
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # Azure Document Intelligence (OCR for ticket photos)
    az_di_endpoint: str | None = Field(default=None, alias="AZ_DI_ENDPOINT")
    az_di_api_key: str | None = Field(default=None, alias="AZ_DI_API_KEY")
    az_di_model: str = Field("prebuilt-read", alias="AZ_DI_MODEL")

    # CORS allowed origins (comma-separated list for production deployment)
    cors_origins: str = Field("http://localhost:3000,http://127.0.0.1:3000", alias="CORS_ORIGINS")

    # Pricing
    tax_rate: float = Field(0.06, alias="TAX_RATE")
    georges_markup: float = Field(1.54, alias="GEORGES_MARKUP")
    delivery_rate_per_mile: float = Field(0.85, alias="DELIVERY_RATE_PER_MILE")

    # Delivery distance is measured from the shop
    shop_address: str = Field("150 E Wynnewood Rd, Wynnewood, PA", alias="SHOP_ADDRESS")

    # Geocoding (Nominatim asks for at most one request per second)
    geocoder_url: str = Field("https://nominatim.openstreetmap.org/search", alias="GEOCODER_URL")
    geocoder_user_agent: str = Field("DelcoMusicCo-InvoiceApp/1.0", alias="GEOCODER_USER_AGENT")
    geocoder_min_interval: float = Field(1.2, alias="GEOCODER_MIN_INTERVAL")
    geocoder_timeout: float = Field(5.0, alias="GEOCODER_TIMEOUT")

    # Invoice records (unset = in-memory store)
    invoice_db_path: str | None = Field(default=None, alias="INVOICE_DB_PATH")

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

settings = Settings()
