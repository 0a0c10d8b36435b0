from pydantic_settings import BaseSettings
from pydantic import Field
from typing import Optional


class Settings(BaseSettings):
    API_BASE_URL: str = Field(..., env="API_BASE_URL")
    REDIS_URL: str = Field(..., env="REDIS_URL")
    JWT_SECRET: str = Field(..., env="JWT_SECRET")
    JWT_ALGORITHM: str = Field(default="HS256", env="JWT_ALGORITHM")
    GATEWAY_TIMEOUT: float = Field(default=15.0, env="GATEWAY_TIMEOUT")
    WIZARD_TTL_SECONDS: int = Field(default=3600, env="WIZARD_TTL_SECONDS")
    EXPORT_DATE_FORMAT: str = Field(default="%d/%m/%Y", env="EXPORT_DATE_FORMAT")
    DEFAULT_TIMEZONE: str = Field(default="Asia/Kolkata", env="DEFAULT_TIMEZONE")
    DEFAULT_COUNTRY: str = Field(default="India", env="DEFAULT_COUNTRY")
    DEFAULT_PHONE_REGION: str = Field(default="IN", env="DEFAULT_PHONE_REGION")
    CURRENCY: str = Field(default="INR", env="CURRENCY")
    CHECKOUT_NAME: str = Field(default="LiftupLabs", env="CHECKOUT_NAME")
    CHECKOUT_THEME_COLOR: str = Field(default="#EA580C", env="CHECKOUT_THEME_COLOR")
    UPI_VPA: Optional[str] = Field(default=None, env="UPI_VPA")
    NOTE_MAX_BYTES: int = Field(default=50 * 1024 * 1024, env="NOTE_MAX_BYTES")
    CORS_ORIGINS: str = Field(default="*", env="CORS_ORIGINS")


    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

settings = Settings()
