from pydantic_settings import BaseSettings
from pydantic import Field, validator
from typing import Optional
from dotenv import load_dotenv
import logging
import sys

load_dotenv()
logger = logging.getLogger(__name__)

class Settings(BaseSettings):
    # Required environment variables
    JWT_SECRET: str = Field(..., min_length=32, description="JWT secret key (minimum 32 characters)")

    # Optional with defaults
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=60 * 24, ge=1, le=60 * 24 * 30)

    # Storage
    STORE_BACKEND: str = Field(default="memory", description="memory, redis or mongo")
    STORE_PREFIX: str = Field(default="")
    REDIS_URL: Optional[str] = Field(default=None, description="Redis connection URL")
    MONGO_URI: Optional[str] = Field(default=None, description="MongoDB connection URI")
    SEED_SAMPLE_DATA: bool = Field(default=True)
    STATS_REFRESH_HOUR: int = Field(default=0, ge=0, le=23)

    # Demo admin account
    ADMIN_EMAIL: str = Field(default="admin@skillnexis.com")
    ADMIN_PASSWORD: Optional[str] = Field(default=None, description="admin login is refused until this or ADMIN_PASSWORD_HASH is set")
    ADMIN_PASSWORD_HASH: Optional[str] = Field(default=None, description="passlib hash; wins over ADMIN_PASSWORD")

    # Contact form relay (Brevo transactional email)
    BREVO_API_URL: str = Field(default="https://api.brevo.com/v3/smtp/email")
    BREVO_API_KEY: str = Field(default="")
    FROM_NAME: str = Field(default="SkillNexis Contact Form")
    FROM_EMAIL: str = Field(default="skillnexis.official@gmail.com")
    CONTACT_EMAIL: str = Field(default="skillnexis.official@gmail.com")

    # Environment
    ENVIRONMENT: str = Field(default="development")
    DEBUG: bool = Field(default=False)

    @validator('JWT_SECRET')
    def validate_jwt_secret(cls, v):
        if len(v) < 32:
            raise ValueError('JWT_SECRET must be at least 32 characters long')
        return v

    @validator('STORE_BACKEND')
    def validate_store_backend(cls, v):
        if v not in ('memory', 'redis', 'mongo'):
            raise ValueError('STORE_BACKEND must be one of memory, redis, mongo')
        return v

    @validator('MONGO_URI')
    def validate_mongo_uri(cls, v):
        if v and not v.startswith(('mongodb://', 'mongodb+srv://')):
            raise ValueError('MONGO_URI must be a valid MongoDB connection string')
        return v

    @validator('REDIS_URL')
    def validate_redis_url(cls, v):
        if v and not v.startswith(('redis://', 'rediss://')):
            raise ValueError('REDIS_URL must be a valid Redis connection string')
        return v

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"

try:
    settings = Settings()
    logger.info("Configuration loaded successfully")
except Exception as e:
    logger.critical(f"Failed to load configuration: {str(e)}")
    sys.exit(1)
