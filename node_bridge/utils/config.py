"""Configuration for the Node Service Bridge"""
import os
from pydantic_settings import BaseSettings


class BridgeSettings(BaseSettings):
    """CMS-side bridge settings (env prefix ``BRIDGE_``)"""

    # Plugin info
    APP_NAME: str = "Node Service Bridge"
    APP_VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"

    # Installation layout used for port discovery
    INSTALL_ROOT: str = os.getcwd()
    PORT_DIR_NAME: str = "node-wp-bridge"
    PORT_FILE_NAME: str = ".port"
    DEFAULT_PORT: int = 3000
    SERVICE_HOST: str = "localhost"

    # Durable options (stand-in for the CMS option table)
    OPTIONS_FILE: str = "data/options.json"

    # Security
    ADMIN_API_KEY: str = ""  # Required for /port and /notice

    # Timeouts (seconds)
    PROXY_TIMEOUT: float = 30.0
    STATUS_TIMEOUT: float = 5.0
    NOTICE_TIMEOUT: float = 2.0
    NOTICE_CACHE_SECONDS: int = 300

    class Config:
        env_prefix = "BRIDGE_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


class ServiceSettings(BaseSettings):
    """Companion service settings"""

    PORT: int = 3000
    WORDPRESS_URL: str = "http://localhost:8080"
    SITE_NAME: str = "WordPress Site"
    SITE_ID: str = "local"
    NODE_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Marker file the bridge client reads to discover this service
    PORT_FILE: str = ""

    # Timeout for calls back into WordPress (seconds)
    WORDPRESS_TIMEOUT: float = 10.0

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"
