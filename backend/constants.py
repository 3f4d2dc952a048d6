"""
Application-wide constants and configuration keys.

This module centralizes all magic strings and numbers used throughout the application
to improve maintainability and reduce duplication.
"""
from enum import Enum


class DeploymentMode(str, Enum):
    """
    Controls what the root route serves.

    - SITE: server-rendered index page listing every post
    - API: JSON healthcheck, for deployments fronted by a separate UI
    """

    SITE = 'site'
    API = 'api'

    @classmethod
    def from_string(cls, value: str) -> 'DeploymentMode':
        """Parse a mode name case-insensitively."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(f"Invalid deployment mode: {value}")


class EnvKeys:
    """Environment variables read at startup"""

    DATABASE_URL = 'DATABASE_URL'
    POOL_SIZE = 'BLOG_POOL_SIZE'
    POOL_MAX_OVERFLOW = 'BLOG_POOL_MAX_OVERFLOW'
    POOL_TIMEOUT = 'BLOG_POOL_TIMEOUT'
    POOL_RECYCLE = 'BLOG_POOL_RECYCLE'
    ECHO_SQL = 'BLOG_ECHO_SQL'
    MODE = 'BLOG_MODE'
    HOST = 'BLOG_HOST'
    PORT = 'BLOG_PORT'
    LOG_DIR = 'BLOG_LOG_DIR'
    LOG_LEVEL = 'BLOG_LOG_LEVEL'


class PoolDefaults:
    """Connection pool defaults"""

    SIZE = 5
    MAX_OVERFLOW = 0  # Keep the pool strictly bounded
    TIMEOUT_SECONDS = 30.0
    RECYCLE_SECONDS = 3600
    SQLITE_BUSY_TIMEOUT_MS = 5000


class TemplateNames:
    """Jinja2 templates rendered by the page routes"""

    INDEX = 'index.html'
    POST = 'post.html'

    @classmethod
    def all(cls) -> list[str]:
        return [cls.INDEX, cls.POST]


class ErrorCodes:
    """Machine-readable error identifiers returned in error bodies"""

    NOT_FOUND = 'not_found'
    VALIDATION = 'validation_error'
    CONFIGURATION = 'configuration_error'
    POOL_EXHAUSTED = 'pool_exhausted'
    CONNECTION = 'connection_error'
    DATABASE = 'database_error'
    INTERNAL = 'internal_error'


class HTTPStatus:
    """HTTP status codes used throughout the application"""

    # Client Errors
    NOT_FOUND = 404
    UNPROCESSABLE_ENTITY = 422

    # Server Errors
    INTERNAL_SERVER_ERROR = 500
    SERVICE_UNAVAILABLE = 503


class ServerConfig:
    """Server configuration constants"""

    HOST = "127.0.0.1"
    PORT = 8000


REQUEST_ID_HEADER = "X-Request-ID"
