"""Configuration management."""

from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings from environment."""
    
    # Repository
    repo_root: Path | None = None  # falls back to `git rev-parse --show-toplevel`
    
    # Lock service
    redis_url: str = "redis://localhost:6379"
    lock_namespace: str = "default"
    
    # Committer identity, falls back to git config user.name / user.email
    committer_name: str | None = None
    committer_email: str | None = None
    
    # Logging
    log_level: str = "INFO"
    
    class Config:
        env_prefix = "LOCKABLE_"
        env_file = ".env"
        env_file_encoding = "utf-8"
