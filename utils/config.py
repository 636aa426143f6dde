"""
Configuration management for Pantrify application.

Handles environment variables, database settings, and remote service settings.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass
class Config:
    """Application configuration settings"""
    
    # Database settings
    database_path: str = "pantrify.db"
    
    # Recipe search (TheMealDB compatible)
    search_base_url: str = "https://www.themealdb.com/api/json/v1/1"
    search_timeout_seconds: int = 15
    
    # Unit classifier (OpenAI compatible chat completions)
    ai_base_url: str = "https://api.openai.com/v1"
    ai_model: str = "gpt-4o-mini"
    ai_api_key: str = ""
    ai_timeout_seconds: int = 15
    
    # Streamlit settings
    debug_mode: bool = False
    
    # Logging
    log_level: str = "INFO"
    log_file: str = "logs/pantrify.log"
    
    @classmethod
    def from_environment(cls) -> 'Config':
        """Create configuration from environment variables"""
        return cls(
            database_path=os.getenv("PANTRIFY_DB_PATH", "pantrify.db"),
            
            search_base_url=os.getenv("PANTRIFY_SEARCH_URL", "https://www.themealdb.com/api/json/v1/1"),
            search_timeout_seconds=int(os.getenv("PANTRIFY_SEARCH_TIMEOUT", "15")),
            
            ai_base_url=os.getenv("PANTRIFY_AI_URL", "https://api.openai.com/v1"),
            ai_model=os.getenv("PANTRIFY_AI_MODEL", "gpt-4o-mini"),
            ai_api_key=os.getenv("OPENAI_API_KEY", ""),
            ai_timeout_seconds=int(os.getenv("PANTRIFY_AI_TIMEOUT", "15")),
            
            debug_mode=_env_flag("PANTRIFY_DEBUG"),
            
            log_level=os.getenv("PANTRIFY_LOG_LEVEL", "INFO"),
            log_file=os.getenv("PANTRIFY_LOG_FILE", "logs/pantrify.log")
        )
    
    def ensure_directories(self):
        """Create directories for the log file and database"""
        directories = [Path(self.log_file).parent]
        if self.database_path != ":memory:":
            directories.append(Path(self.database_path).parent)
        
        for directory in directories:
            if directory != Path("."):
                directory.mkdir(parents=True, exist_ok=True)


# Global configuration instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get global configuration instance"""
    global _config
    if _config is None:
        _config = Config.from_environment()
        _config.ensure_directories()
    return _config


def reload_config():
    """Reload configuration from environment"""
    global _config
    _config = None
    return get_config()
