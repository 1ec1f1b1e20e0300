"""
Application configuration management using Pydantic Settings.
"""
import logging
import os
from pathlib import Path
from typing import Literal, Optional, Dict, Any, List
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from dotenv import load_dotenv

# Load .env first
load_dotenv()

logger = logging.getLogger(__name__)

PACKAGE_DIR = Path(__file__).resolve().parent


def _default_catalog_paths() -> List[str]:
    """Candidate locations for the component catalog, highest priority first."""
    cwd = Path(os.getcwd())
    return [
        str(cwd / "data" / "codegens.json"),
        str(cwd.parent / "data" / "codegens.json"),
        str(PACKAGE_DIR.parent / "data" / "codegens.json"),
        str(PACKAGE_DIR / "data" / "codegens.json"),
        str(cwd / "design-service" / "data" / "codegens.json"),
    ]


class Settings(BaseSettings):
    """Design block service settings"""

    # -------------------------
    # APPLICATION METADATA & RUNTIME
    # -------------------------
    app_name: str = "Design Block Service"
    app_version: str = "0.1.0"
    api_title: str = "Design Block Service API"
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_directory: str = "logs"

    # -------------------------
    # LLM SETTINGS (OpenAI-compatible endpoint)
    # -------------------------
    llm_api_url: str = "https://api.openai.com/v1"
    llm_api_key: Optional[str] = None
    llm_model: str = "gpt-4o-mini"
    llm_timeout: float = 120.0
    llm_max_tokens: int = 4096
    llm_temperature: float = 0.7

    # Per-purpose models; empty means "use llm_model"
    analysis_model: Optional[str] = None
    design_model: Optional[str] = None
    integration_model: Optional[str] = None

    # -------------------------
    # COMPLEXITY ESTIMATION
    # -------------------------
    complexity_use_ai: bool = True
    complexity_max_retries: int = Field(default=3, ge=1, le=10)

    # -------------------------
    # COMPONENT CATALOG
    # -------------------------
    catalog_paths: List[str] = Field(default_factory=_default_catalog_paths)
    catalog_group_title: str = "Private Component Codegen"

    # -------------------------
    # VALIDATORS
    # -------------------------
    @field_validator('log_level', mode='before')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        return str(v).upper()

    @field_validator('environment', mode='before')
    @classmethod
    def validate_environment(cls, v: str) -> str:
        valid_envs = ["development", "staging", "production"]
        if v not in valid_envs:
            logger.warning(f"Invalid environment '{v}', defaulting to 'development'")
            return "development"
        return v

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    def model_for(self, purpose: str) -> str:
        """Resolve the model name configured for a purpose (analysis, design, integration)."""
        configured = {
            "analysis": self.analysis_model,
            "design": self.design_model,
            "integration": self.integration_model,
        }.get(purpose)
        return configured or self.llm_model

    @property
    def llm_config(self) -> Dict[str, Any]:
        return {
            "llm_api_url": self.llm_api_url,
            "llm_api_key": self.llm_api_key,
            "llm_model": self.llm_model,
            "request_timeout": self.llm_timeout,
            "max_tokens_default": self.llm_max_tokens,
            "temperature": self.llm_temperature,
        }

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="allow",
        env_prefix="DESIGN_",
        validate_default=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    logger.info("Initializing settings...")
    return Settings()


settings = get_settings()
