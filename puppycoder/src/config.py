# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
Runtime configuration, read from the environment (and a .env file if present).

Every variable takes the PUPPYCODER_ prefix, e.g. PUPPYCODER_MODEL=gpt-4o. The
API key is additionally accepted as the plain OPENAI_API_KEY.
"""

from pathlib import Path
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .types.llm_types import Model, TokenCost


class Settings(BaseSettings):
    LOG_LEVEL: str = "INFO"

    MODEL: Model = Model.GPT_4O_MINI
    OPENAI_API_KEY: str = Field(
        default="",
        validation_alias=AliasChoices("PUPPYCODER_OPENAI_API_KEY", "OPENAI_API_KEY"),
    )
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"

    # Seconds before an unanswered generation request is reported as failed
    GENERATION_TIMEOUT: float = 120.0
    # Consecutive tool-driven rounds allowed without a new user message
    MAX_AUTO_ROUNDS: int = 10

    WORKDIR: Path = Path("./workdir")
    FORBIDDEN_FILES: list[str] = Field(default_factory=lambda: [".env"])
    PROJECTS_DIR: Path = Path.home() / ".puppycorp" / "puppycoder" / "projects"

    # Per-model overrides of the default token prices, keyed by model id.
    # e.g. PUPPYCODER_MODEL_PRICING='{"gpt-4o": {"input_per_million": 2.5, "output_per_million": 10}}'
    MODEL_PRICING: dict[Model, TokenCost] = Field(default_factory=dict)

    model_config = SettingsConfigDict(
        env_prefix="PUPPYCODER_",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()

    def token_cost(self, model: Model) -> TokenCost:
        """The configured price for a model, falling back to its list price."""
        return self.MODEL_PRICING.get(model, model.default_token_cost)


settings = Settings()
