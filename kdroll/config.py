"""Library configuration derived from defaults and environment."""
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Generator settings, overridable through KDROLL_* variables."""

    model_config = SettingsConfigDict(env_prefix="KDROLL_")

    # History
    default_max_history: int = Field(default=1000, ge=0)

    # Floating point correction: length of a 0/9 run treated as noise
    float_fix_repeat: int = Field(default=6, ge=1)

    # Random seed arrays drawn from the entropy source
    random_seed_min_length: int = Field(default=20, ge=1)
    random_seed_max_length: int = Field(default=623, ge=1)

    @model_validator(mode="after")
    def check_seed_lengths(self) -> "Settings":
        """Random seed length bounds must form a valid interval."""
        if self.random_seed_min_length > self.random_seed_max_length:
            raise ValueError(
                "random_seed_min_length must not exceed random_seed_max_length"
            )
        return self


settings = Settings()
