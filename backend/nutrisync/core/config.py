from pydantic_settings import BaseSettings, SettingsConfigDict

from nutrisync.models.enums import ScoringStrategy, PenaltyProfileName, ExperienceLevel


class Settings(BaseSettings):
    environment: str = "development"
    log_level: str = "INFO"

    # API
    api_prefix: str = "/api"

    # Scoring defaults applied at the HTTP edge when a request omits them
    default_strategy: ScoringStrategy = ScoringStrategy.RUNNER_FOCUSED
    default_penalty_profile: PenaltyProfileName = PenaltyProfileName.REDUCED
    default_experience_level: ExperienceLevel = ExperienceLevel.INTERMEDIATE

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    model_config = SettingsConfigDict(env_file=".env", env_prefix="NUTRISYNC_", extra="ignore")


settings = Settings()
