from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_NAME: str = "MedLedger Records Ledger"
    VERSION: str = "1.0.0"

    DATABASE_URL: str = "sqlite:///./medledger.db"
    LOG_LEVEL: str = "INFO"

    # Authenticated principal is bound upstream and forwarded in this header
    CALLER_HEADER: str = "X-Caller-Id"

    SEED_DEMO_DATA: bool = False

    # Bounded collections
    MAX_AUTHORIZED_PROVIDERS: int = 5
    MAX_ACTIVE_MEDICATIONS: int = 10
    MAX_TRACKED_PRESCRIPTIONS: int = 100

    # Text field limits (characters)
    MAX_HISTORY_LENGTH: int = 256
    MAX_GENETIC_DATA_LENGTH: int = 256
    MAX_SPECIALTY_LENGTH: int = 64
    MAX_LICENSE_NUMBER_LENGTH: int = 32
    MAX_MEDICATION_NAME_LENGTH: int = 64
    MAX_INSTRUCTIONS_LENGTH: int = 32

    class Config:
        env_file = ".env"


settings = Settings()
