from datetime import date as DateType

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

load_dotenv()


class Settings(BaseSettings):
    ENVIRONMENT: str = "local"
    LOG_LEVEL: str = "INFO"

    # Base URL for the Vitalz REST API (all dashboard data comes from here)
    VITALZ_API_BASE: str = "https://exam-vitalz-backend-8267f8929b82.herokuapp.com/api"
    VITALZ_TIMEOUT_SECONDS: float = 10.0

    # Date used for /getUserStatics when a selection does not name one.
    # Unset means "today" at the time of the selection.
    VITALZ_STATISTICS_DATE: DateType | None = None


settings = Settings()
