from typing import List, Optional
from urllib.parse import quote_plus

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    ENV: str = "local"
    LOG_LEVEL: str = "INFO"

    postgres_user: str = "postgres"
    postgres_password: str = ""
    postgres_db: str = "catering"
    postgres_host: str = "localhost"
    postgres_port: str = "5432"

    # full URL wins over the postgres_* parts (sqlite in tests)
    database_url_override: Optional[str] = Field(default=None, validation_alias="DATABASE_URL")

    secret_key: str = "change-me"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24

    base_url: str = "http://localhost:8000"
    cors_origins: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # PortOne (V1 REST for verify/cancel, V2 for prepare and receipts)
    portone_api_key: Optional[str] = None
    portone_api_secret: Optional[str] = None
    portone_v2_api_secret: Optional[str] = None
    portone_store_id: Optional[str] = None

    # Aligo SMS / Kakao alimtalk
    aligo_api_key: Optional[str] = None
    aligo_user_id: Optional[str] = None
    aligo_sender: Optional[str] = None
    aligo_sender_key: Optional[str] = None
    aligo_test_mode: bool = False

    # Hudadaq quick delivery
    hudadaq_base_url: str = "https://api.hudadaq.com/v3"
    hudadaq_api_key: Optional[str] = None
    hudadaq_login_id: Optional[str] = None
    hudadaq_login_password: Optional[str] = None

    kakao_rest_api_key: Optional[str] = None

    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    openai_vision_model: str = "gpt-4o-mini"

    firebase_project_id: Optional[str] = None
    firebase_client_email: Optional[str] = None
    firebase_private_key: Optional[str] = None

    # Cloud Tasks (completion reminder / auto-complete)
    use_cloud_tasks: bool = False
    google_cloud_project: Optional[str] = None
    cloud_tasks_location: str = "asia-northeast3"
    cloud_tasks_queue: str = "order-completion-queue"

    # supplier block printed on tax invoices
    business_registration_number: str = ""
    business_name: str = ""
    business_ceo_name: str = ""
    business_address: str = ""
    business_type: str = ""
    business_item: str = ""
    business_email: str = ""

    first_orders_commission_rate: float = 0.03
    first_orders_count: int = 5
    standard_commission_rate: float = 0.13

    unpaid_order_expiry_hours: int = 24

    @property
    def is_production(self) -> bool:
        return self.ENV == "production"

    @property
    def database_url(self):
        if self.database_url_override:
            return self.database_url_override

        encoded_password = quote_plus(self.postgres_password)
        return (
            f"postgresql+psycopg2://{self.postgres_user}:"
            f"{encoded_password}@{self.postgres_host}:"
            f"{self.postgres_port}/{self.postgres_db}"
        )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "allow"


settings = Settings()
