from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional

class Settings(BaseSettings):
    # Application
    APP_NAME: str = "RentBill"
    APP_PORT: int = 3000
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    
    # Database
    DATABASE_URL: Optional[str] = None
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "rentbill"
    POSTGRES_PORT: int = 5432
    DB_SSLMODE: str = "prefer"
    
    # Invoice presentation
    BUSINESS_NAME: str = "SUBRAMANI ENTERPRISES"
    BUSINESS_PHONES: str = "9916067960, 8073024022"
    BUSINESS_ADDRESS: str = "5TH CROSS, CANNEL RIGHT SIDE, VENKATESHA NAGAR, SHIMOGA | 577202 | PHONE: 6363499137"
    INVOICE_THANK_YOU: str = "THANK YOU FOR YOUR BUSINESS!"
    CURRENCY_PREFIX: str = "Rs."
    
    @property
    def SQLALCHEMY_DATABASE_URL(self) -> str:
        if self.DATABASE_URL:
            # Hosted Postgres providers hand out the legacy scheme
            if self.DATABASE_URL.startswith("postgres://"):
                return "postgresql://" + self.DATABASE_URL[len("postgres://"):]
            return self.DATABASE_URL
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
    
    class Config:
        env_file = ".env"
        extra = "ignore"

@lru_cache()
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
