'''
Runtime configuration for the Hotel Booking API.
'''
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel


class Settings(BaseModel):
    """Process-level settings, read once from the environment."""

    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None

    jwt_secret: Optional[str] = None
    jwt_algorithm: str = "HS256"
    bcrypt_rounds: int = 10

    email_user: Optional[str] = None
    email_password: Optional[str] = None
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 465

    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from environment variables (and a local .env file).

        Returns:
            Settings: Values found in the environment, defaults otherwise.
        """
        load_dotenv()
        return cls(
            supabase_url=os.environ.get("SUPABASE_URL"),
            supabase_key=os.environ.get("SUPABASE_KEY"),
            jwt_secret=os.environ.get("JWT_SECRET"),
            jwt_algorithm=os.environ.get("JWT_ALGORITHM", "HS256"),
            bcrypt_rounds=int(os.environ.get("BCRYPT_ROUNDS", "10")),
            email_user=os.environ.get("EMAIL_USER"),
            email_password=os.environ.get("EMAIL_PASSWORD"),
            smtp_host=os.environ.get("SMTP_HOST", "smtp.gmail.com"),
            smtp_port=int(os.environ.get("SMTP_PORT", "465")),
            log_level=os.environ.get("LOG_LEVEL", "INFO"),
        )

    @property
    def mail_configured(self) -> bool:
        return bool(self.email_user and self.email_password)
