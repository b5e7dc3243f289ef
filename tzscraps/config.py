import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    ENVIRONMENT = os.getenv("ENVIRONMENT", "dev").lower()

    # Hosted backend (PostgREST endpoint of the Supabase project)
    SUPABASE_URL = os.getenv("SUPABASE_URL")
    SUPABASE_KEY = os.getenv("SUPABASE_KEY")
    REQUEST_TIMEOUT = int(os.getenv("REQUEST_TIMEOUT", "30"))

    # Business identity printed on reports and receipts
    BUSINESS_NAME = os.getenv("BUSINESS_NAME", "TZ Scraps")
    BUSINESS_TAGLINE = os.getenv("BUSINESS_TAGLINE", "Scrap Collection & Recycling")
    BUSINESS_CONTACT = os.getenv("BUSINESS_CONTACT", "+234 123 456 7890")
    CURRENCY_SYMBOL = os.getenv("CURRENCY_SYMBOL", "₦")
    # Built-in PDF fonts have no Naira glyph; point this to a TTF that does
    PDF_FONT_PATH = os.getenv("PDF_FONT_PATH")

    # Row caps for the Recent Transactions report
    VIEW_ROW_LIMIT = 50
    PRINT_ROW_LIMIT = 50
    DOCUMENT_ROW_LIMIT = 100
    WORKBOOK_ROW_LIMIT = 1000

    # Output Paths (Dynamic by environment)
    @classmethod
    def get_reports_dir(cls) -> str:
        return os.path.join("data", "reports", cls.ENVIRONMENT)

    @classmethod
    def recompute_reports_dir(cls):
        cls.REPORTS_DIR = cls.get_reports_dir()

    @classmethod
    def check_and_create_dirs(cls):
        """Ensures the environment-specific output directory exists."""
        cls.recompute_reports_dir()
        os.makedirs(cls.REPORTS_DIR, exist_ok=True)

    @classmethod
    def get_schedule_time(cls) -> str:
        """HH:MM:SS of the daily export. SCHEDULE_TIME wins over the defaults."""
        env_time = os.getenv("SCHEDULE_TIME")
        if env_time:
            return env_time

        # Reports close the business day at midnight
        if cls.is_prd():
            return "00:00:00"

        # Outside prd the first export fires shortly after startup
        from datetime import datetime, timedelta

        first_run = datetime.now() + timedelta(seconds=cls.get_startup_delay() + 5)
        return first_run.strftime("%H:%M:%S")

    @classmethod
    def get_startup_delay(cls) -> int:
        """Seconds to wait before the scheduler starts (STARTUP_DELAY overrides)."""
        default = "0" if cls.is_prd() else "10"
        return int(os.getenv("STARTUP_DELAY", default))

    @classmethod
    def is_prd(cls) -> bool:
        return cls.ENVIRONMENT == "prd"

    @classmethod
    def is_dev(cls) -> bool:
        return cls.ENVIRONMENT == "dev"


Config.recompute_reports_dir()
