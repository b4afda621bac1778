from pydantic_settings import BaseSettings
from dotenv import load_dotenv
from pathlib import Path
import os


load_dotenv()

RESOURCE_DIR = Path(__file__).parent.parent.parent / "resources"


class Settings(BaseSettings):
    app_name: str = "Inspection Certificate API"
    debug: bool = False
    database_url: str = ""
    host: str = "127.0.0.1"
    port: int = 8000
    secret_key: str = ""
    access_token_expire_minutes: int = 15
    allowed_hosts: str = ""
    static_dir: Path = Path(__file__).parent.parent.parent / "static"
    public_url: str = "http://localhost:8000"

    # Document generation
    template_path: Path = RESOURCE_DIR / "ISO_acrobat.pdf"
    font_path: Path = RESOURCE_DIR / "fonts" / "Pretendard-Medium.ttf"
    pdf_font_name: str = "Pretendard"
    pdf_font_size: float = 12
    pdf_date_format: str = "{year:04d}년 {month:02d}월 {day:02d}일"
    pdf_flatten: bool = True
    output_dir: Path = Path("certificates")

    # Object storage: "local" or "cloudinary"
    storage_backend: str = "local"
    storage_folder: str = "certificates"
    cloudinary_cloud_name: str = ""
    cloudinary_api_key: str = ""
    cloudinary_api_secret: str = ""


settings = Settings()

if not settings.secret_key:
    raise RuntimeError("Secret key not configured.")


os.makedirs(settings.static_dir, exist_ok=True)
