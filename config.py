import os
from dotenv import load_dotenv
load_dotenv()  # fine locally; the hosted env sets real variables

class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev")
    # Local store: settings singleton, plus products/admins for the "sql" backend
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///todobaby.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # "supabase" talks to the hosted project, "sql" keeps everything in SQLALCHEMY_DATABASE_URI
    PRODUCTS_BACKEND = os.getenv("PRODUCTS_BACKEND", "supabase")
    SUPABASE_URL = os.getenv("SUPABASE_URL")
    SUPABASE_KEY = os.getenv("SUPABASE_KEY")
    SUPABASE_BUCKET = os.getenv("SUPABASE_BUCKET", "product-images")
    UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", "uploads")  # under static/, sql backend only

    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")
    GEMINI_TEXT_MODEL = os.getenv("GEMINI_TEXT_MODEL", "gemini-2.5-flash")
    GEMINI_TTS_MODEL = os.getenv("GEMINI_TTS_MODEL", "gemini-2.5-flash-preview-tts")
    GEMINI_TTS_VOICE = os.getenv("GEMINI_TTS_VOICE", "Kore")
    GEMINI_LIVE_MODEL = os.getenv("GEMINI_LIVE_MODEL", "gemini-2.5-flash-native-audio-preview-09-2025")
    GEMINI_LIVE_VOICE = os.getenv("GEMINI_LIVE_VOICE", "Zephyr")

    # Maps embed on the contact page
    MAPS_API_KEY = os.getenv("MAPS_API_KEY") or os.getenv("API_KEY")

class DevConfig(BaseConfig):
    DEBUG = True

class TestConfig(BaseConfig):
    TESTING = True
    SECRET_KEY = "test"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    PRODUCTS_BACKEND = "sql"
    GEMINI_API_KEY = "test-key"
    MAPS_API_KEY = None
