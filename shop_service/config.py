# shop_service/config.py
import os
from dotenv import load_dotenv

load_dotenv()


def _database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    return (
        f"postgresql+asyncpg://{os.getenv('SHOP_DB_USER', 'shop')}:{os.getenv('SHOP_DB_PASSWORD', 'shop')}"
        f"@{os.getenv('SHOP_DB_HOST', 'localhost')}:{os.getenv('SHOP_DB_PORT', '5432')}/{os.getenv('SHOP_DB_NAME', 'shop')}"
    )


DATABASE_URL = _database_url()
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() in ("1", "true", "yes")

SECRET_KEY = os.getenv("SECRET_KEY", "your_secret_key")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

# RajaOngkir (starter plan)
RAJAONGKIR_API_KEY = os.getenv("RAJAONGKIR_API_KEY", "")
RAJAONGKIR_BASE_URL = os.getenv("RAJAONGKIR_BASE_URL", "https://api.rajaongkir.com/starter")
RAJAONGKIR_ORIGIN = os.getenv("RAJAONGKIR_ORIGIN", "151")
RAJAONGKIR_COURIERS = [c.strip() for c in os.getenv("RAJAONGKIR_COURIERS", "jne,pos,tiki").split(",") if c.strip()]
RAJAONGKIR_TIMEOUT = float(os.getenv("RAJAONGKIR_TIMEOUT", "10"))

PAYMENT_EXPIRE_HOURS = int(os.getenv("PAYMENT_EXPIRE_HOURS", "24"))

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",") if o.strip()]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
