import os
from dotenv import load_dotenv

# Load .env
load_dotenv()

APP_NAME = os.getenv("APP_NAME", "Tribe Ambassadors")
PUBLIC_DOMAIN = os.getenv("PUBLIC_DOMAIN", "http://localhost:10000")

# Auth
JWT_SECRET = os.getenv("JWT_SECRET", "change-me")
JWT_ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))
SESSION_SECRET = os.getenv("SESSION_SECRET", JWT_SECRET)
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

# Stripe Connect
STRIPE_SECRET_KEY = os.getenv("STRIPE_SECRET_KEY")
STRIPE_CLIENT_ID = os.getenv("STRIPE_CLIENT_ID")
STRIPE_AUTHORIZE_URI = os.getenv("STRIPE_AUTHORIZE_URI", "https://connect.stripe.com/express/oauth/authorize")
STRIPE_TOKEN_URI = os.getenv("STRIPE_TOKEN_URI", "https://connect.stripe.com/oauth/token")
# Test-mode source token charged instead of the brand's saved payment source
STRIPE_CHARGE_SOURCE = os.getenv("STRIPE_CHARGE_SOURCE")
SETTLEMENT_CURRENCY = os.getenv("SETTLEMENT_CURRENCY", "usd")
PROCESSOR_TIMEOUT = int(os.getenv("PROCESSOR_TIMEOUT", "10"))

# Database
DB_SERVER = os.getenv("DB_SERVER")
DB_PORT = os.getenv("DB_PORT", "1433")
DB_USER = os.getenv("DB_USER")
DB_PASS = os.getenv("DB_PASS")
DB_NAME = os.getenv("DB_NAME")
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"
AUTO_CREATE_TABLES = os.getenv("AUTO_CREATE_TABLES", "true").lower() == "true"

# HTTP
CORS_ORIGINS = [o for o in os.getenv("CORS_ORIGINS", "").split(",") if o]
PORT = int(os.getenv("PORT", 10000))

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "text")  # text or json
