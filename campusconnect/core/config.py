import os
import json
from dotenv import load_dotenv

load_dotenv(override=True)

class Config:
    """
    Base configuration for CampusConnect.
    Deployments provide credentials and paths via environment variables.
    """
    # Flask settings
    SECRET_KEY = os.getenv('FLASK_SECRET_KEY', 'dev-secret-key-change-in-production')

    # Get DB_DIR from environment, or use a default if not set
    DB_DIR = os.getenv('DB_DIR', os.path.join(os.getcwd(), 'databases'))
    DATABASE = os.getenv('DATABASE', os.path.join(DB_DIR, 'campusconnect.db'))

    # Storage backend: 'sqlite' (local file) or 'supabase' (hosted PostgREST)
    DATA_BACKEND = os.getenv('DATA_BACKEND', 'sqlite')
    SUPABASE_URL = os.getenv('SUPABASE_URL')
    SUPABASE_KEY = os.getenv('SUPABASE_KEY') or os.getenv('SUPABASE_ANON_KEY')

    # Email settings
    EMAIL_PROVIDER = os.getenv('EMAIL_PROVIDER', 'resend')
    EMAIL_ADDRESS = os.getenv('EMAIL_ADDRESS', 'onboarding@resend.dev')
    EMAIL_PASSWORD = os.getenv('EMAIL_PASSWORD')
    EMAIL_HOST = os.getenv('EMAIL_HOST', 'smtp.gmail.com')
    EMAIL_PORT = int(os.getenv('EMAIL_PORT', '587'))
    AWS_REGION = os.getenv('AWS_REGION', 'eu-west-1')
    EMAIL_SEND_DELAY = float(os.getenv('EMAIL_SEND_DELAY', '0.6'))

    # Resend API settings (free tier: 3,000 emails/month)
    RESEND_API_KEY = os.getenv('RESEND_API_KEY') or os.getenv('RESEND')

    # Branding
    EMAIL_BRAND_NAME = os.getenv('BRAND_NAME', 'CampusConnect')
    EMAIL_BRAND_TAGLINE = os.getenv('BRAND_TAGLINE', 'Coming Soon')
    EMAIL_WEBSITE_URL = os.getenv('BASE_URL', 'http://localhost:5000')
    # Colour/font overrides for the email templates, e.g. {'accent': '#6366f1'}
    EMAIL_STYLE = json.loads(os.getenv('EMAIL_STYLE') or '{}')

    # Admin dashboard login. Leave ADMIN_PASSWORD unset to keep /admin open.
    ADMIN_EMAIL = os.getenv('ADMIN_EMAIL', 'admin@campusconnect.local')
    ADMIN_PASSWORD = os.getenv('ADMIN_PASSWORD')

    # Origins allowed to call the public waitlist API
    CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*')

    # Table names
    SUBSCRIBERS_TABLE = "email_subscribers"
    NOTIFICATIONS_TABLE = "notifications_sent"
    LOGS_TABLE = "app_logs"

    # Port for local server
    port = int(os.getenv('PORT', '5000'))
