"""
Configuration management for the WABA webhook.

Loads environment variables from .env file and provides typed access to configuration.
Event log settings (LOG_DIR, sync, Google Drive) live in infra.config.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent / ".env"
load_dotenv(env_path)


class Config:
    """Configuration class for the WABA webhook."""

    # HTTP server
    PORT = int(os.getenv("PORT", "3000"))
    ENVIRONMENT = os.getenv("ENVIRONMENT", "development")

    # Meta webhook verification
    VERIFY_TOKEN = os.getenv("VERIFY_TOKEN", "")
    # Optional: enables X-Hub-Signature-256 verification
    APP_SECRET = os.getenv("APP_SECRET") or None

    # WhatsApp Cloud API
    WHATSAPP_TOKEN = os.getenv("WHATSAPP_TOKEN", "")
    WABA_PHONE_ID = os.getenv("WABA_PHONE_ID", "")
    WHATSAPP_API_VERSION = os.getenv("WHATSAPP_API_VERSION", "v20.0")
    GRAPH_API_BASE_URL = os.getenv("GRAPH_API_BASE_URL", "https://graph.facebook.com")

    # Sales hand-off
    VENTAS_NUMBER_E164 = os.getenv("VENTAS_NUMBER_E164", "+54911XXXXXXX")

    @classmethod
    def validate(cls) -> bool:
        """Validate that required configuration is set."""
        required = ["VERIFY_TOKEN", "WHATSAPP_TOKEN", "WABA_PHONE_ID"]
        missing = [key for key in required if not getattr(cls, key)]

        if missing:
            print(f"⚠️  Missing required environment variables: {', '.join(missing)}")
            print(f"   Please set them in .env file")
            return False

        return True


if __name__ == "__main__":
    # Test configuration loading
    print("Configuration loaded:")
    print(f"  Verify Token: {'✓ Set' if Config.VERIFY_TOKEN else '✗ Missing'}")
    print(f"  WhatsApp Token: {'✓ Set' if Config.WHATSAPP_TOKEN else '✗ Missing'}")
    print(f"  Phone ID: {Config.WABA_PHONE_ID or '✗ Missing'}")
    print(f"  App Secret: {'✓ Set' if Config.APP_SECRET else '– signature check disabled'}")
    print(f"  Port: {Config.PORT}")
    print(f"  Environment: {Config.ENVIRONMENT}")
    print(f"\n  Validation: {'✓ PASSED' if Config.validate() else '✗ FAILED'}")
