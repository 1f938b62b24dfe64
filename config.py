"""
Configuration management for Group Relay.

Loads environment variables from .env file and provides typed access to configuration.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent / ".env"
load_dotenv(env_path)


class Config:
    """Configuration class for Group Relay."""

    # Inbound relay: where group messages are forwarded
    WEBHOOK_URL = os.getenv("WEBHOOK_URL") or os.getenv("N8N_WEBHOOK_URL", "")
    WEBHOOK_TIMEOUT_S = float(os.getenv("WEBHOOK_TIMEOUT_S", "10"))

    # Secrets (empty = endpoint left open)
    SEND_TOKEN = os.getenv("SEND_TOKEN", "")
    QR_TOKEN = os.getenv("QR_TOKEN", "")
    BRIDGE_TOKEN = os.getenv("BRIDGE_TOKEN", "")

    # Session storage (persistent volume)
    SESSION_DIR = os.getenv("SESSION_DIR", "/data/session")
    SESSION_CLIENT_ID = os.getenv("SESSION_CLIENT_ID", "railway-listener")

    # HTTP server
    PORT = int(os.getenv("PORT", "3000"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # Environment
    ENVIRONMENT = os.getenv("ENVIRONMENT", "development")

    @classmethod
    def validate(cls) -> bool:
        """Check recommended configuration. Never fatal."""
        recommended = ["WEBHOOK_URL", "SEND_TOKEN"]
        missing = [key for key in recommended if not getattr(cls, key)]

        if missing:
            print(f"⚠️  Missing recommended environment variables: {', '.join(missing)}")
            print(f"   Incoming messages are only logged without WEBHOOK_URL; /send is open without SEND_TOKEN")
            return False

        return True


if __name__ == "__main__":
    # Test configuration loading
    print("Configuration loaded:")
    print(f"  Webhook URL: {'✓ Set' if Config.WEBHOOK_URL else '✗ Missing'}")
    print(f"  Send token: {'✓ Set' if Config.SEND_TOKEN else '✗ Missing'}")
    print(f"  QR token: {'✓ Set' if Config.QR_TOKEN else '✗ Missing'}")
    print(f"  Session dir: {Config.SESSION_DIR}")
    print(f"  Port: {Config.PORT}")
    print(f"\n  Validation: {'✓ PASSED' if Config.validate() else '✗ FAILED'}")
