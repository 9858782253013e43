#!/usr/bin/env python3
"""
Quick checks so the API can start. Run from the repo root:
  poetry run python scripts/check_backend.py
"""
import os
import socket
import sys
from pathlib import Path

root_dir = Path(__file__).resolve().parent.parent
os.chdir(root_dir)
if str(root_dir) not in sys.path:
    sys.path.insert(0, str(root_dir))


def main():
    errors = []

    # 1) .env
    if not (root_dir / ".env").exists():
        errors.append(".env missing. Copy .env.example and set DATABASE_URL, OPENAI_API_KEY, etc.")
    else:
        print("OK  .env exists")

    # 2) DB connection
    try:
        from sqlalchemy import text

        from prepbuddy.db.session import engine

        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("OK  Database connection (DATABASE_URL)")
    except Exception as e:
        errors.append(f"Database: {e}")
        print("FAIL Database:", e)

    # 3) Providers: at least one real key, or every answer is the canned fallback
    try:
        from prepbuddy.config import settings
        from prepbuddy.services.ai.registry import list_providers

        print("OK  Provider fallback order:", " -> ".join(list_providers()))
        keys = {"openai": settings.openai_api_key, "groq": settings.groq_api_key}
        configured = [name for name, key in keys.items() if key and not key.startswith("your-")]
        if configured:
            print("OK  AI providers configured:", ", ".join(configured))
        else:
            print("WARN No AI provider key set; the assistant will only give canned answers")
        if not (settings.smtp_user and settings.smtp_password):
            print("WARN SMTP not configured; reminder emails are skipped")
    except Exception as e:
        errors.append(f"Settings: {e}")
        print("FAIL Settings:", e)

    # 4) App import (catches missing deps, bad imports)
    try:
        from prepbuddy.main import app  # noqa: F401

        print("OK  App import (prepbuddy.main)")
    except Exception as e:
        errors.append(f"App import: {e}")
        print("FAIL App import:", e)
        print("\nFix the above, then run:")
        print("  poetry run uvicorn prepbuddy.main:app --reload --host 0.0.0.0 --port 8000")
        return 1

    # 5) Port 8000
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.bind(("127.0.0.1", 8000))
        print("OK  Port 8000 is free")
    except OSError:
        errors.append("Port 8000 is in use. Stop the other process or use another port (e.g. --port 8001).")
        print("FAIL Port 8000 is in use")

    if errors:
        print("\n---")
        for e in errors:
            print("•", e)
        return 1

    print("\nAll checks passed. Start with: poetry run uvicorn prepbuddy.main:app --reload")
    return 0


if __name__ == "__main__":
    sys.exit(main())
