from __future__ import annotations
import os

APP_NAME = "vigor-auth-gateway"
APP_VERSION = os.getenv("APP_VERSION", "0.1.0")

CORS_METHODS = ["GET", "POST", "PUT", "DELETE"]
CORS_HEADERS = ["Content-Type", "Authorization"]

# Paths excluded from request logging
QUIET_PATHS = ("/healthz",)
