"""Top-level package for the event telemetry gateway FastAPI application."""

__all__ = [
    "APP_ENV",
    "INFLUXDB_HOST",
    "INFLUXDB_PORT",
    "INFLUXDB_DATABASE",
    "INFLUXDB_USERNAME",
    "INFLUXDB_PASSWORD",
    "INFLUXDB_SSL",
    "INFLUXDB_TIMEOUT",
]

from dotenv import load_dotenv
import os

from gateway.utils.utils import get_env_bool

load_dotenv()

# InfluxDB connection
INFLUXDB_HOST = os.environ.get("INFLUXDB_HOST", "localhost")
INFLUXDB_DATABASE = os.environ.get("INFLUXDB_DATABASE", "telemetry")
INFLUXDB_USERNAME = os.environ.get("INFLUXDB_USERNAME", "root")
INFLUXDB_PASSWORD = os.environ.get("INFLUXDB_PASSWORD", "root")
INFLUXDB_SSL = get_env_bool("INFLUXDB_SSL")

try:
    INFLUXDB_PORT = int(os.environ.get("INFLUXDB_PORT", "8086"))
    # Seconds; applied to every backend call
    INFLUXDB_TIMEOUT = float(os.environ.get("INFLUXDB_TIMEOUT", "5"))
except ValueError as exc:
    raise RuntimeError(f"InfluxDB env vars misconfigured: {exc}") from exc

if not INFLUXDB_DATABASE:
    raise RuntimeError("INFLUXDB_DATABASE not configured")

APP_ENV = os.getenv("APP_ENV", "production")
