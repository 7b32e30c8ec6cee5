"""
Configuration for the prewarm worker.
Defines job record location, network limits and the manifest/header
conventions of the CDN being warmed. Every value can be overridden from
the environment or a .env file in the working directory.
"""

import os
from pathlib import Path
from dotenv import find_dotenv, load_dotenv


def load_env_files():
    """
    .env from the working directory (or its parents), then the one beside
    the source checkout. Variables already set in the environment win.
    """
    cwd_env = find_dotenv(usecwd=True)
    if cwd_env:
        load_dotenv(cwd_env)
    load_dotenv(Path(__file__).resolve().parents[1] / '.env')


# Load .env before reading any overrides
load_env_files()


def _env_bool(name, default):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name, default):
    value = os.getenv(name)
    if not value:
        return default
    return tuple(item.strip().lower() for item in value.split(",") if item.strip())


# Job records are created by the dispatcher under <PREWARM_DIR>/running
PREWARM_DIR = Path(os.getenv("PREWARM_DIR", "/var/lib/prewarm"))
RUNNING_DIR = PREWARM_DIR / "running"

# Probe pool size when the CLI does not pass one
DEFAULT_PARALLEL = int(os.getenv("PREWARM_PARALLEL", 10))

# Network timeout for every request (seconds)
REQUEST_TIMEOUT = float(os.getenv("PREWARM_REQUEST_TIMEOUT", 10))

# Seconds between job record updates
PROGRESS_INTERVAL = float(os.getenv("PREWARM_PROGRESS_INTERVAL", 3))

USER_AGENT = os.getenv(
    "PREWARM_USER_AGENT",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/126.0.0.0 Safari/537.36",
)

# Response headers carrying the edge cache verdict and the serving POP
CACHE_STATUS_HEADER = os.getenv("PREWARM_CACHE_STATUS_HEADER", "cf-cache-status")
EDGE_HEADER = os.getenv("PREWARM_EDGE_HEADER", "cf-ray")

MANIFEST_EXTENSION = os.getenv("PREWARM_MANIFEST_EXTENSION", ".m3u8").lower()
SEGMENT_EXTENSIONS = _env_list(
    "PREWARM_SEGMENT_EXTENSIONS",
    (".ts", ".jpeg", ".jpg", ".m4s", ".mp4", ".aac", ".vtt", ".webvtt"),
)

VERIFY_SSL_CERTIFICATE = _env_bool("PREWARM_VERIFY_SSL", True)

# Re-issue probes rejected with 405/501 as a streamed GET
HEAD_FALLBACK_GET = _env_bool("PREWARM_HEAD_FALLBACK_GET", False)

LOG_FILE = os.getenv("PREWARM_LOG_FILE") or None
