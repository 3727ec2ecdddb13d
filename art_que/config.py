# art_que/config.py
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# ─── external services ───────────────────────────────────────────
FAL_KEY = os.getenv("FAL_KEY")
FAL_RMBG_URL = os.getenv("FAL_RMBG_URL", "https://fal.run/fal-ai/bria/background/remove")
FAL_TIMEOUT_SECONDS = float(os.getenv("FAL_TIMEOUT_SECONDS", "60"))
DOWNLOAD_TIMEOUT_SECONDS = float(os.getenv("DOWNLOAD_TIMEOUT_SECONDS", "30"))

# ─── storage / serving ───────────────────────────────────────────
RESULTS_FOLDER = os.getenv("RESULTS_FOLDER", "data/postprocessed")
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "").rstrip("/")
MAX_UPLOAD_SIZE_MB = int(os.getenv("MAX_UPLOAD_SIZE_MB", "100"))
ALLOWED_EXTENSIONS = {
    ext.strip().lower().lstrip(".")
    for ext in os.getenv("ALLOWED_EXTENSIONS", "png,jpg,jpeg,webp").split(",")
    if ext.strip()
}

# ─── runtime ─────────────────────────────────────────────────────
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
PORT = int(os.getenv("PORT", "5000"))

LOG_FORMAT = '%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s'
LOG_DATEFMT = '%H:%M:%S'
