# config/settings.py
import os
from pathlib import Path

# -----------------------------
# NODE
# -----------------------------
HOST_IP = os.environ.get("LEDGER_HOST", "0.0.0.0")
HOST_PORT = int(os.environ.get("LEDGER_PORT", "8000"))

ALLOWED_ORIGINS = ["*"]

# -----------------------------
# STORAGE
# -----------------------------
DATA_DIR = Path(os.environ.get("LEDGER_DATA_DIR", "data"))
LEDGER_FILE = DATA_DIR / "ledger.json"

# -----------------------------
# KEY DERIVATION (demo only)
# -----------------------------
# A fixed passphrase and salt keep old records decryptable across restarts.
# Any real deployment needs its own secret and a rotation policy.
KEY_PASSPHRASE = os.environ.get(
    "LEDGER_KEY_PASSPHRASE",
    "demo-secret-key-for-academic-demo-please-change"
)
KDF_SALT = bytes([1, 2, 3, 4, 5, 6, 7, 8])
KDF_ITERATIONS = 100_000
KDF_HASH = "SHA-256"

# -----------------------------
# VERIFICATION SURFACE
# -----------------------------
RECENT_BLOCKS = 20

# -----------------------------
# PROOF ARTIFACTS
# -----------------------------
ARTIFACT_TIMEOUT = float(os.environ.get("LEDGER_ARTIFACT_TIMEOUT", "3"))

# -----------------------------
# IDENTITY FLOW
# -----------------------------
FLOW_TTL = int(os.environ.get("LEDGER_FLOW_TTL", "900"))  # seconds
