# ledger/utils.py
import hashlib
import json
import time

# wire order of a ballot, MUST match the browser client
BALLOT_FIELDS = ("aadhaar", "candidate", "fingerprintHash", "faceDataUrl", "ts")


def sha256_hex(data: bytes) -> str:
    """Single digest used for payloads, blocks and proof artifacts"""
    return hashlib.sha256(data).hexdigest()


def canonical_ballot(ballot: dict) -> bytes:
    """
    Returns the canonical bytes of a ballot
    with keys in a specific order (MUST match the frontend)
    """
    ordered = {key: ballot.get(key) for key in BALLOT_FIELDS}

    return json.dumps(ordered, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def now_ms() -> int:
    return int(time.time() * 1000)


def loading(ledger_file):
    print(r' /$$                       /$$                                ')
    print(r'| $$                      | $$                                ')
    print(r'| $$        /$$$$$$   /$$$$$$$  /$$$$$$   /$$$$$$   /$$$$$$  ')
    print(r'| $$       /$$__  $$ /$$__  $$ /$$__  $$ /$$__  $$ /$$__  $$ ')
    print(r'| $$      | $$$$$$$$| $$  | $$| $$  \ $$| $$$$$$$$| $$  \__/ ')
    print(r'| $$      | $$_____/| $$  | $$| $$  | $$| $$_____/| $$       ')
    print(r'| $$$$$$$$|  $$$$$$$|  $$$$$$$|  $$$$$$$|  $$$$$$$| $$       ')
    print(r'|________/ \_______/ \_______/ \____  $$ \_______/|__/       ')
    print(r'                               /$$  \ $$                     ')
    print(r'                              |  $$$$$$/                     ')
    print(r'                               \______/                      ')

    print("🚀 Ledger Node Starting... ")
    print(f"📒 Ledger File: {ledger_file}")
