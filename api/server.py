from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.settings import ALLOWED_ORIGINS, FLOW_TTL, LEDGER_FILE, RECENT_BLOCKS
from ledger.artifacts import acquire_proof_artifact
from ledger.crypto import CryptoStore
from ledger.errors import (
    ArtifactUnavailable,
    CryptoFailure,
    IdentityRejected,
    InputIncomplete,
    StorageReadFailure,
)
from ledger.flow import MemoryFlowState, record_face, record_fingerprint, record_identity, submit_vote
from ledger.sealer import Sealer
from ledger.state import compute_summary, find_entry
from ledger.storage import FileLedgerStore
from ledger.validator import verify_chain

import time

app = FastAPI(
    title="Sealed Vote Ledger API",
    version="0.1.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

storage = FileLedgerStore(LEDGER_FILE)
sealer = Sealer(storage, CryptoStore())

# session_id -> {"flow": MemoryFlowState, "created_at": ts}
flows = {}

# session_id -> {"id": last sealed vote id, "created_at": ts}
confirmations = {}


def prune_sessions(now: int):
    # Drop expired sessions to prevent unbounded growth
    for sessions in (flows, confirmations):
        expired = [k for k, v in sessions.items() if now - v["created_at"] > FLOW_TTL]
        for k in expired:
            del sessions[k]


def get_flow(session_id: str) -> MemoryFlowState:
    now = int(time.time())
    prune_sessions(now)

    session = flows.get(session_id)
    if not session:
        session = {"flow": MemoryFlowState(), "created_at": now}
        flows[session_id] = session

    return session["flow"]


@app.get("/health")
def health():
    return {"status": "ok"}

# -----------------------------
# LEDGER
# -----------------------------

@app.get("/ledger")
def get_ledger():
    return [entry.to_dict() for entry in storage.read_all()]

@app.get("/ledger/latest")
def get_latest_entry():
    entry = storage.last_entry()
    if not entry:
        return None
    return entry.to_dict()

@app.get("/ledger/entries/{entry_id}")
def get_entry(entry_id: str):
    entry = find_entry(storage.read_all(), entry_id)
    if not entry:
        return {"ok": False, "error": "Entry not found"}
    return entry.to_dict()

@app.get("/ledger/stats")
def get_stats(recent: int = RECENT_BLOCKS):
    return compute_summary(storage.read_all(), recent)

@app.get("/ledger/verify")
def verify_ledger(strict: bool = False):
    try:
        entries = storage.read_all(strict=strict)
    except StorageReadFailure as e:
        print("❌ LEDGER UNAVAILABLE:", e)
        return {
            "ok": False,
            "failure_index": None,
            "reason": "Storage unavailable",
            "message": "Ledger store is unreadable",
            "total": None,
        }

    result = verify_chain(
        entries,
        recompute=strict,
        crypto=sealer.crypto if strict else None
    )

    return {
        "ok": result.ok,
        "failure_index": result.failure_index,
        "reason": result.reason,
        "message": result.message,
        "total": len(entries),
    }

# -----------------------------
# FLOW
# -----------------------------

@app.post("/flow/{session_id}/identity")
def flow_identity(session_id: str, payload: dict):
    try:
        record_identity(get_flow(session_id), payload.get("aadhaar"), payload.get("otp"))
    except IdentityRejected as e:
        return {"ok": False, "error": str(e)}

    return {"ok": True, "next": "face"}

@app.post("/flow/{session_id}/face")
def flow_face(session_id: str, payload: dict):
    try:
        record_face(get_flow(session_id), payload.get("data_url"))
    except InputIncomplete:
        return {"ok": False, "error": "Missing face capture"}

    return {"ok": True, "next": "fingerprint"}

@app.post("/flow/{session_id}/fingerprint")
async def flow_fingerprint(session_id: str, payload: dict):
    source = payload.get("source")
    artifact = None

    if source:
        try:
            artifact = await acquire_proof_artifact(source, uploads_only=True)
        except ArtifactUnavailable as e:
            return {"ok": False, "error": str(e)}

    fingerprint_hash = record_fingerprint(get_flow(session_id), artifact)

    return {"ok": True, "fingerprint_hash": fingerprint_hash, "next": "vote"}

@app.post("/flow/{session_id}/vote")
async def flow_vote(session_id: str, payload: dict):
    flow = get_flow(session_id)

    try:
        entry = await submit_vote(flow, payload.get("candidate"), sealer)
    except InputIncomplete as e:
        return {
            "ok": False,
            "error": "You must complete Aadhaar, face capture and fingerprint steps",
            "missing": list(e.missing),
        }
    except (CryptoFailure, StorageReadFailure) as e:
        print("❌ SEAL FAILED:", e)
        return {"ok": False, "error": "Vote could not be sealed"}

    # a sealed flow is used up
    flows.pop(session_id, None)
    confirmations[session_id] = {"id": entry.id, "created_at": int(time.time())}
    print(f"⛓️ Vote sealed: {entry.id} ({entry.block.hash[:16]}...)")

    return {
        "ok": True,
        "id": entry.id,
    }

@app.get("/flow/{session_id}/confirmation")
def flow_confirmation(session_id: str):
    prune_sessions(int(time.time()))

    confirmation = confirmations.get(session_id)
    return {"id": confirmation["id"] if confirmation else "N/A"}
