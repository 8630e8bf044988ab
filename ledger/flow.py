# ledger/flow.py
"""
Identity flow that stages the pieces of a ballot before sealing.

The identity check is simulated for the demo: any 12 digit reference is
accepted together with the fixed OTP below.
"""
import re
import threading

from ledger.errors import IdentityRejected, InputIncomplete
from ledger.payload import Ballot
from ledger.utils import now_ms, sha256_hex

DEMO_OTP = "123456"
DEMO_FINGERPRINT = b"demo-fingerprint-data"

AADHAAR_RE = re.compile(r"^\d{12}$")

# flow key -> step that provides it
REQUIRED_STEPS = {
    "aadhaar": "identity",
    "faceDataUrl": "face",
    "fingerprintHash": "fingerprint",
}


class FlowState:
    """Transient staging area, not covered by the ledger's durability"""

    def get(self) -> dict:
        raise NotImplementedError

    def set(self, **fields):
        raise NotImplementedError

    def pop(self) -> dict:
        """Returns the staged state and clears it in one step"""
        raise NotImplementedError

    def clear(self):
        raise NotImplementedError


class MemoryFlowState(FlowState):
    def __init__(self):
        self._state = {}
        self._lock = threading.Lock()

    def get(self) -> dict:
        with self._lock:
            return dict(self._state)

    def set(self, **fields):
        with self._lock:
            self._state = {**self._state, **fields}

    def pop(self) -> dict:
        with self._lock:
            state, self._state = self._state, {}
        return state

    def clear(self):
        with self._lock:
            self._state = {}


# -----------------------------
# FLOW STEPS
# -----------------------------

def verify_identity(aadhaar: str, otp: str):
    if not AADHAAR_RE.match(aadhaar or ""):
        return False, "Aadhaar must be 12 digits"
    if otp != DEMO_OTP:
        return False, f"Invalid demo OTP (use {DEMO_OTP})"
    return True, None


def as_text(value) -> str:
    # JSON clients may send digits as numbers
    return "" if value is None else str(value).strip()


def record_identity(flow: FlowState, aadhaar, otp):
    aadhaar = as_text(aadhaar)
    ok, msg = verify_identity(aadhaar, as_text(otp))
    if not ok:
        raise IdentityRejected(msg)
    flow.set(aadhaar=aadhaar)


def record_face(flow: FlowState, data_url: str):
    if not data_url:
        raise InputIncomplete(["faceDataUrl"])
    flow.set(faceDataUrl=data_url)


def record_fingerprint(flow: FlowState, artifact: bytes = None) -> str:
    fingerprint_hash = sha256_hex(artifact if artifact else DEMO_FINGERPRINT)
    flow.set(fingerprintHash=fingerprint_hash)
    return fingerprint_hash


def missing_steps(state: dict) -> list:
    return [step for key, step in REQUIRED_STEPS.items() if not state.get(key)]


def ballot_from_state(state: dict, candidate, clock=None) -> Ballot:
    candidate = as_text(candidate)
    missing = missing_steps(state)
    if not candidate:
        missing.append("candidate")
    if missing:
        raise InputIncomplete(missing)

    clock = clock or now_ms

    return Ballot(
        aadhaar=state["aadhaar"],
        candidate=candidate,
        fingerprint_hash=state["fingerprintHash"],
        face_data_url=state["faceDataUrl"],
        ts=int(clock()),
    )


def build_ballot(flow: FlowState, candidate: str, clock=None) -> Ballot:
    return ballot_from_state(flow.get(), candidate, clock=clock)


async def submit_vote(flow: FlowState, candidate: str, sealer, clock=None):
    """
    Seals the staged flow once. The state is taken out before sealing so a
    second submit on the same flow finds nothing staged.
    """
    state = flow.pop()

    try:
        ballot = ballot_from_state(state, candidate, clock=clock)
        return await sealer.seal(ballot)
    except BaseException:
        flow.set(**state)
        raise
