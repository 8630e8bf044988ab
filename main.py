# main.py
import asyncio

import uvicorn

from api.server import app, storage
from config.settings import HOST_IP, HOST_PORT, LEDGER_FILE
from ledger.state import compute_summary
from ledger.utils import loading
from ledger.validator import verify_chain


# -----------------------------
# LEDGER Validation
# -----------------------------
def check_ledger(store):
    entries = store.read_all()
    result = verify_chain(entries)

    if result.ok:
        print(f"✅ Ledger is Valid ({len(entries)} entries)")
    else:
        # keep serving, a compromised ledger must stay inspectable
        print(f"❌ Ledger compromised at index {result.failure_index}: {result.reason}")

    summary = compute_summary(entries, recent=1)
    if summary["blocks"]:
        print(f"⛓️ Tail: {summary['blocks'][0]['hash'][:16]}...")

    return result


# -----------------------------
# MAIN
# -----------------------------

async def main():
    #🔹Print Logo
    loading(LEDGER_FILE)

    #🔹Verifing Integrity
    await asyncio.to_thread(check_ledger, storage)

    #🔹Serve API
    config = uvicorn.Config(app, host=HOST_IP, port=HOST_PORT)
    server = uvicorn.Server(config)
    await server.serve()


if __name__ == "__main__":
    asyncio.run(main())
