# ledger/state.py

from config.settings import RECENT_BLOCKS


def compute_summary(entries, recent=RECENT_BLOCKS):
    """Entry count and the latest blocks, newest first. Metadata only."""
    recent = max(int(recent), 0)
    blocks = [entry.block.to_dict() for entry in entries]

    return {
        "total": len(entries),
        "blocks": list(reversed(blocks[-recent:])) if recent else [],
    }


def find_entry(entries, entry_id):
    return next((e for e in entries if e.id == entry_id), None)


def decrypt_entry(entry, crypto) -> dict:
    """Admin helper, raises AuthenticationFailure on a tampered payload"""
    return crypto.decrypt_payload(entry.encrypted)
