# ledger/artifacts.py
import asyncio
import base64
import binascii
from pathlib import Path
from urllib.parse import unquote_to_bytes

import requests

from config.settings import ARTIFACT_TIMEOUT
from ledger.errors import ArtifactUnavailable


def decode_data_url(url: str) -> bytes:
    header, sep, body = url.partition(",")

    if not header.startswith("data:") or not sep:
        raise ArtifactUnavailable("Invalid data URL")

    if header.endswith(";base64"):
        try:
            return base64.b64decode(body, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ArtifactUnavailable(f"Invalid base64 data URL: {e}")

    return unquote_to_bytes(body)


def fetch_artifact(source: str, timeout=ARTIFACT_TIMEOUT, uploads_only=False) -> bytes:
    """
    Resolves a captured proof (camera frame, fingerprint scan) to raw bytes.
    Accepts data: URLs, http(s) URLs and local file paths.

    uploads_only=True accepts data: URLs alone, for sources sent by remote
    clients: the node never reads its own files or fetches URLs for them.
    """
    if not isinstance(source, str):
        raise ArtifactUnavailable("Artifact source must be a string")

    if source.startswith("data:"):
        return decode_data_url(source)

    if uploads_only:
        raise ArtifactUnavailable("Only uploaded data: URLs are accepted")

    if source.startswith(("http://", "https://")):
        try:
            response = requests.get(source, timeout=timeout)
        except requests.RequestException as e:
            raise ArtifactUnavailable(f"Artifact fetch failed: {e}")

        if response.status_code != 200:
            raise ArtifactUnavailable(f"Artifact fetch failed: HTTP {response.status_code}")

        return response.content

    try:
        return Path(source).read_bytes()
    except OSError as e:
        raise ArtifactUnavailable(f"Artifact not readable: {e}")


async def acquire_proof_artifact(source: str, timeout=ARTIFACT_TIMEOUT, uploads_only=False) -> bytes:
    return await asyncio.to_thread(fetch_artifact, source, timeout, uploads_only)
