"""
Remote Share Stores
===================

Where exported recordings go to be shared by link.

CONTRACT:
- lookup(share_hash) returns zero or one matching document
- publish(document) stores it and returns the assigned share hash

Share hashes are derived from document content, so publishing the
same recording twice yields the same link.
"""

from __future__ import annotations
import hashlib
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import parse_qs, urlencode, urlparse

import httpx

from ..config import ClickerConfig
from ..contracts.base import NotFound, RemoteStoreError, ValidationError
from ..contracts.document import FIELD_HASH
from ..session import Session
from .codec import deserialize, serialize, validate_document


logger = logging.getLogger("clicker.transfer")

SHARE_QUERY_PARAM = "id"
SCORES_PATH = "/api/v1/scores"


def generate_share_hash(document: Mapping[str, Any]) -> str:
    """Deterministic share hash from document content (hash field excluded)."""
    content = {k: v for k, v in document.items() if k != FIELD_HASH}
    canonical = json.dumps(content, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode('utf-8')).hexdigest()[:16]


def share_url(base_url: str, share_hash: str) -> str:
    """Link that opens a shared recording: <base>/?id=<hash>."""
    return f"{base_url.rstrip('/')}/?{urlencode({SHARE_QUERY_PARAM: share_hash})}"


def parse_share_url(url: str) -> Optional[str]:
    """Share hash from a share link, or None."""
    values = parse_qs(urlparse(url).query).get(SHARE_QUERY_PARAM)
    if values and values[0]:
        return values[0]
    return None


# =============================================================================
# STORE INTERFACES
# =============================================================================

class RemoteStore:
    """Abstract share store."""

    def lookup(self, share_hash: str) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def publish(self, document: Mapping[str, Any]) -> str:
        raise NotImplementedError


class InMemoryRemoteStore(RemoteStore):
    """Process-local store. Documents are kept with their hash attached."""

    def __init__(self):
        self._documents: Dict[str, Dict[str, Any]] = {}

    def __len__(self) -> int:
        return len(self._documents)

    def lookup(self, share_hash: str) -> List[Dict[str, Any]]:
        document = self._documents.get(share_hash)
        return [dict(document)] if document is not None else []

    def publish(self, document: Mapping[str, Any]) -> str:
        share_hash = generate_share_hash(document)
        stored = dict(document)
        stored[FIELD_HASH] = share_hash
        self._documents[share_hash] = stored
        return share_hash


class FileRemoteStore(RemoteStore):
    """One JSON file per shared recording, named by hash."""

    def __init__(self, directory: Path):
        self._directory = Path(directory)
        self._directory.mkdir(parents=True, exist_ok=True)

    def _path_for(self, share_hash: str) -> Optional[Path]:
        # Hashes are hex; anything else cannot name a stored file.
        if not share_hash or not all(c in "0123456789abcdef" for c in share_hash):
            return None
        return self._directory / f"{share_hash}.json"

    def lookup(self, share_hash: str) -> List[Dict[str, Any]]:
        path = self._path_for(share_hash)
        if path is None or not path.exists():
            return []
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return [json.load(f)]
        except json.JSONDecodeError as e:
            raise ValidationError(
                "Stored document is not valid JSON",
                context=(("hash", share_hash), ("cause", str(e)))
            ) from e

    def publish(self, document: Mapping[str, Any]) -> str:
        share_hash = generate_share_hash(document)
        stored = dict(document)
        stored[FIELD_HASH] = share_hash
        with open(self._path_for(share_hash), 'w', encoding='utf-8') as f:
            json.dump(stored, f, indent=2)
        return share_hash


class HttpRemoteStore(RemoteStore):
    """
    Client for the share server API.

    Accepts an injected httpx.Client (base URL already configured);
    otherwise builds one from base_url.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        client: Optional[httpx.Client] = None,
        timeout: float = 15.0
    ):
        if client is None:
            if not base_url:
                raise ValueError("HttpRemoteStore needs a base_url or a client")
            client = httpx.Client(base_url=base_url, timeout=timeout, follow_redirects=True)
        self._client = client

    @classmethod
    def from_config(cls, config: ClickerConfig) -> 'HttpRemoteStore':
        """Store for CLICKER_REMOTE_URL with the configured timeout."""
        if not config.remote_url:
            raise ValueError("No remote_url configured for the share store")
        return cls(base_url=config.remote_url, timeout=config.remote_timeout_seconds)

    def close(self) -> None:
        self._client.close()

    def lookup(self, share_hash: str) -> List[Dict[str, Any]]:
        try:
            resp = self._client.get(SCORES_PATH, params={FIELD_HASH: share_hash})
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise RemoteStoreError(
                "Share lookup failed",
                context=(("hash", share_hash), ("cause", str(e)))
            ) from e

        scores = data.get("scores") if isinstance(data, dict) else None
        if not isinstance(scores, list):
            raise RemoteStoreError(
                "Share lookup returned an unexpected body",
                context=(("hash", share_hash),)
            )
        return scores

    def publish(self, document: Mapping[str, Any]) -> str:
        try:
            resp = self._client.post(SCORES_PATH, json=dict(document))
        except httpx.HTTPError as e:
            raise RemoteStoreError("Share publish failed", context=(("cause", str(e)),)) from e

        if resp.status_code == 422:
            raise ValidationError(
                "Share server rejected the document",
                context=(("detail", resp.text),)
            )
        try:
            resp.raise_for_status()
            return resp.json()[FIELD_HASH]
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            raise RemoteStoreError("Share publish failed", context=(("cause", str(e)),)) from e


# =============================================================================
# SHARE OPERATIONS
# =============================================================================

def import_shared(session: Session, store: RemoteStore, share_hash: str):
    """
    Load a shared recording by hash into the session.

    Raises NotFound (with the hash) unless exactly one document matches,
    then applies the same validation as any other import.
    """
    matches = store.lookup(share_hash)
    if len(matches) != 1:
        logger.warning("Share %s not found (%d matches)", share_hash, len(matches))
        raise NotFound(
            f"Unable to find score with ID {share_hash}",
            context=(("hash", share_hash), ("matches", str(len(matches))))
        )
    return deserialize(session, matches[0])


def export_shared(session: Session, store: RemoteStore) -> str:
    """Publish the session and remember the assigned share hash."""
    document = serialize(session)
    document.pop(FIELD_HASH, None)
    validate_document(document, judge_name_limit=session.config.judge_name_limit)

    share_hash = store.publish(document)
    session.set_share_hash(share_hash)
    logger.info("Exported %s as share %s", session.metadata.video_id, share_hash)
    return share_hash


def share_link(session: Session) -> Optional[str]:
    """Share link for the session's last export, or None if never shared."""
    share_hash = session.metadata.share_hash
    if not share_hash:
        return None
    return share_url(session.config.share_base_url, share_hash)
