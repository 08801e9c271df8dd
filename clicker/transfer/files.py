"""
Local Document Files

Reads and writes score documents as JSON files. Imports go through the
same validation as remote imports.
"""

from __future__ import annotations
import json
import logging
import re
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import Any, Union

from ..contracts.base import ValidationError
from ..contracts.document import ScoreDocument
from ..session import Session
from .codec import deserialize, serialize


logger = logging.getLogger("clicker.transfer")

PathLike = Union[str, Path]


class DocumentEncoder(json.JSONEncoder):
    """
    JSON encoder for score documents.

    RULES:
    1. Objects with to_dict() use it
    2. Other dataclasses become plain dicts
    3. Tuples are already lists to the base encoder
    """

    def default(self, obj: Any) -> Any:
        if hasattr(obj, "to_dict"):
            return obj.to_dict()
        if is_dataclass(obj) and not isinstance(obj, type):
            return asdict(obj)
        return super().default(obj)


def document_filename(session: Session) -> str:
    """Download name: <judge>-<videoId>.json, judge omitted when blank."""
    metadata = session.metadata
    stem = "-".join(p for p in (metadata.judge_name.strip(), metadata.video_id) if p)
    stem = re.sub(r"[^\w.-]+", "_", stem) or "scores"
    return f"{stem}.json"


def dumps_document(session: Session) -> str:
    return json.dumps(serialize(session), cls=DocumentEncoder, indent=2)


def export_file(session: Session, directory: PathLike) -> Path:
    """Write the session document into directory and return its path."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / document_filename(session)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(dumps_document(session))
    logger.info("Exported %d entries to %s", len(session.timeline), path)
    return path


def import_file(session: Session, path: PathLike) -> ScoreDocument:
    """Load a document file into the session. Raises ValidationError."""
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        raise ValidationError(
            "Document is not valid JSON",
            context=(("path", str(path)), ("cause", str(e)))
        ) from e
    return deserialize(session, raw)
