"""
Transfer Codec
==============

Serializes a session to the portable score document and back.

VALIDATION (single path for every import source):
- Document is a JSON object
- videoId / videoUrl are non-empty strings
- judgeName, if present, is a string within the name limit
- entries is a list of [number, number] pairs
- times are finite, >= 0 and strictly increasing (no merging here)
- deltas are integral

A failed import raises ValidationError and leaves the session untouched.
A successful import replaces timeline and metadata wholesale.
"""

from __future__ import annotations
import logging
import math
from typing import Any, Dict, List, Mapping, Tuple

from ..contracts.base import JUDGE_NAME_LIMIT, ValidationError
from ..contracts.document import (
    FIELD_ENTRIES,
    FIELD_HASH,
    FIELD_JUDGE_NAME,
    FIELD_VIDEO_ID,
    FIELD_VIDEO_URL,
    ScoreDocument,
)
from ..session import Session


logger = logging.getLogger("clicker.transfer")


def serialize(session: Session) -> Dict[str, Any]:
    """Session -> document dict (JSON-compatible)."""
    metadata = session.metadata
    document = ScoreDocument(
        video_id=metadata.video_id,
        video_url=metadata.video_url,
        judge_name=metadata.judge_name,
        entries=tuple(e.as_pair() for e in session.timeline.as_ordered_sequence()),
        share_hash=metadata.share_hash
    )
    return document.to_dict()


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _require_string(raw: Mapping[str, Any], key: str) -> str:
    value = raw.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(
            f"Document field '{key}' must be a non-empty string",
            context=(("field", key), ("value", repr(value)))
        )
    return value


def _validate_entries(raw_entries: Any) -> Tuple[Tuple[float, int], ...]:
    if not isinstance(raw_entries, list):
        raise ValidationError(
            "Document 'entries' must be an array",
            context=(("type", type(raw_entries).__name__),)
        )

    entries: List[Tuple[float, int]] = []
    previous = None
    for index, pair in enumerate(raw_entries):
        if (
            not isinstance(pair, (list, tuple))
            or len(pair) != 2
            or not _is_number(pair[0])
            or not _is_number(pair[1])
        ):
            raise ValidationError(
                "Entry must be a [number, number] pair",
                context=(("index", str(index)), ("entry", repr(pair)))
            )

        time, delta = pair
        try:
            finite = math.isfinite(time) and math.isfinite(delta)
        except OverflowError:
            # Integers too large for a float.
            finite = False
        if not finite:
            raise ValidationError(
                "Entry values must be finite",
                context=(("index", str(index)), ("entry", repr(pair)))
            )
        if time < 0:
            raise ValidationError(
                "Entry time must be >= 0",
                context=(("index", str(index)), ("time", repr(time)))
            )
        if delta != int(delta):
            raise ValidationError(
                "Entry delta must be an integer",
                context=(("index", str(index)), ("delta", repr(delta)))
            )
        if previous is not None and time <= previous:
            raise ValidationError(
                "Entry times must be strictly increasing",
                context=(
                    ("index", str(index)),
                    ("previous", repr(previous)),
                    ("time", repr(time)),
                )
            )

        entries.append((float(time), int(delta)))
        previous = time

    return tuple(entries)


def validate_document(raw: Any, judge_name_limit: int = JUDGE_NAME_LIMIT) -> ScoreDocument:
    """Check a raw document against the contract. Raises ValidationError."""
    if not isinstance(raw, Mapping):
        raise ValidationError(
            "Document must be a JSON object",
            context=(("type", type(raw).__name__),)
        )

    video_id = _require_string(raw, FIELD_VIDEO_ID)
    video_url = _require_string(raw, FIELD_VIDEO_URL)

    judge_name = raw.get(FIELD_JUDGE_NAME, "")
    if judge_name is None:
        judge_name = ""
    if not isinstance(judge_name, str):
        raise ValidationError(
            "Document field 'judgeName' must be a string",
            context=(("value", repr(judge_name)),)
        )
    if len(judge_name) > judge_name_limit:
        raise ValidationError(
            f"Judge name exceeds {judge_name_limit} characters",
            context=(("length", str(len(judge_name))),)
        )

    share_hash = raw.get(FIELD_HASH)
    if share_hash is not None and not isinstance(share_hash, str):
        raise ValidationError(
            "Document field 'hash' must be a string",
            context=(("value", repr(share_hash)),)
        )

    if FIELD_ENTRIES not in raw:
        raise ValidationError("Document is missing 'entries'")

    return ScoreDocument(
        video_id=video_id,
        video_url=video_url,
        judge_name=judge_name,
        entries=_validate_entries(raw[FIELD_ENTRIES]),
        share_hash=share_hash or None
    )


def deserialize(session: Session, raw: Any) -> ScoreDocument:
    """
    Validate a document and load it into the session.

    Replaces the timeline and metadata wholesale and asks the transport
    to load the referenced video. Raises ValidationError before touching
    any session state.
    """
    document = validate_document(raw, judge_name_limit=session.config.judge_name_limit)
    session.replace_recording(document)
    logger.info(
        "Imported %d entries for video %s (judge=%r)",
        len(document.entries), document.video_id, document.judge_name
    )
    return document
