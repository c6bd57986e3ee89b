"""Code review identifiers: one commit hash, or ``<from>-<to>`` for a comparison."""

from __future__ import annotations

SEPARATOR = "-"


class MalformedCodeReviewIdError(ValueError):
    def __init__(self, code_review_id: str) -> None:
        self.code_review_id = code_review_id
        super().__init__(f"Malformed code review id: {code_review_id!r}")


def encode_code_review_id(base: str | None, target: str) -> str:
    """Return the id of a review of ``target``, compared against ``base`` if given."""
    if not base or base == target:
        return target
    return base + SEPARATOR + target


def decode_code_review_id(code_review_id: str) -> tuple[str, str]:
    """Return ``(from_hash, to_hash)``. Raises MalformedCodeReviewIdError."""
    parts = code_review_id.split(SEPARATOR)
    if len(parts) not in (1, 2) or not all(parts):
        raise MalformedCodeReviewIdError(code_review_id)
    return parts[0], parts[-1]
