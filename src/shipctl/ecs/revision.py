"""Task definition reference helpers."""

from __future__ import annotations

import re

from shipctl.lib.errors import RevisionResolutionError

# "<anything>:<revision>", e.g.
# arn:aws:ecs:us-east-1:123456789012:task-definition/app:7 or app:7
_REFERENCE_PATTERN = re.compile(r"^(?P<base>.*[^:]):(?P<revision>\d+)$")


def parse_reference(reference: str) -> tuple[str, str, int]:
    """Split a task definition reference into its parts.

    Args:
        reference: Task definition ARN or ``family:revision`` string

    Returns:
        Tuple of (reference without revision, family, revision)

    Raises:
        RevisionResolutionError: If the reference has no trailing revision
    """
    match = _REFERENCE_PATTERN.match(reference.strip())
    if not match:
        raise RevisionResolutionError(
            f"Malformed task definition reference: {reference!r}"
        )
    base = match.group("base")
    family = base.rsplit("/", 1)[-1]
    if not family:
        raise RevisionResolutionError(
            f"Malformed task definition reference: {reference!r}"
        )
    return base, family, int(match.group("revision"))


def specify_revision(revision: int, reference: str) -> str:
    """Return ``reference`` pointing at ``revision`` of the same family.

    Example:
        >>> specify_revision(5, "arn:aws:ecs:eu-west-1:1:task-definition/app:7")
        'arn:aws:ecs:eu-west-1:1:task-definition/app:5'

    Raises:
        RevisionResolutionError: If the reference is malformed or the revision
            is not a positive integer
    """
    if isinstance(revision, bool) or not isinstance(revision, int) or revision < 1:
        raise RevisionResolutionError(f"Invalid task definition revision: {revision!r}")
    base, _, _ = parse_reference(reference)
    return f"{base}:{revision}"
