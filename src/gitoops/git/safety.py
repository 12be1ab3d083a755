"""Safety-net markers: uniquely named annotated tags created before destructive steps.

Marker name contract (users type these in recovery commands):

    oops/<operation>-<qualifier>-<YYYYMMDD-HHMMSS>-<suffix>

The timestamp is UTC with seconds granularity and the suffix is 6 characters
from [a-z0-9]. Markers are never deleted automatically.
"""

from __future__ import annotations

import secrets
from collections.abc import Callable
from datetime import UTC, datetime

from gitoops.config.constants import MARKER_PREFIX, MARKER_SUFFIX_ALPHABET, MARKER_SUFFIX_LENGTH
from gitoops.core.errors import InternalError, ValidationError
from gitoops.core.formatting import format_timestamp
from gitoops.core.logging import get_logger
from gitoops.git._internal.access import RepoAccess
from gitoops.git.models import SafetyMarker

log = get_logger("safety")

_MAX_NAME_ATTEMPTS = 100


def _random_suffix(length: int = MARKER_SUFFIX_LENGTH) -> str:
    return "".join(secrets.choice(MARKER_SUFFIX_ALPHABET) for _ in range(length))


def _utc_now() -> datetime:
    return datetime.now(UTC)


class MarkerNamer:
    """Single naming function for recovery markers.

    Names issued by one namer never repeat, even within the same second.
    Clock and suffix source are injectable for tests.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], datetime] = _utc_now,
        suffix: Callable[[], str] = _random_suffix,
    ) -> None:
        self._clock = clock
        self._suffix = suffix
        self._issued: set[str] = set()

    def name(self, operation: str, qualifier: str, *, moment: datetime | None = None) -> str:
        if not operation or not qualifier:
            raise ValidationError.invalid_argument(
                "marker", f"{operation}/{qualifier}", "Marker operation and qualifier are required"
            )
        stamp = format_timestamp(moment or self._clock())
        for _ in range(_MAX_NAME_ATTEMPTS):
            candidate = f"{MARKER_PREFIX}/{operation}-{qualifier}-{stamp}-{self._suffix()}"
            if candidate not in self._issued:
                self._issued.add(candidate)
                return candidate
        raise InternalError.unexpected("could not generate a unique marker name", operation=operation)


class SafetyNet:
    """Creates recovery markers at the current tip.

    A marker name collision with an existing tag surfaces as ExternalToolError
    from the tag call, so the caller aborts before the step it protects.
    """

    def __init__(self, access: RepoAccess, namer: MarkerNamer | None = None) -> None:
        self._access = access
        self._namer = namer or MarkerNamer()

    @property
    def namer(self) -> MarkerNamer:
        return self._namer

    def create_marker(self, operation: str, qualifier: str) -> SafetyMarker:
        name = self._namer.name(operation, qualifier)
        created_at = _utc_now()
        self._access.create_tag(name, f"git-oops safety marker before {operation}")
        sha = self._access.resolve_commit(name) or ""
        log.info("marker_created", marker=name, operation=operation, sha=sha)
        return SafetyMarker(name=name, sha=sha, operation=operation, created_at=created_at)
