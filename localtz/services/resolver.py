"""Translate the watched symlink into a timezone location."""

from __future__ import annotations

import os
import stat
from datetime import timezone, tzinfo
from functools import lru_cache
from typing import Optional

import tzlocal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..errors import (
    NotASymlinkError,
    PathLike,
    UnreadableLinkError,
    UnresolvableZoneError,
)
from ..logging_config import logger

ZONEINFO = "zoneinfo"


def zone_key_from_target(target: str) -> Optional[str]:
    """Return the IANA key encoded in a link target, or None.

    The key is whatever follows the last path segment containing
    ``zoneinfo``, e.g. ``/usr/share/zoneinfo/Europe/Berlin`` and
    ``/usr/share/zoneinfo.default/Europe/Berlin`` both give ``Europe/Berlin``.
    """
    marker = target.rfind(ZONEINFO)
    if marker == -1:
        return None
    index = target.find("/", marker)
    if index == -1:
        return None
    key = target[index + 1 :].strip("/")
    return key or None


def load_location(key: str, *, path: PathLike = "", target: str = "") -> ZoneInfo:
    try:
        return ZoneInfo(key)
    except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
        raise UnresolvableZoneError(path, target or key, key) from exc


def resolve_timezone(path: PathLike) -> Optional[ZoneInfo]:
    """Read ``path`` as a zoneinfo symlink.

    Returns the resolved location, or ``None`` when the path does not exist.
    Raises a :class:`~localtz.errors.TimezoneResolutionError` subclass when the
    path exists but does not name a usable zone.
    """
    try:
        mode = os.lstat(path).st_mode
    except FileNotFoundError:
        return None
    except OSError as exc:
        raise UnreadableLinkError(path, exc) from exc

    if not stat.S_ISLNK(mode):
        raise NotASymlinkError(path)

    try:
        target = os.readlink(path)
    except FileNotFoundError:
        # Removed between lstat and readlink.
        return None
    except OSError as exc:
        raise UnreadableLinkError(path, exc) from exc

    key = zone_key_from_target(target)
    if key is None:
        raise UnresolvableZoneError(path, target)
    return load_location(key, path=path, target=target)


@lru_cache(maxsize=None)
def system_default(name: Optional[str] = None) -> tzinfo:
    """Return the fallback location published when the link is broken.

    ``name`` pins it to a configured zone; otherwise the host zone is used.
    """
    if name:
        return ZoneInfo(name)
    try:
        return tzlocal.get_localzone()
    except Exception as exc:  # pragma: no cover - defensive
        logger.warning("host timezone lookup failed; defaulting to UTC", extra={"error": str(exc)})
        return timezone.utc


def zone_name(location: Optional[tzinfo], unset: str = "unset") -> str:
    if location is None:
        return unset
    key = getattr(location, "key", None)
    if key:
        return key
    return str(location)


__all__ = [
    "load_location",
    "resolve_timezone",
    "system_default",
    "zone_key_from_target",
    "zone_name",
]
