"""Failures raised while resolving the watched timezone link."""

from __future__ import annotations

import os
from typing import Optional, Union

PathLike = Union[str, "os.PathLike[str]"]


class TimezoneResolutionError(Exception):
    """A single observation of the watched path failed."""

    def __init__(self, path: PathLike, message: str) -> None:
        self.path = os.fspath(path)
        super().__init__(f"{self.path}: {message}")


class NotASymlinkError(TimezoneResolutionError):
    def __init__(self, path: PathLike) -> None:
        super().__init__(path, "not a symbolic link")


class UnreadableLinkError(TimezoneResolutionError):
    def __init__(self, path: PathLike, error: OSError) -> None:
        self.error = error
        super().__init__(path, f"cannot read link ({error.strerror or error})")


class UnresolvableZoneError(TimezoneResolutionError):
    """The link target does not name a zone known to the timezone database."""

    def __init__(self, path: PathLike, target: str, key: Optional[str] = None) -> None:
        self.target = target
        self.key = key
        if key is None:
            message = f"link target {target!r} does not contain a zoneinfo key"
        else:
            message = f"unknown timezone {key!r} (link target {target!r})"
        super().__init__(path, message)


__all__ = [
    "NotASymlinkError",
    "TimezoneResolutionError",
    "UnreadableLinkError",
    "UnresolvableZoneError",
]
