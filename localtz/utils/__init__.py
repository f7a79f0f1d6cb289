from .timezones import (
    UTC,
    convert_to_local,
    get,
    next_change,
    now_local,
    set_for_test,
)

__all__ = [
    "UTC",
    "convert_to_local",
    "get",
    "next_change",
    "now_local",
    "set_for_test",
]
