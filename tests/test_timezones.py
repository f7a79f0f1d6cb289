import threading
from datetime import datetime, timezone, tzinfo
from pathlib import Path

from zoneinfo import ZoneInfo

import localtz
from localtz.config import DEFAULT_WATCHED_PATH
from localtz.services import get_timezone_watcher

from .helpers import DEFAULT_ZONE, assert_no_update, assert_signaled, link_zone


def test_get_starts_process_watcher(process_watcher, link_path):
    link_zone(link_path, "Europe/Berlin")

    assert localtz.get() is ZoneInfo("Europe/Berlin")

    watcher = get_timezone_watcher()
    assert watcher.running
    assert watcher.path == link_path
    assert watcher.default is DEFAULT_ZONE


def test_next_change_follows_process_watcher(process_watcher, link_path):
    handle = localtz.next_change()
    link_zone(link_path, "Asia/Kolkata")

    assert_signaled(handle)
    assert localtz.get() is ZoneInfo("Asia/Kolkata")


def test_set_for_test(process_watcher, link_path):
    localtz.set_for_test(ZoneInfo("Asia/Tokyo"))
    assert localtz.get() is ZoneInfo("Asia/Tokyo")

    handle = localtz.next_change()
    localtz.set_for_test(None)
    assert_signaled(handle, timeout=0)
    assert localtz.get() is None

    handle = localtz.next_change()
    link_zone(link_path, "Europe/Rome")
    assert_no_update(handle)
    assert localtz.get() is None


def test_now_local(process_watcher):
    localtz.set_for_test(ZoneInfo("Asia/Tokyo"))

    now = localtz.now_local()
    assert now.tzinfo is ZoneInfo("Asia/Tokyo")
    assert localtz.now_local("%Z") == "JST"


def test_now_local_uses_utc_when_unset(process_watcher):
    localtz.set_for_test(None)
    assert localtz.now_local().tzinfo is timezone.utc


def test_convert_to_local(process_watcher):
    localtz.set_for_test(ZoneInfo("Asia/Tokyo"))

    converted = localtz.convert_to_local(datetime(2024, 1, 1, 12, 0))

    assert converted.tzinfo is ZoneInfo("Asia/Tokyo")
    assert (converted.hour, converted.day) == (21, 1)


def test_convert_to_local_keeps_aware_instant(process_watcher):
    localtz.set_for_test(ZoneInfo("Europe/Berlin"))
    source = datetime(2024, 7, 1, 12, 0, tzinfo=ZoneInfo("America/New_York"))

    converted = localtz.convert_to_local(source)

    assert converted == source
    assert converted.hour == 18


def test_get_survives_invalid_settings(process_watcher, clean_settings):
    clean_settings.setenv("LOCALTZ_DEFAULT", "Nowhere/SomeCity")
    clean_settings.setenv("LOCALTZ_POLL_INTERVAL", "-1")

    location = localtz.get()

    assert isinstance(location, tzinfo)
    watcher = get_timezone_watcher()
    assert watcher.path == Path(DEFAULT_WATCHED_PATH)


def test_concurrent_first_gets_see_the_first_observation(process_watcher, link_path):
    link_zone(link_path, "Europe/Berlin")
    start = threading.Barrier(6)
    seen = []

    def read():
        start.wait()
        seen.append(localtz.get())

    threads = [threading.Thread(target=read) for _ in range(6)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(2.0)

    assert seen == [ZoneInfo("Europe/Berlin")] * 6
