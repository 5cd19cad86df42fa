# -*- coding: utf-8 -*-
"""
Tests for the debounced interactive duplicate check.
"""
import pytest

from models.member import Member
from services.duplicate_service import DuplicateDetector
from ui.duplicate_check_bridge import DuplicateCheckBridge

from fakes import InMemoryEntityStore


@pytest.fixture
def bridge(qtbot):
    store = InMemoryEntityStore()
    store.insert(Member(id=1, member_code="C1", first_name="John", last_name="Smith",
                        phone_number="555-0001"))
    return DuplicateCheckBridge(DuplicateDetector(store), debounce_ms=50)


def test_rapid_edits_run_one_check(qtbot, bridge):
    with qtbot.waitSignal(bridge.duplicatesFound, timeout=2000) as blocker:
        bridge.request_check(Member(first_name="J", last_name="Smith"))
        bridge.request_check(Member(first_name="Jo", last_name="Smith"))
        bridge.request_check(Member(first_name="Jon", last_name="Smith"))

    assert bridge.checks_run == 1
    matches = blocker.args[0]
    assert [m.member.member_code for m in matches] == ["C1"]


def test_no_match_emits_cleared(qtbot, bridge):
    with qtbot.waitSignal(bridge.duplicatesCleared, timeout=2000):
        bridge.request_check(Member(first_name="Peter", last_name="Wena"))


def test_incomplete_name_is_not_checked(qtbot, bridge):
    with qtbot.assertNotEmitted(bridge.duplicatesFound, wait=150):
        bridge.request_check(Member(first_name="John", last_name=""))

    assert bridge.checks_run == 0


def test_cancel_drops_pending_check(qtbot, bridge):
    bridge.request_check(Member(first_name="Jon", last_name="Smith"))
    bridge.cancel()

    qtbot.wait(150)
    assert bridge.checks_run == 0
