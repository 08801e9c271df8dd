"""
Recorder Tests

Gating, key matching, focus restoration and listener idempotence.
"""

import math

import pytest

from clicker.contracts.base import AppMode, KeyBindings

from ..fixtures import FakeFocus, FakeKeySource, FakeTransport, make_session


@pytest.fixture
def keys():
    return FakeKeySource()


@pytest.fixture
def focus():
    return FakeFocus()


@pytest.fixture
def transport():
    return FakeTransport(position=2.0)


@pytest.fixture
def session(transport, keys, focus):
    return make_session(transport=transport, key_source=keys, focus=focus)


class TestKeyPresses:

    def test_positive_and_negative_bindings(self, session, transport, keys):
        keys.press("a")
        keys.press("a")
        transport.position = 7.5
        keys.press("s")

        assert [e.as_pair() for e in session.timeline] == [(2.0, 2), (7.5, -1)]

    def test_unbound_key_ignored(self, session, keys):
        keys.press("x")
        assert len(session.timeline) == 0

    def test_match_is_case_sensitive(self, session, keys):
        keys.press("A")
        assert len(session.timeline) == 0

    def test_custom_bindings(self, session, keys):
        session.set_bindings(KeyBindings(positive="j", negative="k"))
        keys.press("a")
        keys.press("j")

        assert [e.as_pair() for e in session.timeline] == [(2.0, 1)]

    def test_focus_restored_after_click(self, session, keys, focus):
        keys.press("a")
        assert focus.count == 1

    def test_focus_untouched_when_ignored(self, session, keys, focus):
        keys.press("x")
        assert focus.count == 0


class TestGating:

    def test_ignored_in_playback_mode(self, session, keys):
        session.set_mode(AppMode.PLAYBACK)
        session.recorder.handle_key_press("a")
        session.recorder.add_click(1)

        assert len(session.timeline) == 0

    def test_ignored_when_transport_not_ready(self, session, transport, keys):
        transport.ready = False
        keys.press("a")
        assert len(session.timeline) == 0

    @pytest.mark.parametrize("duration", [None, 0, -5, math.nan, math.inf])
    def test_ignored_without_usable_duration(self, session, transport, keys, duration):
        transport.duration = duration
        keys.press("a")
        assert len(session.timeline) == 0

    @pytest.mark.parametrize("position", [None, -1.0, math.nan, math.inf, "3"])
    def test_ignored_without_usable_position(self, session, transport, keys, position):
        transport.position = position
        keys.press("a")
        assert len(session.timeline) == 0

    def test_transport_exception_contained(self, session, transport, keys):
        transport.fail_position = True
        keys.press("a")
        assert len(session.timeline) == 0

    def test_failing_focus_does_not_lose_click(self, session, keys):
        class BrokenFocus:
            def regain_focus(self):
                raise RuntimeError("no window")

        session.focus_target = BrokenFocus()
        keys.press("a")
        assert len(session.timeline) == 1


class TestRegistration:

    def test_rebinding_does_not_duplicate(self, session, keys):
        session.set_bindings(KeyBindings(positive="a", negative="s"))
        session.set_bindings(KeyBindings(positive="a", negative="d"))
        keys.press("a")

        assert len(keys.listeners) == 1
        assert session.timeline.get(2.0) == 1

    def test_reattach_same_source(self, session, keys):
        session.recorder.attach(keys)
        session.recorder.attach(keys)
        keys.press("a")

        assert session.timeline.get(2.0) == 1

    def test_detached_in_playback(self, session, keys):
        session.set_mode(AppMode.PLAYBACK)
        assert keys.listeners == []

        session.set_mode(AppMode.SCORING)
        assert len(keys.listeners) == 1

    def test_transport_event_regains_focus_only_when_scoring(self, session, focus):
        session.on_transport_event()
        assert focus.count == 1

        session.set_mode(AppMode.PLAYBACK)
        session.on_transport_event()
        assert focus.count == 1
