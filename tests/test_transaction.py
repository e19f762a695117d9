import pytest

from raffle_ledger.transaction import Journal


def test_failed_frame_replays_undo_in_reverse():
    journal = Journal()
    state = []
    with pytest.raises(ValueError):
        with journal.frame():
            for i in range(3):
                state.append(i)
                journal.record(state.pop)
            raise ValueError("boom")
    assert state == []
    assert journal.depth == 0


@pytest.mark.parametrize("interrupt", [KeyboardInterrupt, SystemExit])
def test_interrupted_frame_is_reverted_and_closed(interrupt):
    journal = Journal()
    state = []
    with pytest.raises(interrupt):
        with journal.frame():
            state.append("partial")
            journal.record(state.pop)
            raise interrupt()
    assert state == []
    assert journal.depth == 0

    with journal.frame():
        state.append("next")
        journal.record(state.pop)
    assert state == ["next"]
    assert journal.depth == 0


def test_nested_failure_only_reverts_inner_frame():
    journal = Journal()
    state = {"outer": 0, "inner": 0}

    def bump(key):
        previous = state[key]
        state[key] += 1
        journal.record(lambda: state.__setitem__(key, previous))

    with journal.frame():
        bump("outer")
        with pytest.raises(RuntimeError):
            with journal.frame():
                bump("inner")
                raise RuntimeError("inner fails")
    assert state == {"outer": 1, "inner": 0}


def test_outer_failure_reverts_committed_inner_frame():
    journal = Journal()
    state = []
    with pytest.raises(RuntimeError):
        with journal.frame():
            with journal.frame():
                state.append("inner")
                journal.record(state.pop)
            raise RuntimeError("outer fails")
    assert state == []


def test_record_outside_frame_is_autocommit():
    journal = Journal()
    journal.record(lambda: pytest.fail("must not be called"))
    assert journal.depth == 0
