from proposal_wizard.core.history import (
    DIRECTION_NEXT,
    DIRECTION_PREV,
    clamp_history,
    current_version,
    is_valid_history,
    navigate,
    push_version,
)
from proposal_wizard.core.reducer import reduce
from proposal_wizard.core.types import FieldKey, NavigateVersion, PushVersion, VersionEntry, VersionHistory


def _push_all(values, history=None):
    for i, v in enumerate(values):
        history = push_version(history, {"text": v}, "ai", f"t{i}")
    return history


def _texts(history):
    return [v.data["text"] for v in history.versions]


def test_cap_keeps_ten_most_recent_in_order():
    history = _push_all([str(i) for i in range(15)])
    assert len(history.versions) == 10
    assert _texts(history) == [str(i) for i in range(5, 15)]
    assert history.current_index == 9


def test_fork_discards_abandoned_future():
    history = _push_all(["A", "B", "C"])
    history = navigate(history, DIRECTION_PREV)
    history = navigate(history, DIRECTION_PREV)
    assert history.current_index == 0

    history = push_version(history, {"text": "D"}, "manual", "t9")
    assert _texts(history) == ["A", "D"]
    assert history.current_index == 1


def test_fork_discard_through_the_reducer(fresh_state):
    key = "key_insight.keyInsight"
    state = fresh_state
    for action in [
        PushVersion(key, {"text": "A"}, "ai"),
        PushVersion(key, {"text": "B"}, "ai"),
        PushVersion(key, {"text": "C"}, "ai"),
        NavigateVersion(key, "prev"),
        NavigateVersion(key, "prev"),
        PushVersion(key, {"text": "D"}, "manual"),
    ]:
        state = reduce(state, action)
    assert _texts(state.version_history[FieldKey.parse(key)]) == ["A", "D"]


def test_navigate_clamps_at_both_ends():
    history = _push_all(["A", "B"])
    assert navigate(history, DIRECTION_NEXT) is None

    back = navigate(history, DIRECTION_PREV)
    assert back.current_index == 0
    assert navigate(back, DIRECTION_PREV) is None
    assert navigate(back, DIRECTION_NEXT).current_index == 1


def test_navigate_empty_or_missing():
    assert navigate(None, DIRECTION_PREV) is None
    assert navigate(VersionHistory(), DIRECTION_NEXT) is None


def test_push_does_not_mutate_input():
    history = _push_all(["A", "B"])
    push_version(history, {"text": "C"}, "ai", "t")
    assert _texts(history) == ["A", "B"]


def test_clamp_repairs_out_of_range_cursor():
    entries = [VersionEntry({"text": str(i)}, "t", "ai") for i in range(3)]
    assert clamp_history(VersionHistory(entries, 7)).current_index == 2
    assert clamp_history(VersionHistory(entries, -4)).current_index == 0
    assert clamp_history(VersionHistory([], 3)).current_index == -1


def test_clamp_trims_oversized_history_and_rebases():
    entries = [VersionEntry({"text": str(i)}, "t", "ai") for i in range(13)]
    fixed = clamp_history(VersionHistory(entries, 5))
    assert len(fixed.versions) == 10
    assert _texts(fixed)[0] == "3"
    assert fixed.current_index == 2
    assert is_valid_history(fixed)


def test_current_version():
    history = _push_all(["A", "B"])
    assert current_version(history).data == {"text": "B"}
    assert current_version(None) is None
