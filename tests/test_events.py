"""Tests for instance events."""

import pytest

import lineage
import lineagetest


@pytest.fixture
def emitter():
    """Instance of an eventable Class."""
    factory = lineage.Factory(is_eventable=True)
    return factory.create({}, name="Emitter")()


def test_fire_in_registration_order(emitter):
    """Test listeners run first registered, first called."""
    calls = lineagetest.Recorder()
    for label in ("L1", "L2", "L3"):
        emitter.on("change", calls.listener(label))

    assert emitter.fire("change", 1, 2) == 3
    assert calls == [
        ("L1", emitter, (1, 2)),
        ("L2", emitter, (1, 2)),
        ("L3", emitter, (1, 2)),
    ]


def test_explicit_context(emitter):
    """Test the callback receives the given context."""
    calls = lineagetest.Recorder()
    context = object()
    emitter.on("change", calls.listener("L"), context)
    emitter.fire("change")
    assert calls == [("L", context, ())]


def test_keyword_arguments_forwarded(emitter):
    """Test fire passes keyword arguments through."""
    seen = []
    emitter.on("change", lambda ctx, **kwargs: seen.append(kwargs))
    emitter.fire("change", value=3)
    assert seen == [{"value": 3}]


def test_un_by_handle(emitter):
    """Test a handle removes only its own registration."""
    calls = lineagetest.Recorder()
    emitter.on("change", calls.listener("L1"))
    handle = emitter.on("change", calls.listener("L2"))
    emitter.on("change", calls.listener("L3"))

    assert emitter.un("change", handle) == 1
    emitter.fire("change")
    assert [label for label, _, _ in calls.calls] == ["L1", "L3"]


def test_un_by_callback(emitter):
    """Test a callback removes every registration using it."""
    calls = lineagetest.Recorder()
    repeated = calls.listener("R")
    emitter.on("change", repeated)
    emitter.on("change", calls.listener("K"))
    emitter.on("change", repeated)

    assert emitter.un("change", repeated) == 2
    emitter.fire("change")
    assert [label for label, _, _ in calls.calls] == ["K"]


def test_un_by_name(emitter):
    """Test a name clears only that event."""
    calls = lineagetest.Recorder()
    emitter.on("a", calls.listener("A"))
    emitter.on("a", calls.listener("A"))
    emitter.on("b", calls.listener("B"))

    assert emitter.un("a") == 2
    assert emitter.fire("a") == 0
    assert emitter.fire("b") == 1


def test_un_everything(emitter):
    """Test un() clears every event name."""
    calls = lineagetest.Recorder()
    emitter.on("a", calls.listener("A"))
    emitter.on("b", calls.listener("B"))

    assert emitter.un() == 2
    assert emitter.fire("a") == 0
    assert emitter.fire("b") == 0
    assert calls == []


def test_best_effort_operations(emitter):
    """Test bad input and missing listeners are quiet no-ops."""
    assert emitter.on("", lambda ctx: None) is None
    assert emitter.on(None, lambda ctx: None) is None
    assert emitter.on("change", None) is None
    assert emitter.un("missing") == 0
    assert emitter.un("missing", lambda ctx: None) == 0
    assert emitter.fire("missing") == 0
    assert emitter.listeners("change") == ()


def test_mutation_during_fire_uses_snapshot(emitter):
    """Test listeners added or removed while firing affect only later fires."""
    calls = lineagetest.Recorder()
    late = calls.listener("late")
    handles = {}

    def first(context):
        calls.calls.append("first")
        emitter.un("change", handles["second"])
        emitter.on("change", late)

    emitter.on("change", first)
    handles["second"] = emitter.on("change", lambda ctx: calls.calls.append("second"))

    emitter.fire("change")
    assert calls == ["first", "second"]

    calls.calls.clear()
    emitter.fire("change")
    assert calls.calls[0] == "first"
    assert calls.calls[1][0] == "late"


def test_listener_errors_propagate(emitter):
    """Test a failing listener stops the dispatch."""
    calls = lineagetest.Recorder()

    def broken(context):
        raise ValueError("listener failed")

    emitter.on("change", broken)
    emitter.on("change", calls.listener("after"))
    with pytest.raises(ValueError):
        emitter.fire("change")
    assert calls == []


def test_event_tables_are_per_instance():
    """Test instances of one Class do not share listeners."""
    Emitter = lineage.Factory(is_eventable=True).create({})
    first, second = Emitter(), Emitter()
    first.on("change", lambda ctx: None)

    assert second.fire("change") == 0
    assert len(first.listeners("change")) == 1


def test_not_eventable():
    """Test event methods exist only on eventable Classes."""
    with pytest.raises(AttributeError):
        lineage.create({})().on("change", lambda ctx: None)


def test_listener_repr(emitter):
    """Test the handle describes its registration."""
    def on_change(context):
        pass

    handle = emitter.on("change", on_change)
    assert handle.name == "change"
    assert handle.context is emitter
    assert "change" in repr(handle)


def test_un_handle_without_name(emitter):
    """Test a handle alone removes only its own registration."""
    callback = lambda ctx: None
    handle = emitter.on("a", callback)
    emitter.on("b", callback)

    assert emitter.un(None, handle) == 1
    assert emitter.fire("a") == 0
    assert emitter.fire("b") == 1


def test_un_callback_without_name(emitter):
    """Test a callback alone removes nothing."""
    callback = lambda ctx: None
    emitter.on("a", callback)

    assert emitter.un(None, callback) == 0
    assert emitter.fire("a") == 1


def test_explicit_none_context(emitter):
    """Test None can be passed as the callback context."""
    calls = lineagetest.Recorder()
    emitter.on("change", calls.listener("L"), None)
    emitter.fire("change", 1)
    assert calls == [("L", None, (1,))]
