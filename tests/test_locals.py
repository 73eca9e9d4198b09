"""Tests for the namespaced locals store."""

from exchange_io import UNSET, Request, get_locals, set_locals


def test_get_returns_namespace_data():
    target = {"locals": {"any": {"namespace": {"test": "test"}}}}
    assert get_locals(target, "any.namespace") == {"test": "test"}


def test_get_missing_returns_default():
    assert get_locals({}, "any.namespace") is None
    assert get_locals({}, "any.namespace", {"fallback": 1}) == {"fallback": 1}


def test_get_through_scalar_returns_default():
    target = {"locals": {"any": "scalar"}}
    assert get_locals(target, "any.namespace", "d") == "d"


def test_unset_clears_namespace():
    target = {"locals": {"any": {"namespace": {"name": {"test": "test"}}}}}
    set_locals(target, "any.namespace", UNSET)
    assert target["locals"] == {"any": {}}


def test_unset_missing_namespace_is_noop():
    target = {}
    set_locals(target, "nothing.here", UNSET)
    assert target == {"locals": {}}


def test_merges_existing_mapping():
    target = {"locals": {"any": {"namespace": {"name": {"test": "test"}}}}}
    set_locals(target, "any.namespace.name", {"another": "another"})
    assert get_locals(target, "any.namespace.name") == {"test": "test", "another": "another"}


def test_merge_is_deep():
    target = {}
    set_locals(target, "auth", {"user": {"id": 1, "roles": ["a"]}})
    set_locals(target, "auth", {"user": {"name": "alice"}, "token": "t"})
    assert get_locals(target, "auth") == {
        "user": {"id": 1, "roles": ["a"], "name": "alice"},
        "token": "t",
    }


def test_sets_new_data():
    target = {}
    set_locals(target, "any.namespace.name", {"test": "another"})
    assert get_locals(target, "any.namespace.name") == {"test": "another"}


def test_scalar_replaces():
    target = {}
    set_locals(target, "counter", {"n": 1})
    set_locals(target, "counter", 5)
    assert get_locals(target, "counter") == 5


def test_mapping_replaces_scalar():
    target = {}
    set_locals(target, "value", "text")
    set_locals(target, "value", {"k": "v"})
    assert get_locals(target, "value") == {"k": "v"}


def test_none_is_stored():
    target = {}
    set_locals(target, "value", None)
    assert "value" in target["locals"]
    assert get_locals(target, "value", "default") is None


def test_returns_target_for_chaining():
    target = {}
    assert set_locals(target, "a", 1) is target


def test_works_on_objects():
    request = Request()
    set_locals(request, "auth.user_id", "alice")
    assert request.locals == {"auth": {"user_id": "alice"}}


def test_creates_locals_attribute():
    class Bare:
        pass

    obj = Bare()
    set_locals(obj, "x", 1)
    assert obj.locals == {"x": 1}
    assert get_locals(Bare(), "x", "none") == "none"


def test_null_locals_key_is_replaced():
    target = {"locals": None}
    set_locals(target, "a", 1)
    assert target == {"locals": {"a": 1}}
