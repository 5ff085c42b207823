import unittest

import pytest

from wirebox import Container, ContainerError, Lifetime, NotFoundError, SingletonBuilder, ValueBuilder


def test_has_returns_true_for_set_item():
    c = Container()
    c.set("container", object())
    assert c.has("container")


def test_has_returns_false_for_missing_item():
    assert not Container().has("container")


def test_get_returns_set_item():
    c = Container()
    value = object()
    c.set("container", value)
    assert c.get("container") is value


def test_get_missing_item_raises_not_found():
    c = Container()
    with pytest.raises(NotFoundError) as ctx:
        c.get("missing")
    assert "'missing' not found" in str(ctx.value)


def test_not_found_is_a_key_error_and_container_error():
    with pytest.raises(KeyError):
        Container().get("missing")
    with pytest.raises(ContainerError):
        Container().get("missing")


def test_set_wraps_plain_values_in_value_builder():
    c = Container()
    c.set("container", object())
    assert isinstance(c._items["container"], ValueBuilder)  # noqa: SLF001


def test_set_keeps_builder_instances():
    c = Container()
    builder = SingletonBuilder(lambda _: object())
    c.set("container", builder)
    assert c._items["container"] is builder  # noqa: SLF001


def test_set_overwrites_silently():
    c = Container()
    c.set("key", 1)
    c.set("key", 2)
    assert c.get("key") == 2


def test_set_with_aliases_shares_value():
    c = Container()
    value = object()
    c.set("key", value, aliases=["a", "b"])
    assert c.get("a") is value
    assert c.get("b") is value


def test_set_accepts_single_alias_string():
    c = Container()
    c.set("key", 1, aliases="a")
    assert c.get("a") == 1


def test_class_ids_are_keyed_by_qualified_name():
    class Config: ...

    c = Container()
    config = Config()
    c.set(Config, config)

    assert c.has(f"{Config.__module__}.{Config.__qualname__}")
    assert c.get(Config) is config


def test_non_string_non_class_id_raises_type_error():
    with pytest.raises(TypeError):
        Container().set(42, "value")  # type: ignore[arg-type]


def test_dict_style_access():
    c = Container()
    c.set("key", "value")
    assert "key" in c
    assert "other" not in c
    assert c["key"] == "value"


def test_get_passes_container_into_builder():
    c = Container()
    c.set("foo", object())

    def build(container):
        return {"foo": container.get("foo")}

    c.singleton("service", build)
    assert c.get("service")["foo"] is c.get("foo")


def test_singleton_config_returns_same_object():
    c = Container()
    c.singleton("config", lambda _: {"env": "prod"})

    first = c.get("config")
    second = c.get("config")

    assert first == {"env": "prod"}
    assert first is second


def test_factory_returns_new_object_every_get():
    c = Container()
    c.factory("session", lambda _: object())
    assert c.get("session") is not c.get("session")


def test_alias_missing_id_raises_not_found():
    with pytest.raises(NotFoundError):
        Container().alias("alias", "item")


def test_alias_returns_item():
    c = Container()
    c.factory("item", lambda _: [])
    c.alias("alias", "item")
    assert c.get("alias") == []


def test_alias_shares_singleton_cache():
    c = Container()
    c.singleton("id", lambda _: object())
    c.alias(["a", "b"], "id")

    via_alias = c.get("a")
    assert c.get("id") is via_alias
    assert c.get("b") is via_alias


def test_set_alias_shares_singleton_cache():
    c = Container()
    c.singleton("id", lambda _: object(), aliases="a")
    assert c.get("a") is c.get("id")


class TestBind(unittest.TestCase):
    cont: Container

    def setUp(self):
        self.cont = Container()

    def test_bind_singleton_builds_once(self):
        class Service: ...

        self.cont.bind("service", Service)
        first = self.cont.get("service")

        assert isinstance(first, Service)
        assert self.cont.get("service") is first

    def test_bind_transient_builds_every_get(self):
        class Service: ...

        self.cont.bind("service", Service, lifetime=Lifetime.TRANSIENT)
        assert self.cont.get("service") is not self.cont.get("service")

    def test_bind_base_class_to_implementation(self):
        class Base: ...

        class Derived(Base): ...

        class Consumer:
            def __init__(self, dep: Base):
                self.dep = dep

        self.cont.bind(Base, Derived)
        consumer = self.cont.make(Consumer)

        assert type(consumer.dep) is Derived
        assert self.cont.make(Consumer).dep is consumer.dep

    def test_bind_non_subclass_raises_type_error(self):
        class Base: ...

        class Other: ...

        with pytest.raises(TypeError):
            self.cont.bind(Base, Other)

    def test_bind_autowires_implementation(self):
        class DB: ...

        class Repo:
            def __init__(self, db: DB):
                self.db = db

        db = DB()
        self.cont.set(DB, db)
        self.cont.bind("repo", Repo)

        assert self.cont.get("repo").db is db
