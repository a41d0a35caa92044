"""
declarative-options — unit tests for the Options capability

File: tests/unit/test_mixin.py

Purpose
- Validate class-level declaration, reader generation, inheritance isolation
  and the atomic construction sequence.

What this test file should cover
- In-body and post-hoc declarations.
- Parent/child/sibling registry isolation, including late declarations.
- Frozen options snapshot and caller-owned bag immutability.
- Failed construction binds nothing.

Functional requirements
- Offline only.
"""

from __future__ import annotations

import threading
from typing import Any

import pytest

from declarative_options import (
    InvalidOptionValueError,
    InvalidValueReason,
    OptionDeclarationError,
    Options,
    UnknownOptionError,
    option,
)


class User(Options):
    name = option(type=str, reader=True)
    admin = option(allow=(True, False), reader=True, default=False)


def test_in_body_declarations_register_in_order() -> None:
    assert User.option_definitions().names == ("name", "admin")


def test_readers_expose_bound_values() -> None:
    user = User(name="Piotr")

    assert user.name == "Piotr"
    assert user.admin is False
    assert dict(user.options) == {"name": "Piotr", "admin": False}


def test_bag_can_be_passed_positionally_and_overridden_by_keywords() -> None:
    user = User({"name": "Piotr", "admin": False}, admin=True)

    assert user.admin is True
    assert user.options["name"] == "Piotr"


def test_readers_are_read_only() -> None:
    user = User(name="Piotr")

    with pytest.raises(AttributeError):
        user.name = "Jane"  # type: ignore[misc]


def test_option_without_reader_has_no_accessor_but_is_in_snapshot() -> None:
    class Connection(Options):
        host = option(type=str, reader=True)
        password = option(type=str)

    connection = Connection(host="db", password="s3cr3t")

    assert not hasattr(connection, "password")
    assert "password" not in vars(Connection)
    assert connection.options["password"] == "s3cr3t"


def test_unset_undefaulted_reader_reads_none_and_is_not_in_snapshot() -> None:
    user = User()

    assert user.name is None
    assert "name" not in user.options
    assert user.options["admin"] is False


def test_options_snapshot_is_frozen() -> None:
    user = User(name="Piotr")

    with pytest.raises(TypeError):
        user.options["name"] = "Jane"  # type: ignore[index]
    with pytest.raises(AttributeError):
        user.options = {}  # type: ignore[misc]
    assert user.options["name"] == "Piotr"


def test_caller_bag_is_not_mutated() -> None:
    bag: dict[str, Any] = {"name": "Piotr"}

    User(bag)

    assert bag == {"name": "Piotr"}


def test_non_mapping_bag_is_rejected() -> None:
    with pytest.raises(TypeError, match="options must be a mapping"):
        User(["name", "Piotr"])  # type: ignore[arg-type]


def test_failed_validation_binds_nothing() -> None:
    created: list[User] = []

    class Tracked(User):
        def __init__(self, options: dict[str, Any] | None = None, /, **overrides: Any) -> None:
            created.append(self)
            super().__init__(options, **overrides)

    with pytest.raises(InvalidOptionValueError):
        Tracked(name=1)

    (instance,) = created
    assert "_name" not in vars(instance)
    assert "_admin" not in vars(instance)
    assert "_options" not in vars(instance)


def test_default_violating_its_own_constraint_fails_construction() -> None:
    class Broken(Options):
        level = option(type=int, default="high")

    with pytest.raises(InvalidOptionValueError) as excinfo:
        Broken()

    assert excinfo.value.reason is InvalidValueReason.TYPE_MISMATCH


def test_computed_default_is_called_once_with_the_instance() -> None:
    calls: list[object] = []

    def make_label(instance: object) -> str:
        calls.append(instance)
        return "generated"

    class Labelled(Options):
        label = option(type=str, reader=True, default=make_label)

    labelled = Labelled()
    Labelled(label="explicit")

    assert labelled.label == "generated"
    assert calls == [labelled]


def test_declare_option_after_class_creation() -> None:
    class Relation(Options):
        pass

    declared = Relation.declare_option(
        "schema", type=(dict, type(None)), reader=True, default=None
    )

    assert declared.name == "schema"
    assert Relation(schema={"id": int}).schema == {"id": int}
    assert Relation().schema is None


def test_declare_option_rejects_unknown_settings() -> None:
    class Relation(Options):
        pass

    with pytest.raises(OptionDeclarationError, match="unknown settings"):
        Relation.declare_option("schema", required=True)


@pytest.mark.parametrize(
    "reserved",
    ["options", "declare_option", "option_definitions", "_options", "_x", "__init__"],
)
def test_reserved_reader_names_are_rejected(reserved: str) -> None:
    class Relation(Options):
        pass

    with pytest.raises(OptionDeclarationError, match="reserved"):
        Relation.declare_option(reserved, reader=True)


def test_invalid_in_body_declaration_fails_at_class_creation() -> None:
    with pytest.raises(OptionDeclarationError):

        class Broken(Options):
            level = option(type="int")


def test_subclass_inherits_parent_options_and_readers() -> None:
    class Admin(User):
        level = option(type=int, reader=True, default=1)

    admin = Admin(name="Piotr", admin=True)

    assert Admin.option_definitions().names == ("name", "admin", "level")
    assert (admin.name, admin.admin, admin.level) == ("Piotr", True, 1)


def test_subclass_declarations_do_not_leak_to_parent_or_siblings() -> None:
    class Parent(Options):
        base = option(reader=True)

    class First(Parent):
        pass

    class Second(Parent):
        pass

    First.declare_option("extra", reader=True)

    assert "extra" in First.option_definitions()
    assert "extra" not in Parent.option_definitions()
    assert "extra" not in Second.option_definitions()
    assert First(extra=1).extra == 1
    with pytest.raises(UnknownOptionError):
        Parent(extra=1)
    with pytest.raises(UnknownOptionError):
        Second(extra=1)


def test_parent_declarations_after_subclassing_do_not_propagate() -> None:
    class Parent(Options):
        base = option()

    class Child(Parent):
        pass

    Parent.declare_option("late")

    assert "late" in Parent.option_definitions()
    assert "late" not in Child.option_definitions()
    with pytest.raises(UnknownOptionError):
        Child(late=True)


def test_subclass_can_override_parent_option() -> None:
    class Parent(Options):
        mode = option(type=str, allow=("fast", "safe"), reader=True, default="safe")

    class Child(Parent):
        mode = option(type=str, allow=("fast", "safe", "debug"), reader=True, default="debug")

    assert Child().mode == "debug"
    assert Parent().mode == "safe"
    with pytest.raises(InvalidOptionValueError):
        Parent(mode="debug")


def test_multiple_inheritance_merges_with_leftmost_base_winning() -> None:
    class Left(Options):
        shared = option(default="left", reader=True)
        left_only = option(default=1)

    class Right(Options):
        shared = option(default="right", reader=True)
        right_only = option(default=2)

    class Both(Left, Right):
        pass

    both = Both()

    assert set(Both.option_definitions().names) == {"shared", "left_only", "right_only"}
    assert both.shared == "left"
    assert both.options["right_only"] == 2


def test_subclass_constructor_forwards_the_bag() -> None:
    class Command(Options):
        result = option(allow=("one", "many"), reader=True, default="many")

        def __init__(self, relation: str, options: dict[str, Any] | None = None, /) -> None:
            self.relation = relation
            super().__init__(options)

    command = Command("users", {"result": "one"})

    assert command.relation == "users"
    assert command.result == "one"
    with pytest.raises(InvalidOptionValueError):
        Command("users", {"result": "some"})


def test_underscore_reader_cannot_shadow_backing_field() -> None:
    with pytest.raises(OptionDeclarationError, match="reserved"):

        class Shadowed(Options):
            x = option(reader=True)
            _x = option(reader=True)


def test_underscore_option_without_reader_is_allowed() -> None:
    class Internal(Options):
        _token = option(type=str, default="t")

    assert Internal().options["_token"] == "t"


def test_diamond_inheritance_follows_the_mro() -> None:
    class Base(Options):
        mode = option(reader=True, default="base")

    class Plain(Base):
        pass

    class Tuned(Base):
        mode = option(reader=True, default="tuned")

    class Combined(Plain, Tuned):
        pass

    combined = Combined()

    assert [klass.__name__ for klass in Combined.__mro__[:4]] == [
        "Combined",
        "Plain",
        "Tuned",
        "Base",
    ]
    assert combined.mode == "tuned"
    assert combined.options == {"mode": "tuned"}


def test_diamond_ignores_parent_declarations_added_after_subclassing() -> None:
    class Base(Options):
        mode = option(default="base")

    class Plain(Base):
        pass

    class Tuned(Base):
        pass

    Base.declare_option("late")

    class Combined(Plain, Tuned):
        pass

    assert "late" not in Combined.option_definitions()
    with pytest.raises(UnknownOptionError):
        Combined(late=True)


def test_concurrent_declarations_are_all_registered() -> None:
    class Shared(Options):
        pass

    count = 32
    barrier = threading.Barrier(count)
    errors: list[Exception] = []

    def declare(index: int) -> None:
        try:
            barrier.wait()
            Shared.declare_option(f"opt_{index}", reader=True, default=index)
        except Exception as exc:
            errors.append(exc)

    threads = [threading.Thread(target=declare, args=(index,)) for index in range(count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    assert len(Shared.option_definitions()) == count
    shared = Shared()
    assert all(getattr(shared, f"opt_{index}") == index for index in range(count))
