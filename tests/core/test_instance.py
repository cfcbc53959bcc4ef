"""Tests for generated instance classes, build(), and dirty tracking.

Critical Invariants:
- Stored attributes are seeded from input or defaults, computed ones never stored
- Computed attributes are recomputed on every read
- clean → dirty only via stored setters, dirty → clean only via successful save
- build() is the only way to grow a store
"""

import asyncio

import pytest
from hypothesis import given
from hypothesis import strategies as st

from dospanes import Attribute, InMemoryTransport, ModelDescription, ModelRegistry
from dospanes.core.model.instance import build_instance_class, validate_attribute_name

# Build


def test_build_without_input_uses_defaults(user_model):
    user = user_model.build()

    assert user.first_name == ""
    assert user.last_name == ""
    assert user.full_name == " "
    assert user.id == 0


def test_build_with_input_seeds_stored_attributes(user_model):
    user = user_model.build({"first_name": "Tyrion", "last_name": "Lannister"})

    assert user.first_name == "Tyrion"
    assert user.last_name == "Lannister"
    assert user.full_name == "Tyrion Lannister"


def test_build_keyword_overrides_layer_over_mapping(user_model):
    user = user_model.build({"first_name": "Jon", "last_name": "Snow"}, last_name="Targaryen")

    assert user.full_name == "Jon Targaryen"


@pytest.mark.parametrize("bad_input", [None, 42, "Tyrion", ["first_name"], object()])
def test_build_normalizes_non_mapping_input(user_model, bad_input):
    """Non-mapping input is silently treated as empty."""
    user = user_model.build(bad_input)

    assert dict(user.attributes) == {"id": 0, "first_name": "", "last_name": ""}


def test_computed_and_unknown_keys_are_never_stored(user_model):
    user = user_model.build({"first_name": "A", "full_name": "ignored", "age": 3})

    assert "full_name" not in user.attributes
    assert "age" not in user.attributes
    assert user.full_name == "A "


def test_mutable_defaults_are_not_shared():
    registry = ModelRegistry()
    Bag = registry.define("Bag", {"attributes": {"items": Attribute.stored([])}})

    a = Bag.build()
    b = Bag.build()
    a.items.append("sword")

    assert b.items == []


def test_build_appends_to_store_in_creation_order(user_model):
    first = user_model.build()
    second = user_model.build()

    assert list(user_model.store) == [first, second]
    assert user_model.store[-1] is second


@given(batch=st.lists(st.dictionaries(st.sampled_from(["id", "first_name", "x"]), st.integers())))
def test_store_grows_by_one_per_build(batch):
    """len(store) increases by exactly one per build() call."""
    registry = ModelRegistry()
    model = registry.define("Counter", {"attributes": {"id": Attribute.number, "first_name": Attribute.text}})

    for i, raw in enumerate(batch, start=1):
        instance = model.build(raw)
        assert len(model.store) == i
        assert set(instance.attributes) == {"id", "first_name"}
        for key in ("id", "first_name"):
            if key in raw:
                assert instance.attributes[key] == raw[key]


# Accessors


def test_computed_attribute_tracks_stored_writes(user_model):
    """Changing a stored attribute changes computed attributes on the next read."""
    user = user_model.build({"first_name": "Tyrion", "last_name": "Lannister"})

    user.first_name = "Cersei"

    assert user.full_name == "Cersei Lannister"


def test_computed_attribute_cannot_be_set(user_model):
    user = user_model.build()

    with pytest.raises(AttributeError):
        user.full_name = "Nope"


def test_unknown_attribute_cannot_be_set(user_model):
    user = user_model.build()

    with pytest.raises(AttributeError):
        user.nickname = "Imp"


def test_attributes_view_is_read_only(user_model):
    user = user_model.build()

    with pytest.raises(TypeError):
        user.attributes["first_name"] = "x"  # type: ignore[index]


def test_attribute_introspection(user_model):
    user = user_model.build({"first_name": "Arya", "last_name": "Stark", "id": 7})

    assert user.attribute_names() == ("id", "first_name", "last_name", "full_name")
    assert user.as_dict() == {
        "id": 7,
        "first_name": "Arya",
        "last_name": "Stark",
        "full_name": "Arya Stark",
    }
    assert user.as_dict(include_computed=False) == {"id": 7, "first_name": "Arya", "last_name": "Stark"}


def test_instance_class_belongs_to_definition(user_model):
    user = user_model.build()

    assert type(user) is user_model.instance_class
    assert user.definition is user_model
    assert type(user).__name__ == "User"


@pytest.mark.parametrize("name", ["save", "attributes", "is_dirty", "not valid", "class", "1st"])
def test_invalid_attribute_names_rejected(name):
    with pytest.raises(ValueError):
        validate_attribute_name(name)


def test_build_instance_class_rejects_reserved_names():
    with pytest.raises(ValueError, match="collides"):
        build_instance_class("Bad", {"save": Attribute.text})


# Dirty tracking


def test_clean_after_build(user_model):
    assert user_model.build({"first_name": "Lara"}).is_dirty() is False


def test_dirty_after_stored_write(user_model):
    user = user_model.build({"first_name": "Lara"})

    user.first_name = "Sara"

    assert user.is_dirty() is True


def test_reading_never_dirties(user_model):
    user = user_model.build()

    _ = user.first_name, user.full_name, user.is_dirty(), user.as_dict()

    assert user.is_dirty() is False


@pytest.mark.asyncio
async def test_save_resets_dirty_and_returns_attributes(user_model):
    user = user_model.build({"first_name": "Lara"})
    user.first_name = "Sara"

    saved = await user.save()

    assert user.is_dirty() is False
    assert saved == user.attributes
    assert saved["first_name"] == "Sara"


@pytest.mark.asyncio
async def test_save_hands_snapshot_to_transport(registry):
    transport = InMemoryTransport()
    Post = registry.define(
        "Post",
        ModelDescription(attributes={"title": Attribute.text}, resource_path="/posts", transport=transport),
    )
    post = Post.build(title="Winter is coming")

    await post.save()

    assert transport.saved("Post") == [{"title": "Winter is coming"}]
    assert transport.records[0].resource_path == "/posts"


@pytest.mark.asyncio
async def test_failed_save_keeps_instance_dirty(registry):
    transport = InMemoryTransport(fail_with=ConnectionError("offline"))
    Post = registry.define("Post", ModelDescription(attributes={"title": Attribute.text}, transport=transport))
    post = Post.build()
    post.title = "Draft"

    with pytest.raises(ConnectionError, match="offline"):
        await post.save()

    assert post.is_dirty() is True


@pytest.mark.asyncio
async def test_write_during_save_keeps_instance_dirty(registry):
    """A write landing while the transport is awaited is not lost to the dirty reset."""
    release = asyncio.Event()

    class SlowTransport:
        async def persist(self, model_name, attributes, resource_path):
            await release.wait()

    Post = registry.define("Post", ModelDescription(attributes={"title": Attribute.text}, transport=SlowTransport()))
    post = Post.build()
    post.title = "First"

    saving = asyncio.ensure_future(post.save())
    await asyncio.sleep(0)
    post.title = "Second"
    release.set()
    snapshot = await saving

    assert snapshot["title"] == "First"
    assert post.is_dirty() is True
