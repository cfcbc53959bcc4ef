"""End-to-end journeys: define a model, build, mutate, save, and sync between registries."""

import pytest

from dospanes import Attribute, InMemoryTransport, ModelDescription, ModelRegistry


@pytest.fixture
def users(registry):
    return registry.define(
        "User",
        {
            "attributes": {
                "id": Attribute.number,
                "first_name": Attribute.text,
                "last_name": Attribute.text,
                "full_name": Attribute.computed(lambda self: self.first_name + " " + self.last_name),
            },
        },
    )


class TestUserModel:
    def test_build_increases_store_length_by_one(self, users):
        current_length = len(users.store)
        users.build()
        assert len(users.store) == current_length + 1

    def test_with_attributes(self, users):
        user = users.build({"first_name": "Tyrion", "last_name": "Lannister"})

        assert user.first_name == "Tyrion"
        assert user.last_name == "Lannister"
        assert user.full_name == "Tyrion Lannister"

        user.first_name = "Cersei"
        assert user.full_name == "Cersei Lannister"

    def test_without_attributes(self, users):
        user = users.build()

        assert user.first_name == ""
        assert user.last_name == ""
        assert user.full_name == " "

        user.last_name = "Jose"
        assert user.last_name == "Jose"

    @pytest.mark.asyncio
    async def test_dirty_lifecycle(self, users):
        user = users.build({"first_name": "Lara"})
        assert user.is_dirty() is False

        user.first_name = "Sara"
        assert user.is_dirty() is True

        attributes = await user.save()
        assert user.is_dirty() is False
        assert attributes == user.attributes


@pytest.mark.asyncio
async def test_changes_flow_from_one_registry_into_another(settings):
    """A model's registry pushes saved changes to another registry acting as its target."""
    schema = ModelDescription(
        attributes={"id": Attribute.number, "title": Attribute.text},
        transport=InMemoryTransport(),
    )
    upstream = ModelRegistry(settings=settings)
    downstream = ModelRegistry(settings=settings)
    upstream_posts = upstream.define("Post", schema)
    downstream_posts = downstream.define("Post", schema)

    upstream_posts.add_sync_target(downstream.sync)

    mirror = downstream_posts.build(id=7, title="draft")
    post = upstream_posts.build(id=7, title="draft")
    post.title = "The Long Night"

    dirty = [p.as_dict(include_computed=False) for p in upstream_posts.store.dirty()]
    for p in list(upstream_posts.store.dirty()):
        await p.save()
    results = await upstream.sync.notify_sync_targets({"Post": {"items": dirty}})

    assert mirror.title == "The Long Night"
    assert mirror.is_dirty() is False
    assert results == [{"Post": {"items": dirty}}]
    assert len(downstream_posts.store) == 1
