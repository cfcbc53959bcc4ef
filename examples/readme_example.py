import asyncio

from dospanes import Attribute, InMemoryTransport, ModelDescription, ModelRegistry


class PrintingTarget:
    """Sync target printing every batch it receives."""

    async def sync(self, batch):
        for model_name, change_set in batch.items():
            for item in change_set.get("items", []):
                print(f"-> {model_name} {item}")
        return batch


def full_name(user) -> str:
    return f"{user.first_name} {user.last_name}"


async def main() -> None:
    registry = ModelRegistry()
    transport = InMemoryTransport()

    User = registry.define(
        "User",
        ModelDescription(
            attributes={
                "id": Attribute.number,
                "first_name": Attribute.text,
                "last_name": Attribute.text,
                "coins": Attribute.number,
                "full_name": Attribute.computed(full_name),
            },
            resource_path="/users",
            transport=transport,
        ),
    )
    User.add_sync_target(PrintingTarget())

    tyrion = User.build(id=1, first_name="Tyrion", last_name="Lannister")
    User.build(id=2, first_name="Jon", last_name="Snow")
    print(f"{tyrion.full_name} built, dirty={tyrion.is_dirty()}")

    tyrion.coins = 1000
    print(f"{tyrion.full_name} paid, dirty={tyrion.is_dirty()}")

    # Save every dirty instance, then tell targets what changed
    changed = [user.as_dict(include_computed=False) for user in User.store.dirty()]
    for user in list(User.store.dirty()):
        await user.save()
    await registry.sync.notify_sync_targets({"User": {"items": changed}})

    # A remote source patches Jon
    await registry.sync.sync({"User": {"items": [{"id": 2, "last_name": "Targaryen"}]}})
    print(f"Store: {[user.full_name for user in User.store]}")
    print(f"Persisted: {transport.saved('User')}")


if __name__ == "__main__":
    asyncio.run(main())
