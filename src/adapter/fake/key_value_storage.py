"""In-memory implementation of KeyValueStorage for testing."""


class FakeKeyValueStorage:
    def __init__(self, items: dict[str, str] | None = None):
        self.items: dict[str, str] = dict(items or {})
        self.fail_writes = False

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise OSError("No space left on device")
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)
