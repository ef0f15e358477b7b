import pytest

from core.errors import ValidationError
from tools import get_record as get_record_tool


class FakeStore:
    def __init__(self, out):
        self._out = out
        self.calls = []

    async def get(self, record_id: str):
        self.calls.append(record_id)
        return self._out


@pytest.mark.asyncio
async def test_get_record_tool_validates_inputs(dummy_mcp):
    get_record_tool.register(dummy_mcp, store_factory=lambda domain: FakeStore({}))
    fn = dummy_mcp.tools["get_record"]

    with pytest.raises(ValidationError):
        await fn(domain="products", record_id="  ")

    with pytest.raises(ValidationError):
        await fn(domain="gift_boxes", record_id="g1")


@pytest.mark.asyncio
async def test_get_record_tool_calls_factory_and_store(dummy_mcp):
    fake_store = FakeStore({"_id": "c1"})
    captured = {}

    def fake_factory(domain):
        captured["domain"] = domain
        return fake_store

    get_record_tool.register(dummy_mcp, store_factory=fake_factory)
    fn = dummy_mcp.tools["get_record"]

    out = await fn(domain="customers", record_id="c1")

    assert out == {"_id": "c1"}
    assert captured["domain"] == "customers"
    assert fake_store.calls == ["c1"]
