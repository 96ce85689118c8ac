"""Object Membrane — additive merges over mapping-shaped values.

Tests cover:
    - preserve (default): base keys win, callback adds missing keys
    - overwrite: callback result returned as-is
    - passthrough flag and strategy validation
    - nullish resolution of None base, ambient threading
    - Mapping-only bases: dict subclasses keep their type, attribute objects rejected
"""

from collections import OrderedDict
from dataclasses import dataclass
from unittest.mock import AsyncMock

import pytest

from membrane.core.domain_types import ObjectMergeStrategy, Shape
from membrane.core.errors import InvalidStrategyError, ShapeMismatchError
from membrane.services.object_membranes import ObjectMembrane


@pytest.mark.asyncio
async def test_preserve_keeps_base_values_and_adds_new_keys():
    callback = AsyncMock(return_value={"name": "Mallory", "role": "admin"})
    membrane = ObjectMembrane(callback)

    result = await membrane.merge({"name": "Alice", "age": 30})

    assert result == {"name": "Alice", "age": 30, "role": "admin"}


@pytest.mark.asyncio
async def test_overwrite_returns_callback_result():
    permeate = {"name": "only-name"}
    membrane = ObjectMembrane(AsyncMock(return_value=permeate), "overwrite")

    result = await membrane.merge({"name": "original", "age": 30})

    assert result is permeate


@pytest.mark.asyncio
async def test_callback_receives_resolved_base_and_ambient():
    callback = AsyncMock(return_value={})
    ambient = {"request_id": "r-1"}
    membrane = ObjectMembrane(callback)

    await membrane.merge(None, ambient)

    callback.assert_awaited_once_with({}, ambient)


@pytest.mark.asyncio
async def test_ambient_defaults_to_none():
    callback = AsyncMock(return_value={})
    base = {"a": 1}

    await ObjectMembrane(callback).merge(base)

    callback.assert_awaited_once_with(base, None)


@pytest.mark.asyncio
async def test_callback_error_propagates_verbatim():
    boom = ValueError("lookup failed")
    membrane = ObjectMembrane(AsyncMock(side_effect=boom))

    with pytest.raises(ValueError) as exc_info:
        await membrane.merge({})

    assert exc_info.value is boom


@pytest.mark.asyncio
async def test_preserve_rejects_non_mapping_callback_result():
    membrane = ObjectMembrane(AsyncMock(return_value=["x"]))

    with pytest.raises(ShapeMismatchError):
        await membrane.merge({})


def test_nullish_returns_fresh_dict_each_time():
    membrane = ObjectMembrane(AsyncMock())
    first, second = membrane.nullish(None), membrane.nullish(None)
    assert first == {} and second == {}
    assert first is not second


def test_nullish_leaves_values_unchanged():
    base = {"a": 1}
    assert ObjectMembrane(AsyncMock()).nullish(base) is base


def test_shape_strategy_and_passthrough_flag():
    membrane = ObjectMembrane(AsyncMock())
    assert membrane.shape == Shape.OBJECT
    assert membrane.strategy is ObjectMergeStrategy.PRESERVE
    assert membrane.passes_through is False
    assert ObjectMembrane(AsyncMock(), "passthrough").passes_through is True


def test_unknown_strategy_rejected_at_construction():
    with pytest.raises(InvalidStrategyError):
        ObjectMembrane(AsyncMock(), "append")


@pytest.mark.asyncio
async def test_attribute_object_base_is_rejected_under_preserve():
    @dataclass
    class User:
        name: str

    membrane = ObjectMembrane(AsyncMock(return_value={"role": "admin"}))

    with pytest.raises(ShapeMismatchError) as exc_info:
        await membrane.merge(User(name="Alice"))

    assert exc_info.value.role == "base"
    assert exc_info.value.context.debug_info["actual_type"] == "User"


@pytest.mark.asyncio
async def test_dict_subclass_base_keeps_its_type():
    base = OrderedDict(name="Alice")
    result = await ObjectMembrane(AsyncMock(return_value={"role": "admin"})).merge(base)
    assert type(result) is OrderedDict
    assert result == {"name": "Alice", "role": "admin"}
