from __future__ import annotations

import asyncio

import pytest

from services.storefront.app.cart.store import CartStore
from services.storefront.app.cart.sync import CartMode, CartSynchronizer, MutationState
from services.storefront.app.errors import (
    InvalidQuantityError,
    StorefrontAuthError,
    StorefrontNetworkError,
)
from services.storefront.app.session import SessionContext, TokenHolder
from services.storefront.tests.fakes import MemoryCartRepository


def _synchronizer(fake_api, token: str | None = None, saved=None):
    tokens = TokenHolder(token)
    repository = MemoryCartRepository(saved)
    sync = CartSynchronizer(SessionContext(tokens), CartStore(), fake_api, repository)
    return sync, tokens, repository


async def _settle() -> None:
    for _ in range(5):
        await asyncio.sleep(0)


def test_start_anonymous_restores_saved_cart(fake_api, make_item) -> None:
    sync, _, _ = _synchronizer(fake_api, saved=[make_item(1), make_item(2)])
    asyncio.run(sync.start())

    assert sync.mode is CartMode.ANONYMOUS
    assert [i.product_id for i in sync.items()] == [1, 2]
    assert fake_api.calls == []


def test_anonymous_mutations_stay_local(fake_api, make_item) -> None:
    sync, _, repository = _synchronizer(fake_api)

    async def scenario() -> None:
        await sync.start()
        await sync.add(make_item(1))
        await sync.add(make_item(2), 2)
        await sync.set_quantity(2, 5)
        await sync.remove(1)

    asyncio.run(scenario())

    assert fake_api.calls == []
    assert [(i.product_id, i.quantity) for i in sync.items()] == [(2, 5)]
    assert [(i.product_id, i.quantity) for i in repository.items] == [(2, 5)]


def test_login_replaces_anonymous_cart_with_server_cart(fake_api, make_item) -> None:
    saved = [make_item(1), make_item(2), make_item(3)]
    fake_api.cart = [make_item(7, quantity=2)]
    sync, tokens, repository = _synchronizer(fake_api, saved=saved)

    async def scenario() -> None:
        await sync.start()
        assert len(sync.items()) == 3
        tokens.token = "jwt-123"
        await sync.apply_session()

    asyncio.run(scenario())

    assert sync.mode is CartMode.AUTHENTICATED
    assert [(i.product_id, i.quantity) for i in sync.items()] == [(7, 2)]
    assert repository.items == []
    assert fake_api.calls == [("get_cart",)]


def test_logout_clears_without_restoring_anonymous_cart(fake_api, make_item) -> None:
    fake_api.cart = [make_item(7)]
    sync, tokens, repository = _synchronizer(fake_api, token="jwt-123")
    repository.items = [make_item(1)]

    async def scenario() -> None:
        await sync.start()
        tokens.token = None
        await sync.apply_session()

    asyncio.run(scenario())

    assert sync.mode is CartMode.ANONYMOUS
    assert sync.items() == []


def test_logout_during_server_add_does_not_leak_into_anonymous_cart(fake_api, make_item) -> None:
    sync, tokens, repository = _synchronizer(fake_api, token="jwt-123")

    async def scenario() -> None:
        await sync.start()
        fake_api.gate = asyncio.Event()
        adding = asyncio.create_task(sync.add(make_item(5), 2))
        await _settle()
        assert fake_api.calls[-1] == ("add", 5, 2)

        tokens.token = None
        await sync.apply_session()
        fake_api.gate.set()
        await adding

        # The next anonymous change must not carry the server line along.
        await sync.add(make_item(1))

    asyncio.run(scenario())

    assert sync.mode is CartMode.ANONYMOUS
    assert [(i.product_id, i.quantity) for i in sync.items()] == [(1, 1)]
    assert [i.product_id for i in repository.items] == [1]


def test_authenticated_mutation_calls_server_then_applies(fake_api, make_item) -> None:
    fake_api.cart = [make_item(1, quantity=1)]
    sync, _, repository = _synchronizer(fake_api, token="jwt-123")

    async def scenario() -> None:
        await sync.start()
        await sync.add(make_item(2), 3)
        await sync.set_quantity(1, 4)
        await sync.remove(2)
        await sync.clear()

    asyncio.run(scenario())

    assert fake_api.calls == [
        ("get_cart",),
        ("add", 2, 3),
        ("update", 1, 4),
        ("remove", 2),
        ("clear",),
    ]
    assert sync.items() == []
    assert repository.saves == 0


@pytest.mark.parametrize("error", [StorefrontNetworkError("timeout"), StorefrontAuthError()])
def test_failed_mutation_leaves_store_unchanged(fake_api, make_item, error) -> None:
    fake_api.cart = [make_item(1, quantity=2)]
    sync, _, _ = _synchronizer(fake_api, token="jwt-123")

    async def scenario() -> None:
        await sync.start()
        fake_api.fail_with = error
        with pytest.raises(type(error)):
            await sync.set_quantity(1, 9)
        with pytest.raises(type(error)):
            await sync.add(make_item(2))

    asyncio.run(scenario())

    assert [(i.product_id, i.quantity) for i in sync.items()] == [(1, 2)]
    # Reported once, never retried.
    assert fake_api.calls.count(("update", 1, 9)) == 1
    assert sync.mutation_state(1) is MutationState.IDLE


def test_invalid_quantity_is_rejected_before_any_network_call(fake_api, make_item) -> None:
    fake_api.cart = [make_item(1)]
    sync, _, _ = _synchronizer(fake_api, token="jwt-123")

    async def scenario() -> None:
        await sync.start()
        with pytest.raises(InvalidQuantityError):
            await sync.set_quantity(1, 0)

    asyncio.run(scenario())
    assert fake_api.calls == [("get_cart",)]


def test_same_product_mutations_are_serialized(fake_api, make_item) -> None:
    fake_api.cart = [make_item(1)]
    sync, _, _ = _synchronizer(fake_api, token="jwt-123")

    async def scenario() -> None:
        await sync.start()
        fake_api.gate = asyncio.Event()

        first = asyncio.create_task(sync.set_quantity(1, 3))
        await _settle()
        second = asyncio.create_task(sync.set_quantity(1, 5))
        await _settle()

        assert fake_api.calls[1:] == [("update", 1, 3)]
        assert sync.mutation_state(1) is MutationState.PENDING

        fake_api.gate.set()
        await asyncio.gather(first, second)

    asyncio.run(scenario())

    assert fake_api.calls[1:] == [("update", 1, 3), ("update", 1, 5)]
    assert sync.store.get(1).quantity == 5
    assert sync.mutation_state(1) is MutationState.IDLE


def test_different_products_do_not_wait_for_each_other(fake_api, make_item) -> None:
    fake_api.cart = [make_item(1), make_item(2)]
    sync, _, _ = _synchronizer(fake_api, token="jwt-123")

    async def scenario() -> None:
        await sync.start()
        fake_api.gate = asyncio.Event()

        first = asyncio.create_task(sync.set_quantity(1, 3))
        second = asyncio.create_task(sync.set_quantity(2, 7))
        await _settle()

        assert set(fake_api.calls[1:]) == {("update", 1, 3), ("update", 2, 7)}

        fake_api.gate.set()
        await asyncio.gather(first, second)

    asyncio.run(scenario())

    assert [(i.product_id, i.quantity) for i in sync.items()] == [(1, 3), (2, 7)]
