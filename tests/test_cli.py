"""Tests for the command-line client."""

import json

import pytest

import ecobazaar.__main__ as cli
from ecobazaar.client import StorefrontClient
from ecobazaar.shared.storage import FileStorage


@pytest.fixture
def run_cli(monkeypatch, settings, backend):
    """Run a CLI command against the fake backend."""

    def factory(client_settings, storage, navigator):
        return StorefrontClient(client_settings, storage, navigator, backend.transport)

    monkeypatch.setattr(cli, "StorefrontClient", factory)

    async def run(*argv: str) -> int:
        args = cli.build_parser().parse_args(list(argv))
        return await cli.run(args, settings)

    return run


class TestParser:
    def test_cart_add_arguments(self):
        args = cli.build_parser().parse_args(["cart-add", "7", "-q", "3"])
        assert args.command == "cart-add"
        assert args.product_id == "7"
        assert args.quantity == 3

    def test_command_required(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args([])


class TestCommands:
    @pytest.mark.asyncio
    async def test_login_persists_to_session_file(self, run_cli, backend, settings):
        backend.on("POST", "/auth/login", (200, {"token": "abc", "user": {"id": 1}}))

        code = await run_cli("login", "a@x.com", "--password", "pw")

        assert code == 0
        stored = json.loads(settings.session_file.read_text())
        assert stored[settings.token_storage_key] == "abc"

    @pytest.mark.asyncio
    async def test_cart_requires_login(self, run_cli, backend):
        assert await run_cli("cart") == 1
        assert backend.requests == []

    @pytest.mark.asyncio
    async def test_wishlist_toggle_uses_saved_session(self, run_cli, backend, settings):
        storage = FileStorage(settings.session_file)
        storage.set_item(settings.token_storage_key, "t1")
        storage.set_item(settings.user_storage_key, json.dumps({"id": 1}))
        backend.on("GET", "/cart/1", (200, {"items": []}))
        backend.on("GET", "/wishlist/1", (200, []), (200, [{"id": 1, "productId": 7}]))
        backend.on("POST", "/wishlist/1", (200, None))

        code = await run_cli("wishlist-toggle", "7", "--trace")

        assert code == 0
        assert len(backend.calls("POST", "/wishlist/1")) == 1

    @pytest.mark.asyncio
    async def test_logout_empties_session_file(self, run_cli, settings):
        storage = FileStorage(settings.session_file)
        storage.set_item(settings.token_storage_key, "t1")
        storage.set_item(settings.user_storage_key, json.dumps({"id": 1}))

        assert await run_cli("logout") == 0
        assert json.loads(settings.session_file.read_text()) == {}
