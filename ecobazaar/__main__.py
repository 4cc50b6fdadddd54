"""
EcoBazaar command-line client.

The session is kept in a JSON file (ECOBAZAAR_SESSION_FILE), so a login
survives between invocations the way a browser session survives reloads.

Usage:
    python -m ecobazaar login alice@example.com
    python -m ecobazaar cart-add 7 --quantity 2
    python -m ecobazaar wishlist-toggle 7 --trace
"""

import argparse
import asyncio
import getpass
import logging
import sys
from typing import Optional

from rich.logging import RichHandler

from .client import StorefrontClient
from .display import (
    ConsoleNavigator,
    cart_table,
    console,
    print_result,
    print_session,
    products_table,
    trace_table,
    wishlist_table,
)
from .shared.config import Settings, get_settings
from .shared.exceptions import EcobazaarError
from .shared.storage import FileStorage


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ecobazaar",
        description="EcoBazaar sustainable marketplace client",
    )
    parser.add_argument("--api-base", help="Backend base URL (default: ECOBAZAAR_API_BASE)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    login = sub.add_parser("login", help="Log in and persist the session")
    login.add_argument("email")
    login.add_argument("--password", help="Password (prompted if omitted)")

    register = sub.add_parser("register", help="Create an account")
    register.add_argument("email")
    register.add_argument("name")
    register.add_argument("--role", default="USER", help="USER or SELLER")
    register.add_argument("--password", help="Password (prompted if omitted)")

    sub.add_parser("logout", help="Forget the persisted session")
    sub.add_parser("whoami", help="Show the current session")

    products = sub.add_parser("products", help="Search the catalog")
    products.add_argument("keyword", nargs="?")
    products.add_argument("--category")
    products.add_argument("--featured", action="store_true")

    sub.add_parser("cart", help="Show the cart")
    cart_add = sub.add_parser("cart-add", help="Add a product to the cart")
    cart_add.add_argument("product_id")
    cart_add.add_argument("--quantity", "-q", type=int, default=1)
    cart_remove = sub.add_parser("cart-remove", help="Remove a cart item")
    cart_remove.add_argument("item_id")

    sub.add_parser("wishlist", help="Show the wishlist")
    toggle = sub.add_parser("wishlist-toggle", help="Add or remove a product from the wishlist")
    toggle.add_argument("product_id")
    toggle.add_argument("--trace", action="store_true", help="Show endpoint attempts")

    forgot = sub.add_parser("forgot-password", help="Request a password reset email")
    forgot.add_argument("email")
    reset = sub.add_parser("reset-password", help="Set a new password with a reset token")
    reset.add_argument("token")
    reset.add_argument("--password", help="New password (prompted if omitted)")

    return parser


def _password(value: Optional[str]) -> str:
    return value if value else getpass.getpass("Password: ")


async def run(args: argparse.Namespace, settings: Settings) -> int:
    storage = FileStorage(settings.session_file)
    async with StorefrontClient(settings, storage, ConsoleNavigator()) as client:
        await client.start()
        command = args.command

        if command == "login":
            result = await client.login(args.email, _password(args.password))
            print_result(result, "Logged in")
            if result.success:
                print_session(client.session.state)
            return 0 if result.success else 1

        if command == "register":
            profile = {
                "email": args.email,
                "name": args.name,
                "role": args.role.upper(),
                "password": _password(args.password),
            }
            result = await client.register(profile)
            print_result(result, "Account created")
            return 0 if result.success else 1

        if command == "logout":
            client.logout()
            console.print("[green]Logged out[/green]")
            return 0

        if command == "whoami":
            print_session(client.session.state)
            return 0

        if command == "products":
            if args.featured:
                found = await client.products.get_featured()
            else:
                found = await client.products.search(keyword=args.keyword, category=args.category)
            console.print(products_table(found))
            return 0

        if command == "forgot-password":
            result = await client.session.forgot_password(args.email)
            print_result(result, "Reset email sent")
            return 0 if result.success else 1

        if command == "reset-password":
            result = await client.session.reset_password(args.token, _password(args.password))
            print_result(result, "Password updated")
            return 0 if result.success else 1

        if not client.session.is_authenticated:
            console.print("[red]Error:[/red] Please login first")
            return 1

        if command == "cart":
            _print_cache_error(client.cart.error)
            console.print(cart_table(client.cart.cart))
            return 0

        if command == "cart-add":
            result = await client.cart.add_to_cart(args.product_id, args.quantity)
            print_result(result, "Added to cart")
            console.print(cart_table(client.cart.cart))
            return 0 if result.success else 1

        if command == "cart-remove":
            result = await client.cart.remove_from_cart(args.item_id)
            print_result(result, "Removed from cart")
            console.print(cart_table(client.cart.cart))
            return 0 if result.success else 1

        if command == "wishlist":
            _print_cache_error(client.wishlist.error)
            console.print(wishlist_table(client.wishlist.wishlist))
            return 0

        if command == "wishlist-toggle":
            was_listed = client.wishlist.contains(args.product_id)
            result = await client.wishlist.toggle(args.product_id)
            print_result(result, "Removed from wishlist" if was_listed else "Added to wishlist")
            if args.trace and client.wishlist.debug_trace:
                console.print(trace_table(client.wishlist.debug_trace))
            console.print(wishlist_table(client.wishlist.wishlist))
            return 0 if result.success else 1

    return 2


def _print_cache_error(error: Optional[str]) -> None:
    if error:
        console.print(f"[red]Error:[/red] {error}")


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    if args.api_base:
        settings = settings.model_copy(update={"api_base": args.api_base})

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    try:
        return asyncio.run(run(args, settings))
    except EcobazaarError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
