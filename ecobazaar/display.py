"""Rich terminal rendering for the command-line client."""

from typing import Iterable, Optional, Union

from rich.console import Console
from rich.table import Table

from .modules.auth.models import SessionState
from .modules.cart.models import Cart
from .modules.catalog.models import Product
from .modules.wishlist.endpoints import CandidateAttempt, CandidateStatus
from .modules.wishlist.models import BareEntry, ProductEntry
from .shared.models import ActionResult

console = Console()


class ConsoleNavigator:
    """Navigator for a terminal: there is no page to leave, only a hint to print."""

    def __init__(self, current_path: str = "/account"):
        self._current_path = current_path

    @property
    def current_path(self) -> str:
        return self._current_path

    def navigate(self, path: str) -> None:
        self._current_path = path
        console.print("[yellow]Your session has expired. Run `ecobazaar login` again.[/yellow]")


def format_price(value: Optional[float]) -> str:
    return "-" if value is None else f"{value:,.2f}"


def print_result(result: ActionResult, success_message: str) -> None:
    if result.success:
        console.print(f"[green]{success_message}[/green]")
    else:
        console.print(f"[red]Error:[/red] {result.error}")


def print_session(state: SessionState) -> None:
    if not state.is_authenticated or state.user is None:
        console.print("[dim]Not logged in[/dim]")
        return
    user = state.user
    name = getattr(user, "name", None) or getattr(user, "email", None) or user.id
    console.print(f"[bold]{name}[/bold] (id {user.id}, role {user.role.value})")


def products_table(products: Iterable[Product], title: str = "Products") -> Table:
    table = Table(title=title)
    table.add_column("ID", justify="right")
    table.add_column("Name")
    table.add_column("Price", justify="right")
    table.add_column("CO2e (kg)", justify="right")
    table.add_column("Eco")
    for product in products:
        table.add_row(
            str(product.id),
            product.name or "",
            format_price(product.price),
            format_price(product.carbon_footprint),
            product.eco_rating or "",
        )
    return table


def cart_table(cart: Optional[Cart]) -> Table:
    table = Table(title="Cart")
    table.add_column("Item", justify="right")
    table.add_column("Product")
    table.add_column("Qty", justify="right")
    table.add_column("Price", justify="right")
    if cart is None:
        return table
    for item in cart.items:
        name = item.product.name if item.product and item.product.name else str(item.product_id)
        price = item.product.price if item.product else None
        table.add_row(str(item.item_id), name, str(item.quantity), format_price(price))
    if cart.total_price is not None:
        table.caption = f"Total: {format_price(cart.total_price)}"
    return table


def wishlist_table(entries: Iterable[Union[BareEntry, ProductEntry]]) -> Table:
    table = Table(title="Wishlist")
    table.add_column("Entry", justify="right")
    table.add_column("Product", justify="right")
    table.add_column("Name")
    table.add_column("Price", justify="right")
    for entry in entries:
        if isinstance(entry, ProductEntry):
            name, price = entry.product.name or "", entry.product.price
        else:
            name, price = "[dim]unknown[/dim]", None
        table.add_row(str(entry.entry_id or "-"), str(entry.product_id), name, format_price(price))
    return table


_STATUS_STYLE = {
    CandidateStatus.SUCCEEDED: "green",
    CandidateStatus.FAILED: "red",
    CandidateStatus.TRYING: "yellow",
    CandidateStatus.NOT_TRIED: "dim",
}


def trace_table(attempts: Iterable[CandidateAttempt]) -> Table:
    table = Table(title="Endpoint attempts")
    table.add_column("Candidate")
    table.add_column("Request")
    table.add_column("Outcome")
    for attempt in attempts:
        style = _STATUS_STYLE[attempt.status]
        outcome = attempt.status.value
        if attempt.http_status:
            outcome += f" ({attempt.http_status})"
        table.add_row(attempt.candidate, attempt.request.describe(), f"[{style}]{outcome}[/{style}]")
    return table
