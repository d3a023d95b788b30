# cli.py - interactive inventory console
import os
import sys
from datetime import datetime
from typing import List, Dict, Any, Optional

import requests
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import IntPrompt, Confirm, Prompt
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich import box

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle

from sdk.inventory_client import InventoryClient

console = Console()
c = InventoryClient(base_url=os.environ.get("INVENTORY_API_URL", "http://127.0.0.1:5000/api"))

# Global state for status messages and caching
status_message = "Ready"
product_cache: List[Dict[str, Any]] = []
customer_cache: List[Dict[str, Any]] = []

custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})


# ---------------------------
# Display helpers
# ---------------------------
def show_products(products: List[Dict[str, Any]]):
    if not products:
        console.print("[italic yellow]No products found[/italic yellow]")
        return

    table = Table(
        title="📦 Products",
        box=box.ROUNDED,
        header_style="bold cyan",
        title_style="bold magenta",
        show_lines=True
    )
    table.add_column("ID", style="dim", width=8)
    table.add_column("Name", style="bold", width=20)
    table.add_column("Category", width=15)
    table.add_column("Price", justify="right", width=10)
    table.add_column("Qty", justify="right", width=8)
    table.add_column("Description", width=30)

    for p in products:
        price = p.get("price")
        qty = p.get("quantity", 0)
        qty_style = "red" if isinstance(qty, int) and qty <= 0 else "green"
        table.add_row(
            str(p.get("id", "N/A")),
            p.get("name") or "N/A",
            p.get("category") or "-",
            f"${price:.2f}" if isinstance(price, (int, float)) else "N/A",
            f"[{qty_style}]{qty}[/{qty_style}]",
            p.get("description") or ""
        )
    console.print(table)


def show_customers(customers: List[Dict[str, Any]]):
    if not customers:
        console.print("[italic yellow]No customers found[/italic yellow]")
        return

    table = Table(
        title="👥 Customers",
        box=box.ROUNDED,
        header_style="bold blue",
        title_style="bold blue",
        show_lines=True
    )
    table.add_column("ID", style="dim", width=8)
    table.add_column("Name", style="bold", width=20)
    table.add_column("Email", width=28)
    table.add_column("Phone", width=16)

    for cu in customers:
        table.add_row(
            str(cu.get("id", "N/A")),
            cu.get("name") or "N/A",
            cu.get("email") or "-",
            cu.get("phone") or "-"
        )
    console.print(table)


def show_transactions(transactions: List[Dict[str, Any]]):
    if not transactions:
        console.print("[italic yellow]No transactions recorded[/italic yellow]")
        return

    names = {p.get("id"): p.get("name") for p in product_cache}
    table = Table(
        title="🧾 Transaction log",
        box=box.ROUNDED,
        header_style="bold yellow",
        title_style="bold yellow",
        show_lines=True
    )
    table.add_column("ID", style="dim", width=8)
    table.add_column("Product", width=24)
    table.add_column("Customer", width=10)
    table.add_column("Type", width=8)
    table.add_column("Qty", justify="right", width=8)
    table.add_column("Timestamp", width=26)

    for t in transactions:
        pid = t.get("productId")
        type_style = "green" if t.get("type") == "add" else "red"
        table.add_row(
            str(t.get("id", "N/A")),
            f"{names.get(pid, 'Product')} ({pid})",
            str(t.get("customerId") or "-"),
            f"[{type_style}]{t.get('type')}[/{type_style}]",
            str(t.get("quantity")),
            str(t.get("timestamp") or "-")
        )
    console.print(table)


def show_status(message: str, is_success: bool = True):
    style = "green" if is_success else "red"
    return Panel.fit(f"[{style}]{message}[/{style}]", title="Status")


# ---------------------------
# API wrapper with error reporting
# ---------------------------
def _error_text(e: Exception) -> str:
    # The API answers errors with {"error": "..."}
    if isinstance(e, requests.HTTPError) and e.response is not None:
        try:
            return f"HTTP {e.response.status_code}: {e.response.json().get('error', e.response.text)}"
        except ValueError:
            return f"HTTP {e.response.status_code}: {e.response.text}"
    return str(e)


def try_api(fn, *args, success_msg: Optional[str] = None, **kwargs):
    """
    Calls fn(*args, **kwargs) behind a spinner.
    Returns the result, or None after printing the error.
    """
    global status_message
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
        ) as progress:
            progress.add_task(description="Processing...", total=None)
            result = fn(*args, **kwargs)

        if success_msg:
            status_message = success_msg
            console.print(show_status(success_msg, True))
        return result
    except (requests.RequestException, ValueError) as e:
        status_message = f"Error: {_error_text(e)}"
        console.print(show_status(status_message, False))
        return None


# ---------------------------
# Autocompletion helpers
# ---------------------------
def refresh_caches():
    global product_cache, customer_cache
    product_cache = try_api(c.list_products) or []
    customer_cache = try_api(c.list_customers) or []


def get_product_completer():
    return WordCompleter([str(p.get("id")) for p in product_cache if p.get("id") is not None])


def get_customer_completer():
    return WordCompleter([str(cu.get("id")) for cu in customer_cache if cu.get("id") is not None])


def create_header():
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)

    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    header.add_row(
        "📦 Inventory",
        "[bold blue]Stock & Customer Console[/bold blue]",
        f"[dim]{now}[/dim]"
    )
    return Panel(header, style="bold blue")


# ---------------------------
# Input helpers
# ---------------------------
def prompt_with_autocomplete(message: str, completer=None, default: str = ""):
    return prompt(f"{message} ", completer=completer, style=custom_style, default=default)


def ask_float(message: str, default: float = 10.0) -> float:
    while True:
        raw = Prompt.ask(message, default=str(default))
        try:
            return float(raw)
        except ValueError:
            console.print("[red]Please enter a valid number.[/red]")


def ask_id(message: str, completer=None) -> Optional[int]:
    raw = prompt_with_autocomplete(message, completer=completer).strip()
    try:
        return int(raw)
    except ValueError:
        console.print("[red]IDs are whole numbers.[/red]")
        return None


def ask_product_fields(current: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    current = current or {}
    return {
        "name": Prompt.ask("Name", default=current.get("name") or ""),
        "description": Prompt.ask("Description", default=current.get("description") or ""),
        "category": Prompt.ask("🏷️ Category", default=current.get("category") or ""),
        "price": ask_float("💰 Price", default=current.get("price") or 0.0),
        "quantity": IntPrompt.ask("📦 Quantity", default=current.get("quantity") or 0),
    }


def ask_customer_fields(current: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    current = current or {}
    return {
        "name": Prompt.ask("Name", default=current.get("name") or ""),
        "email": Prompt.ask("Email", default=current.get("email") or ""),
        "phone": Prompt.ask("Phone", default=current.get("phone") or ""),
    }


# ---------------------------
# Main menu
# ---------------------------
def menu():
    global status_message

    console.clear()
    console.print(create_header())
    refresh_caches()

    while True:
        if status_message:
            console.print(show_status(status_message, "Error" not in status_message))

        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)

        options = [
            ("1", "📦 List products", "6", "👥 List customers"),
            ("2", "➕ Add product", "7", "➕ Add customer"),
            ("3", "✏️ Update product", "8", "✏️ Update customer"),
            ("4", "🗑️ Delete product", "9", "🗑️ Delete customer"),
            ("5", "🔄 Stock movement", "10", "🧾 Transaction log"),
            ("", "", "q", "👋 Quit")
        ]
        for row in options:
            menu_table.add_row(*row)

        console.print(Panel(menu_table, title="📋 Menu", border_style="yellow"))

        choice = prompt_with_autocomplete(
            "\nChoose an option",
            completer=WordCompleter([str(i) for i in range(1, 11)] + ["q", "quit", "exit"])
        ).strip()

        if choice == "1":
            products = try_api(c.list_products, success_msg="Products loaded")
            if products is not None:
                show_products(products)

        elif choice == "2":
            pid = ask_id("Enter new product ID")
            if pid is not None:
                fields = ask_product_fields()
                resp = try_api(c.create_product, pid, **fields, success_msg=f"Product {pid} created")
                if resp:
                    show_products([resp])

        elif choice == "3":
            pid = ask_id("Enter product ID", completer=get_product_completer())
            if pid is not None:
                current = try_api(c.get_product, pid)
                if current:
                    fields = ask_product_fields(current)
                    resp = try_api(c.update_product, pid, **fields, success_msg=f"Product {pid} updated")
                    if resp:
                        show_products([resp])

        elif choice == "4":
            pid = ask_id("Enter product ID", completer=get_product_completer())
            if pid is not None and Confirm.ask(f"[red]Delete product {pid}?[/red]"):
                try_api(c.delete_product, pid, success_msg=f"Product {pid} deleted")

        elif choice == "5":
            pid = ask_id("Enter product ID", completer=get_product_completer())
            if pid is not None:
                kind = Prompt.ask("Type", choices=["add", "deduct"], default="deduct")
                qty = IntPrompt.ask("Quantity", default=1)
                raw_cid = prompt_with_autocomplete("Customer ID (blank for none)", completer=get_customer_completer()).strip()
                cid = int(raw_cid) if raw_cid.isdigit() else None
                resp = try_api(c.apply_transaction, pid, qty, kind, cid,
                               success_msg=f"{kind} of {qty} recorded for product {pid}")
                if resp:
                    show_products([resp])

        elif choice == "6":
            customers = try_api(c.list_customers, success_msg="Customers loaded")
            if customers is not None:
                show_customers(customers)

        elif choice == "7":
            cid = ask_id("Enter new customer ID")
            if cid is not None:
                fields = ask_customer_fields()
                resp = try_api(c.create_customer, cid, **fields, success_msg=f"Customer {cid} created")
                if resp:
                    show_customers([resp])

        elif choice == "8":
            cid = ask_id("Enter customer ID", completer=get_customer_completer())
            if cid is not None:
                current = try_api(c.get_customer, cid)
                if current:
                    fields = ask_customer_fields(current)
                    resp = try_api(c.update_customer, cid, **fields, success_msg=f"Customer {cid} updated")
                    if resp:
                        show_customers([resp])

        elif choice == "9":
            cid = ask_id("Enter customer ID", completer=get_customer_completer())
            if cid is not None and Confirm.ask(f"[red]Delete customer {cid}?[/red]"):
                try_api(c.delete_customer, cid, success_msg=f"Customer {cid} deleted")

        elif choice == "10":
            transactions = try_api(c.list_transactions, success_msg="Transaction log loaded")
            if transactions is not None:
                show_transactions(transactions)

        elif choice.lower() in ("q", "quit", "exit"):
            if Confirm.ask("Are you sure you want to quit?"):
                console.print(Panel.fit("[bold green]Goodbye! 👋[/bold green]", title="Goodbye"))
                sys.exit(0)

        if choice in ("2", "3", "4", "5", "7", "8", "9"):
            refresh_caches()

        console.print()
        console.rule(style="dim")


def main():
    try:
        menu()
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
