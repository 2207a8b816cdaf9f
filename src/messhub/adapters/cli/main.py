"""
adapters.cli.main - Admin CLI for the meal-ordering backend.

Uses the same ServiceFactory and services as the REST API, so validation
and storage rules are identical.

Commands
--------
  init-db       Create the database tables
  create-admin  Create an ADMIN account (admins cannot self-register)
  seed          Insert a demo customer, owner, messes and meals
  stats         Show user, sales and contact figures

Usage
-----
  python run_cli.py init-db
  python run_cli.py --db messhub.db create-admin --name "Site Admin" --email admin@example.com
  python run_cli.py stats
"""

from __future__ import annotations

import asyncio
import dataclasses
from typing import Any, Optional

import typer
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from messhub import __version__
from messhub.domain.entities import Account
from messhub.domain.exceptions import DuplicateEmailError, ValidationError
from messhub.domain.models import Role
from messhub.factory import ServiceFactory
from messhub.infrastructure.config import Settings

console = Console()
app = typer.Typer(
    help="MessHub admin CLI",
    add_completion=False,
    no_args_is_help=True,
)

_state: dict[str, Optional[str]] = {"db_path": None}


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

async def _make_factory() -> ServiceFactory:
    settings = Settings.from_env()
    if _state["db_path"]:
        settings = dataclasses.replace(settings, db_path=_state["db_path"])
    factory = ServiceFactory(settings)
    await factory.initialize()
    return factory


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"messhub v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    db_path: Optional[str] = typer.Option(None, "--db", help="SQLite file (overrides DB_PATH)"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    _state["db_path"] = db_path


async def _register(factory: ServiceFactory, fields: dict[str, Any]) -> Account:
    """Register an account from *fields*, or return the existing one with that email."""
    auth_svc = factory.create_authentication_service()
    try:
        return (await auth_svc.register(fields)).account
    except DuplicateEmailError:
        console.print(f"[dim]{fields['email']} already exists, reusing it.[/dim]")
        return await factory.create_account_repository().get_by_email(fields["email"])


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@app.command("init-db")
def init_db() -> None:
    """Create the database tables (safe to re-run)."""
    async def _run() -> None:
        factory = await _make_factory()
        console.print(f"[green]Database ready:[/green] {factory.config.db_path}")

    asyncio.run(_run())


@app.command("create-admin")
def create_admin(
    name: str = typer.Option(..., prompt=True),
    email: str = typer.Option(..., prompt=True),
    password: str = typer.Option(
        ..., prompt="Password (min 6 chars)", hide_input=True, confirmation_prompt=True,
    ),
) -> None:
    """Create an ADMIN account."""
    async def _run() -> None:
        factory = await _make_factory()
        try:
            result = await factory.create_authentication_service().register({
                "name": name, "email": email, "password": password, "role": Role.ADMIN.value,
            })
        except DuplicateEmailError:
            console.print(f"[bold red]An account with email '{email}' already exists.[/bold red]")
            raise typer.Exit(code=1)
        except ValidationError as exc:
            console.print("[bold red]Invalid input:[/bold red]\n  " + "\n  ".join(exc.errors))
            raise typer.Exit(code=1)

        console.print(Panel(
            f"[bold green]Admin created.[/bold green]\n"
            f"{result.account.name} <{result.account.email}> (id={result.account.id})",
            border_style="green",
        ))

    asyncio.run(_run())


@app.command()
def seed(
    password: str = typer.Option("password123", help="Password for the demo accounts"),
    with_order: bool = typer.Option(True, help="Also place one demo order"),
) -> None:
    """Insert demo data: one customer, one owner, two messes with meals."""
    async def _run() -> None:
        factory = await _make_factory()
        customer = await _register(factory, {
            "name": "Demo Customer", "email": "customer@example.com", "password": password,
            "role": Role.CUSTOMER.value,
        })
        owner = await _register(factory, {
            "name": "Demo Owner", "email": "owner@example.com", "password": password,
            "role": Role.OWNER.value,
        })

        mess_svc = factory.create_mess_service()
        meal_svc = factory.create_meal_service()
        if await mess_svc.list_by_owner(owner.id):
            console.print("[dim]Demo owner already has messes, skipping catalog.[/dim]")
            return

        meal_ids = []
        for mess_fields, meals in _DEMO_CATALOG:
            mess = await mess_svc.create(owner.id, mess_fields)
            for meal_fields in meals:
                meal = await meal_svc.create(mess.id, meal_fields)
                meal_ids.append(meal.id)
            console.print(f"  created mess [bold]{mess.name}[/bold] with {len(meals)} meals")

        if with_order and meal_ids:
            order = await factory.create_order_service().create(customer.id, {
                "items": [{"meal_id": meal_ids[0], "quantity": 2, "price": 80}],
                "delivery_address": "12 MG Road, Bengaluru 560001",
                "delivery_phone": "9876543210",
                "payment_method": "COD",
            })
            console.print(f"  placed order {order.id} (total {order.total_amount:.2f})")

        console.print("[green]Seed complete.[/green]")

    asyncio.run(_run())


@app.command()
def stats() -> None:
    """Show user, sales and contact figures."""
    async def _run() -> None:
        factory = await _make_factory()
        users = await factory.create_user_admin_service().statistics()
        orders = factory.create_order_service()
        contacts = await factory.create_contact_service().statistics()

        t = Table(box=box.SIMPLE, show_header=False, padding=(0, 2))
        t.add_column(style="bold")
        t.add_column(justify="right")
        t.add_row("Users", str(users["total_users"]))
        t.add_row("Customers", str(users["total_customers"]))
        t.add_row("Owners", str(users["total_owners"]))
        t.add_row("Total sales", f"{await orders.total_sales():.2f}")
        t.add_row("Contact messages", str(contacts["total_contacts"]))
        console.print(Panel(t, title="MessHub", border_style="blue"))

        monthly = await orders.monthly_sales()
        if monthly:
            m = Table(box=box.SIMPLE)
            m.add_column("Month")
            m.add_column("Orders", justify="right")
            m.add_column("Revenue", justify="right")
            for row in monthly:
                m.add_row(row["month"], str(row["order_count"]), f"{row['monthly_sales']:.2f}")
            console.print(m)

    asyncio.run(_run())


_DEMO_CATALOG = [
    (
        {
            "name": "Annapurna Mess",
            "area": "Koramangala",
            "phone": "9876501234",
            "address": "4th Block, Koramangala, Bengaluru",
            "description": "Home-style South Indian thalis, veg only.",
        },
        [
            {"name": "Veg Thali", "meal_type": "lunch", "is_veg": True,
             "description": "Rice, sambar, rasam, two curries and curd.", "price": 80},
            {"name": "Masala Dosa", "meal_type": "breakfast", "is_veg": True,
             "description": "Crisp dosa with potato filling and chutney.", "price": 50},
        ],
    ),
    (
        {
            "name": "Spice Route Kitchen",
            "area": "Indiranagar",
            "phone": "9123456780",
            "address": "100 Feet Road, Indiranagar, Bengaluru",
            "description": "North Indian dinners with veg and non-veg options.",
        },
        [
            {"name": "Chicken Curry Meal", "meal_type": "dinner", "is_veg": False,
             "description": "Chicken curry with rice and two rotis.", "price": 140},
            {"name": "Samosa Plate", "meal_type": "snack", "is_veg": True,
             "description": "Two samosas with mint and tamarind chutney.", "price": 30},
        ],
    ),
]


if __name__ == "__main__":
    app()
