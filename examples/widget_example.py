#!/usr/bin/env python3
"""
Widget Example for redisbank

Walks through the databank against the in-memory store:
- Declaring indexed properties
- Creating, updating and deleting records
- Watching index sets move with each mutation
- Searching by indexed and unindexed criteria
- Counters

Run with: python examples/widget_example.py
Set REDISBANK_EXAMPLE_REDIS=1 to run against a live Redis from REDISBANK_* settings.
"""

import asyncio
import os

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table

from redisbank import (
    AlreadyExistsError,
    BankSettings,
    Databank,
    MemoryPrimitiveStore,
    NoSuchThingError,
    configure_logging,
)

console = Console()

SCHEMA = {
    "widget": {"indices": ["color", "shape.sides"]},
}

WIDGETS = {
    "w1": {"name": "sprocket", "color": "red", "size": 3, "shape": {"sides": 4}},
    "w2": {"name": "cog", "color": "red", "size": 5, "shape": {"sides": 6}},
    "w3": {"name": "flange", "color": "blue", "size": 3, "shape": {"sides": 4}},
}


def print_header(title: str, subtitle: str = ""):
    """Print a header panel"""
    full_title = f"[bold blue]{title}[/bold blue]"
    if subtitle:
        full_title += f"\n[dim]{subtitle}[/dim]"
    console.print(Panel(full_title, style="bright_blue", box=box.DOUBLE, padding=(1, 2)))


def print_step(step_num: int, title: str, description: str = ""):
    step_text = f"[bold yellow]Step {step_num}: {title}[/bold yellow]"
    if description:
        step_text += f"\n[dim italic]{description}[/dim italic]"
    console.print(step_text)
    console.print()


def print_success(message: str):
    console.print(f"[bold green]✓[/bold green] {message}")


def print_info(message: str):
    console.print(f"[bold cyan]ℹ[/bold cyan] {message}")


def print_error(message: str):
    console.print(f"[bold red]✗[/bold red] {message}")


async def show_index_sets(bank: Databank, title: str):
    """Render every index set of the widget type with its members"""
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("Index key", style="cyan", no_wrap=True)
    table.add_column("Members", style="green")

    store = bank.store
    for key in await store.keys_matching("databank:index:widget:*"):
        members = await store.set_members(key)
        table.add_row(key, ", ".join(members))

    console.print(table)
    console.print()


def show_records(title: str, records: list):
    table = Table(title=title, box=box.SIMPLE)
    table.add_column("Name", style="cyan")
    table.add_column("Color", style="magenta")
    table.add_column("Size", style="yellow", justify="right")
    table.add_column("Sides", style="green", justify="right")

    for record in sorted(records, key=lambda r: r["name"]):
        table.add_row(record["name"], record["color"], str(record["size"]),
                      str(record["shape"]["sides"]))

    console.print(table)
    console.print()


async def demonstrate_records(bank: Databank):
    print_step(1, "Creating Records", "Each create writes the record, then adds it to its index sets")

    for record_id, value in WIDGETS.items():
        await bank.create("widget", record_id, value)
        print_success(f"Created widget:{record_id} ({value['name']})")
    console.print()

    await show_index_sets(bank, "Index sets after create")

    try:
        await bank.create("widget", "w1", WIDGETS["w1"])
    except AlreadyExistsError as e:
        print_error(f"Second create refused: {e}")
    console.print()


async def demonstrate_update(bank: Databank):
    print_step(2, "Updating a Record", "Deindex the stored value, overwrite, reindex the new one")

    repainted = dict(WIDGETS["w2"], color="green")
    await bank.update("widget", "w2", repainted)
    print_success("widget:w2 is now green")
    console.print()

    await show_index_sets(bank, "Index sets after update")


async def demonstrate_search(bank: Databank):
    print_step(3, "Searching", "Indexed criteria intersect index sets; the rest filter in memory")

    show_records("color = red (index)", await bank.find("widget", {"color": "red"}))
    show_records("size = 3 (full scan)", await bank.find("widget", {"size": 3}))
    show_records("shape.sides = 4 and size = 3 (mixed)",
                 await bank.find("widget", {"shape.sides": 4, "size": 3}))

    matches = []
    outcome = []
    await bank.search("widget", {"color": "blue"}, matches.append, outcome.append)
    print_info(f"Callback search delivered {len(matches)} result(s), completion: {outcome}")
    console.print()


async def demonstrate_delete(bank: Databank):
    print_step(4, "Deleting a Record")

    await bank.delete("widget", "w3")
    print_success("Deleted widget:w3")

    try:
        await bank.read("widget", "w3")
    except NoSuchThingError as e:
        print_error(f"Read after delete: {e}")
    console.print()

    await show_index_sets(bank, "Index sets after delete")


async def demonstrate_counters(bank: Databank):
    print_step(5, "Counters", "incr/decr start from 0 and are never indexed")

    for _ in range(3):
        await bank.incr("counter", "visits")
    value = await bank.decr("counter", "visits")
    print_success(f"counter:visits = {value}")
    console.print()


async def main():
    settings = BankSettings()
    configure_logging(settings)

    if os.environ.get("REDISBANK_EXAMPLE_REDIS"):
        bank = Databank.from_settings(settings, SCHEMA)
    else:
        bank = Databank(SCHEMA, store=MemoryPrimitiveStore(), settings=settings)

    print_header("redisbank - Widget Demonstration", str(bank))
    console.print()

    async with bank:
        await demonstrate_records(bank)
        console.print(Rule("[bold blue]Moving to Updates[/bold blue]"))
        await demonstrate_update(bank)
        console.print(Rule("[bold blue]Moving to Search[/bold blue]"))
        await demonstrate_search(bank)
        console.print(Rule("[bold blue]Moving to Delete[/bold blue]"))
        await demonstrate_delete(bank)
        console.print(Rule("[bold blue]Moving to Counters[/bold blue]"))
        await demonstrate_counters(bank)

        console.print(Panel(str(bank.get_system_info()), title="📋 System info",
                            style="bright_cyan", box=box.ROUNDED))


if __name__ == "__main__":
    asyncio.run(main())
