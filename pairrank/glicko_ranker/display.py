"""Rich UI components for standings and comparison results."""


from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from pairrank.models import ComparisonOutcome, Item

# Shared console instance
console = Console()


def _rank_label(position: int) -> str:
    if position == 1:
        return "[bold gold1]🥇 1[/bold gold1]"
    if position == 2:
        return "[bold silver]🥈 2[/bold silver]"
    if position == 3:
        return "[bold orange3]🥉 3[/bold orange3]"
    return f"[dim]{position}[/dim]"


def create_standings_table(
    items: list[Item],
    initial_rating: float = 1500.0,
    top_n: int = 10,
    title: str = "Standings",
) -> Table:
    """Create a Rich table of items ordered by rating."""
    table = Table(
        title=f"[bold cyan]{title}[/bold cyan]",
        box=box.ROUNDED,
        show_lines=False,
        header_style="bold magenta",
        title_justify="left",
    )

    table.add_column("Rank", style="dim", width=5, justify="center")
    table.add_column("Score", style="bold", width=6, justify="right")
    table.add_column("Rating", style="yellow", width=18, justify="right")
    table.add_column("Matches", style="green", width=8, justify="right")
    table.add_column("Name", style="cyan", max_width=40, overflow="ellipsis")

    sorted_items = sorted(items, key=lambda x: x.rating.rating, reverse=True)

    for i, item in enumerate(sorted_items[:top_n], 1):
        rating = item.rating.rating
        diff = rating - initial_rating
        if diff > 0:
            rating_str = f"[green]{rating:.0f}[/green] [dim]±{item.rating.deviation:.0f}[/dim]"
        elif diff < 0:
            rating_str = f"[red]{rating:.0f}[/red] [dim]±{item.rating.deviation:.0f}[/dim]"
        else:
            rating_str = f"{rating:.0f} [dim]±{item.rating.deviation:.0f}[/dim]"

        table.add_row(
            _rank_label(i),
            f"{item.normalized_score:.1f}",
            rating_str,
            str(item.match_count),
            item.name[:40],
        )

    if len(items) > top_n:
        table.add_row(
            "...",
            "",
            "",
            "",
            f"[dim]and {len(items) - top_n} more items[/dim]",
        )

    return table


def create_comparison_panel(outcome: ComparisonOutcome | None) -> Panel:
    """Create a panel showing the last recorded comparison."""
    if outcome is None:
        return Panel(
            "[dim]No comparisons recorded yet[/dim]",
            title="[bold]Last Result[/bold]",
            border_style="dim",
            box=box.ROUNDED,
        )

    content = Text()
    content.append("🏆 WINNER: ", style="bold green")
    content.append(f"{outcome.winner.name[:50]}", style="green")
    content.append(f" ({outcome.winner.normalized_score:.1f})\n", style="dim")
    content.append("   over ", style="dim")
    content.append(f"{outcome.loser.name[:50]}", style="white")
    content.append(f" ({outcome.loser.normalized_score:.1f})", style="dim")

    return Panel(
        content,
        title="[bold]Last Result[/bold]",
        border_style="green",
        box=box.ROUNDED,
    )


def print_standings(
    items: list[Item],
    initial_rating: float = 1500.0,
    top_n: int = 10,
    title: str = "Standings",
    target: Console | None = None,
) -> None:
    """Print the standings table."""
    (target or console).print(create_standings_table(items, initial_rating, top_n, title))


class ConsoleEventHandler:
    """EventHandler that renders service events to a Rich console."""

    def __init__(self, target: Console | None = None):
        self.console = target or console

    def on_pair_selected(self, first: Item, second: Item, **kwargs) -> None:
        self.console.print(
            f"[bold cyan]{first.name}[/bold cyan] [dim]vs[/dim] [bold magenta]{second.name}[/bold magenta]"
        )

    def on_comparison_recorded(self, outcome: ComparisonOutcome, **kwargs) -> None:
        self.console.print(create_comparison_panel(outcome))
