from InquirerPy import inquirer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from wishlistwizard.core.models import PipelineReport, UrlStatus

console = Console()


class UI:
    """
    Interactive terminal prompts with rich display.
    """

    @staticmethod
    def ask_wishlist_urls() -> str:
        return inquirer.text(
            message="Enter your wishlist URL(s) (comma separated, public wishlists only):",
        ).execute()

    @staticmethod
    def show_captcha(ascii_art: str) -> None:
        console.print(Panel(Text(ascii_art), title="CAPTCHA", border_style="red", expand=False))

    @staticmethod
    async def ask_captcha(ascii_art: str) -> str:
        """Show the rendered challenge and wait for the human's reading of it."""
        console.print("\n[bold red]🛑 ACTION REQUIRED: Amazon is asking for a CAPTCHA.[/bold red]")
        UI.show_captcha(ascii_art)
        return await inquirer.text(
            message="Please enter the CAPTCHA (letters will be converted to uppercase):",
        ).execute_async()

    @staticmethod
    def show_summary(report: PipelineReport) -> None:
        if not report.outcomes:
            return

        table = Table(title="Wishlist Export Summary")
        table.add_column("Wishlist", style="cyan", overflow="fold")
        table.add_column("Status")
        table.add_column("Items", justify="right")
        table.add_column("Output / Error", overflow="fold")

        for outcome in report.outcomes:
            if outcome.status == UrlStatus.DONE:
                status = "[green]DONE[/green]"
                detail = outcome.output_path or ""
            else:
                status = "[red]FAILED[/red]"
                detail = f"[red]{outcome.error or ''}[/red]"
            table.add_row(outcome.url, status, str(outcome.item_count), detail)

        console.print(table)
