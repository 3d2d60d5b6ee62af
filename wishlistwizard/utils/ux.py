from yaspin import yaspin
from rich.console import Console

from wishlistwizard.core.models import PipelineReport

console = Console()


class UX:
    """
    Spinners and one-line status output for the CLI.
    """

    @staticmethod
    def spinner(text: str):
        """Returns a configured yaspin spinner."""
        return yaspin(text=text, color="cyan", spinner="dots")

    @staticmethod
    def print_success(message: str):
        console.print(f"[green]✓ {message}[/green]")

    @staticmethod
    def print_error(message: str):
        console.print(f"[red]✗ {message}[/red]")

    @staticmethod
    def print_run_result(report: PipelineReport) -> bool:
        """One closing line for the run. Returns True when every wishlist was exported."""
        if report.failed:
            UX.print_error(f"{len(report.failed)} of {len(report.outcomes)} wishlist(s) could not be exported.")
            return False
        UX.print_success(f"Exported {len(report.succeeded)} wishlist(s).")
        return True
