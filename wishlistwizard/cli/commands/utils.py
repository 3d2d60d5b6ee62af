import sys
import shutil
import platform
import subprocess
from rich import print as rprint

from wishlistwizard.core.config import ConfigManager
from wishlistwizard.utils.ux import UX


def _playwright_version() -> str:
    """Version reported by the installed Playwright driver, or "" if it cannot run."""
    try:
        result = subprocess.run(
            [sys.executable, "-m", "playwright", "--version"],
            capture_output=True,
            text=True,
            timeout=30,
        )
    except (OSError, subprocess.TimeoutExpired):
        return ""
    return result.stdout.strip() if result.returncode == 0 else ""


def doctor():
    """Check environment health."""
    rprint("[bold cyan]Checking Wishlist Wizard environment...[/bold cyan]")

    rprint(f"• OS: {platform.system()} {platform.release()}")
    rprint(f"• Python: {sys.version.split()[0]}")

    playwright = shutil.which("playwright")
    rprint(f"• Playwright CLI: {'[green]OK[/green]' if playwright else '[red]MISSING[/red]'}")

    with UX.spinner("Checking Playwright driver..."):
        driver_version = _playwright_version()
    rprint(f"• Playwright driver: {driver_version or '[red]UNAVAILABLE[/red]'}")

    config = ConfigManager.load_config()
    chrome = config.get("chrome_path") or "Playwright Chromium"
    rprint(f"• Browser: {chrome}")
    rprint(f"• Headless: {'yes' if config['headless'] else 'no'} [dim](CI / HEADLESS env)[/dim]")

    config_file = ConfigManager.CONFIG_FILE
    rprint(f"• Config file: {config_file} ({'[green]Found[/green]' if config_file.exists() else '[dim]defaults[/dim]'})")

    rprint("\n[bold green]System check complete.[/bold green]")
