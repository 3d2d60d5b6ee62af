import typer
from wishlistwizard.cli.commands import scrape, utils

app = typer.Typer(
    name="wishlistwizard",
    help="Export public Amazon wishlists to CSV",
    add_completion=False
)

# Register commands
app.command()(scrape.scrape)
app.command()(utils.doctor)

VERSION = "1.0.0"

@app.command()
def version():
    """Show the Wishlist Wizard version."""
    typer.echo(f"Wishlist Wizard {VERSION}")

def version_callback(value: bool):
    if value:
        typer.echo(f"Wishlist Wizard {VERSION}")
        raise typer.Exit()

@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(None, "--version", callback=version_callback, is_eager=True),
):
    """
    Wishlist Wizard CLI - run without a command to start scraping.
    """
    if ctx.invoked_subcommand is None:
        scrape.run_scrape()

if __name__ == "__main__":
    app()
