import typer

from .commands import (
    ledger as ledger_cmd,
    sync as sync_cmd,
)

app = typer.Typer(help="flicksync CLI")

app.add_typer(sync_cmd.app, name="sync")
app.add_typer(ledger_cmd.app, name="ledger")


if __name__ == "__main__":
    app()
