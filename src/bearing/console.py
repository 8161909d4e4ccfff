from typing import Optional

import typer

from bearing.cli.commands.convert import convert_command
from bearing.cli.commands.replay import replay_command
from bearing.utilities.logging import set_log_level

app = typer.Typer(help="Compass heading estimation tools.")


@app.callback()
def configure(
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Override LOG_LEVEL for this run (e.g. debug)."
    ),
) -> None:
    if log_level is None:
        return
    try:
        set_log_level(log_level)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--log-level") from exc


app.command(name="convert")(convert_command)
app.command(name="replay")(replay_command)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
