from typing import Optional

import typer

from bearing.orientation.angles import cardinal_direction
from bearing.orientation.converter import HeadingConverter
from bearing.orientation.samples import OrientationSample


def convert_command(
    alpha: Optional[float] = typer.Option(None, help="Device alpha angle in degrees."),
    beta: Optional[float] = typer.Option(None, help="Device beta angle in degrees."),
    gamma: Optional[float] = typer.Option(None, help="Device gamma angle in degrees."),
    compass_heading: Optional[float] = typer.Option(
        None, help="Platform compass heading in degrees."
    ),
    absolute: bool = typer.Option(False, help="Mark the sample as north-referenced."),
    screen_rotation: float = typer.Option(0.0, help="Screen rotation in degrees."),
) -> None:
    """Convert a single orientation sample to a heading."""

    sample = OrientationSample(
        compass_heading=compass_heading,
        alpha=alpha,
        beta=beta,
        gamma=gamma,
        is_absolute=absolute,
    )
    heading = HeadingConverter.from_configuration().convert(sample, screen_rotation)
    if heading is None:
        typer.echo("unavailable")
        raise typer.Exit(code=1)
    typer.echo(f"{heading:.1f}\t{cardinal_direction(heading)}\t{sample.source_type}")
