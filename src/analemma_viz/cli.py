"""Command-line interface for Analemma Visualizer."""

import json
from datetime import date
from pathlib import Path
from typing import Optional

import click
import yaml

from analemma_viz import __version__
from analemma_viz.clock import local_instant, parse_time_of_day
from analemma_viz.config import Config, load_config
from analemma_viz.logger import setup_logger
from analemma_viz.main import AnalemmaSession
from analemma_viz.solar import compute_solar_position
from analemma_viz.storage import PathStorage, StorageError


def _build_session(ctx: click.Context) -> AnalemmaSession:
    """Load configuration, apply command-line overrides and open a session."""
    config_path = ctx.obj.get("config_path")
    config = load_config(config_path)
    setup_logger(config.logging)

    session = AnalemmaSession(config)
    overrides = {k: v for k, v in ctx.obj.get("overrides", {}).items() if v is not None}
    if overrides:
        try:
            session.update_options(**overrides)
        except ValueError as e:
            raise click.BadParameter(str(e))
    return session


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"date must be in YYYY-MM-DD format, got '{value}'")


@click.group()
@click.version_option(version=__version__, prog_name="analemma-viz")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.option("--lat", "latitude", type=float, help="Observer latitude in degrees")
@click.option("--lon", "longitude", type=float, help="Observer longitude in degrees")
@click.option("--tz", "timezone", type=str, help="IANA timezone (default: host clock)")
@click.option("--time", "observation_time", type=str, help="Observation time (HH:MM)")
@click.option("--year", type=int, help="Calendar year")
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Optional[Path],
    latitude: Optional[float],
    longitude: Optional[float],
    timezone: Optional[str],
    observation_time: Optional[str],
    year: Optional[int],
) -> None:
    """Analemma Visualizer.

    Computes the sun's analemma and daily path for an observer.
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["overrides"] = {
        "latitude": latitude,
        "longitude": longitude,
        "timezone": timezone,
        "observation_time": observation_time,
        "year": year,
    }


@cli.command()
@click.argument("day", type=str)
@click.argument("clock_time", metavar="TIME", type=str)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def position(ctx: click.Context, day: str, clock_time: str, as_json: bool) -> None:
    """Show the sun's position on DAY (YYYY-MM-DD) at TIME (HH:MM)."""
    session = _build_session(ctx)
    try:
        hour, minute = parse_time_of_day(clock_time)
    except ValueError as e:
        raise click.BadParameter(str(e))

    instant = local_instant(_parse_date(day), hour, minute, session.observer.timezone)
    result = compute_solar_position(
        instant, session.observer.latitude, session.observer.longitude
    )

    if as_json:
        click.echo(json.dumps({"instant": instant.isoformat(), **result.to_dict()}, indent=2))
        return

    click.echo(f"Sun position at {instant.isoformat()}")
    click.echo(f"  Altitude: {result.altitude:.2f}°")
    click.echo(f"  Azimuth: {result.azimuth:.2f}°")
    click.echo(f"  Declination: {result.declination:.2f}°")
    click.echo(f"  Right ascension: {result.right_ascension:.2f}°")
    click.echo(f"  Hour angle: {result.hour_angle:.2f}°")


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def year(ctx: click.Context, as_json: bool) -> None:
    """Sample the analemma for the configured year."""
    session = _build_session(ctx)
    path = session.year_path

    if as_json:
        click.echo(
            json.dumps(
                [
                    {
                        "day_index": i,
                        "date": s.instant.date().isoformat(),
                        "altitude": s.position.altitude,
                        "azimuth": s.position.azimuth,
                        "point": list(s.point),
                    }
                    for i, s in enumerate(path.samples)
                ],
                indent=2,
            )
        )
        return

    click.echo(
        f"Analemma for {path.year} at {session.observation.observation_time} "
        f"({path.latitude}, {path.longitude}): {len(path)} days\n"
    )
    for marker in session.markers():
        sample = path[marker.day_index]
        label = f"  {marker.label}" if marker.label else ""
        click.echo(
            f"  [{marker.day_index:3d}] {sample.instant.date().isoformat()}  "
            f"alt {sample.position.altitude:7.2f}°  az {sample.position.azimuth:7.2f}°"
            f"{label}"
        )


@cli.command()
@click.option("--day", "day_index", type=int, help="0-based day of year")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def day(ctx: click.Context, day_index: Optional[int], as_json: bool) -> None:
    """Sample the sun's path above the horizon for one day."""
    session = _build_session(ctx)
    if day_index is not None:
        session.jump_to_day(day_index)
    path = session.day_path

    if as_json:
        click.echo(
            json.dumps(
                {
                    "date": path.day.isoformat(),
                    "apex": path.apex.instant.isoformat() if path.apex else None,
                    "samples": [
                        {
                            "local_time": s.instant.isoformat(),
                            "altitude": s.position.altitude,
                            "azimuth": s.position.azimuth,
                            "point": list(s.point),
                        }
                        for s in path.samples
                    ],
                },
                indent=2,
            )
        )
        return

    click.echo(f"Sun path for {path.day.isoformat()}: {len(path)} points above horizon")
    if path.apex is None:
        click.echo("  The sun stays below the horizon all day.")
        return
    first, last = path.samples[0], path.samples[-1]
    click.echo(f"  First above horizon: {first.instant.strftime('%H:%M')}")
    click.echo(f"  Last above horizon: {last.instant.strftime('%H:%M')}")
    click.echo(
        f"  Apex: {path.apex.instant.strftime('%H:%M')} "
        f"(alt {path.apex.position.altitude:.2f}°)"
    )


@cli.command()
@click.option("--day", "day_index", type=int, required=True, help="0-based day of year")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def info(ctx: click.Context, day_index: int, as_json: bool) -> None:
    """Describe the sun on a day of the year at the observation time."""
    session = _build_session(ctx)
    result = session.describe_day(day_index)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    click.echo(result.date.isoformat())
    click.echo(f"  Day of year: {result.day_of_year}")
    click.echo(f"  Time: {result.time_of_day}")
    if result.label:
        click.echo(f"  {result.label}")
    click.echo(f"  Altitude: {result.position.altitude:.2f}°")
    click.echo(f"  Azimuth: {result.position.azimuth:.2f}°")


@cli.command()
@click.option(
    "--format",
    "export_format",
    type=click.Choice(["json", "npy"]),
    help="Export format (default: from configuration)",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    help="Output directory",
)
@click.pass_context
def export(ctx: click.Context, export_format: Optional[str], output: Optional[Path]) -> None:
    """Export the analemma points to a file."""
    session = _build_session(ctx)
    export_config = session.config.export
    if output is not None:
        export_config.base_path = output

    try:
        storage = PathStorage(export_config)
        saved = storage.save(
            session.year_path,
            tz=session.observer.timezone,
            export_format=export_format,
            mark_interval=session.observation.mark_interval,
        )
    except StorageError as e:
        click.echo(f"Export failed: {e}", err=True)
        ctx.exit(1)

    click.echo(f"Export saved to: {saved}")


@cli.command("config")
@click.option("--show", is_flag=True, help="Show current configuration")
@click.option("--create", is_flag=True, help="Create default configuration file")
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    default=Path("config/config.yaml"),
    help="Output path for configuration file",
)
@click.pass_context
def config_cmd(
    ctx: click.Context, show: bool, create: bool, output: Path
) -> None:
    """Manage configuration.

    --show prints the loaded file with the group options applied.
    """
    if show:
        config = _build_session(ctx).config
        click.echo(yaml.dump(config.to_dict(), default_flow_style=False, allow_unicode=True))
        return

    if create:
        if output.exists():
            if not click.confirm(f"{output} already exists. Overwrite?"):
                return

        config = Config()
        output.parent.mkdir(parents=True, exist_ok=True)

        with open(output, "w", encoding="utf-8") as f:
            yaml.dump(
                config.to_dict(), f, default_flow_style=False, allow_unicode=True
            )

        click.echo(f"Configuration file created: {output}")
        return

    # Default: show configuration
    ctx.invoke(config_cmd, show=True, create=False, output=output)


if __name__ == "__main__":
    cli()
