# chord_roots/console.py (console entry point)

from pathlib import Path
from typing import Optional, Tuple

import typer
from typing_extensions import Annotated

from .config import function_spec, load_config
from .functions import make_function
from .locator import find_roots
from .logger import setup_logger
from .report import format_result, format_total

app = typer.Typer(
    name="chord-roots",
    help="Locate the real roots of a function on an interval with the chord method.",
    add_completion=False,
)


def parse_interval(raw: str) -> Tuple[float, float]:
    """'a b' -> (a, b). Malformed input raises ValueError or IndexError."""
    parts = raw.split()
    return float(parts[0]), float(parts[1])


@app.command()
def run(
    config_file: Annotated[Optional[Path], typer.Option(
        "--config", "-c",
        help="YAML file with function, step, solver and logging settings.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
    )] = None,
):
    """
    Prompt for the interval and both tolerances, then print every root found.
    """
    cfg = load_config(config_file)
    log_cfg = cfg["logging"]
    logger = setup_logger("chord_roots", level_str=log_cfg.get("level"), log_file=log_cfg.get("file"))
    if config_file:
        logger.info(f"Loaded configuration from {config_file}")

    name, params = function_spec(cfg)
    f = make_function(name, **params)

    a, b = parse_interval(typer.prompt("Enter the interval boundaries separated by a space [a,b]"))
    eps1 = float(typer.prompt("Enter the accuracy for the argument (eps1)"))
    eps2 = float(typer.prompt("Enter the accuracy for the function (eps2)"))

    report = find_roots(
        f, a, b,
        tol_x=eps1,
        tol_f=eps2,
        step=float(cfg["scan"]["step"]),
        max_iter=int(cfg["solver"]["max_iter"]),
        stop_rule=str(cfg["solver"]["stop_rule"]),
    )

    for res in report.roots:
        typer.echo("")
        typer.echo(format_result(res))

    typer.echo("")
    typer.echo(format_total(report.total_elapsed_ms))
    typer.echo("")
    typer.prompt("Press Enter to exit...", default="", show_default=False)


def main():
    app()


if __name__ == "__main__":
    main()
