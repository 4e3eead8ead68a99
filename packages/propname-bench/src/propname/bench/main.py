import logging
import time
from enum import Enum
from pathlib import Path
from typing import List, Optional

import typer
from pyinstrument import Profiler

from propname.builder import PropertyNames
from propname.spec import PropertyNameError

from .scenarios import SCENARIOS

log = logging.getLogger(__name__)


class Scenario(str, Enum):
    SINGLE = "single"
    CHAIN = "chain"
    COLLECTION = "collection"
    ALL = "all"


app = typer.Typer(
    name="propname-bench",
    help="Measures how long deriving property paths takes.",
    no_args_is_help=False,
)


def _selected(scenario: Scenario) -> List[str]:
    if scenario is Scenario.ALL:
        return list(SCENARIOS)
    return [scenario.value]


def _measure(names: PropertyNames, key: str, iterations: int, warmup: int) -> float:
    action = SCENARIOS[key]
    for _ in range(warmup):
        action(names)

    start = time.perf_counter_ns()
    for _ in range(iterations):
        action(names)
    elapsed = time.perf_counter_ns() - start
    return elapsed / iterations


@app.command()
def run(
    scenario: Scenario = typer.Argument(Scenario.ALL, help="Scenario to run."),
    iterations: int = typer.Option(
        100_000, "--iterations", "-n", min=1, help="Measured calls per scenario."
    ),
    warmup: int = typer.Option(1_000, "--warmup", min=0, help="Unmeasured calls first."),
    profile: bool = typer.Option(False, "--profile", help="Sample the run with pyinstrument."),
    html: Optional[Path] = typer.Option(
        None, "--html", help="Write the profile as HTML to this file instead of the terminal."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    names = PropertyNames()
    keys = _selected(scenario)
    log.debug(f"Running {', '.join(keys)} with {iterations} iterations")

    profiler = Profiler(interval=0.001) if profile or html else None
    if profiler:
        profiler.start()

    try:
        for key in keys:
            per_call = _measure(names, key, iterations, warmup)
            path = SCENARIOS[key](names)
            typer.secho(
                f"{key:<12}{per_call:>12.1f} ns/op   -> '{path}'",
                fg=typer.colors.GREEN,
            )
    except PropertyNameError as e:
        typer.secho(f"Scenario failed: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    finally:
        if profiler:
            profiler.stop()

    if profiler:
        if html:
            html.write_text(profiler.output_html(), encoding="utf-8")
            typer.secho(f"HTML report saved to: {html}", fg=typer.colors.BRIGHT_BLACK)
        else:
            typer.echo(profiler.output_text())


if __name__ == "__main__":
    app()
