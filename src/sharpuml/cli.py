"""
Command Line Interface for SharpUML.

Generates one PlantUML document from a C# solution:

    $ sharpuml Shop.sln docs/shop.puml
    $ sharpuml Shop.sln shop.puml --config sharpuml.json --workers 4

Exit codes:
    0: Diagram written
    1: Usage error or any failure; a single ``Error: <message>`` line is
       written to stderr and no output file is created

Author: SharpUML Team
"""

import sys
from pathlib import Path

import click
from rich.console import Console

from .config import Config, get_config, set_config
from .constants import APPLICATION_VERSION, ErrorMessage, SuccessMessage
from .logging import get_logger, setup_logging
from .services.analyzer import DependencyAnalyzer
from .services.plantuml import PlantUmlGenerator

console = Console()
error_console = Console(stderr=True, highlight=False)

logger = get_logger(__name__)


def _fail(message: str) -> None:
    error_console.print(f"Error: {message}", markup=False, soft_wrap=True)
    sys.exit(1)


@click.command()
@click.argument("paths", nargs=-1, type=click.UNPROCESSED)
@click.option(
    "--config", "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="JSON configuration file",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default=None,
    help="Logging verbosity (default: LOG_LEVEL or WARNING)",
)
@click.option(
    "--workers", "-w",
    type=click.IntRange(min=1),
    default=None,
    help="Number of projects analyzed in parallel",
)
@click.version_option(APPLICATION_VERSION, prog_name="sharpuml")
def main(paths, config_path, log_level, workers):
    """SharpUML - PlantUML diagrams for C# solutions.

    Reads SOLUTION_PATH (.sln or .csproj) and writes a PlantUML document
    with project dependencies and class structure to OUTPUT_PATH.

    \b
    Usage:
        sharpuml <solution-path> <output-path>
    """
    if len(paths) != 2:
        _fail(ErrorMessage.USAGE)

    if log_level:
        setup_logging(log_level=log_level, force=True)

    solution_path, output_path = Path(paths[0]), Path(paths[1])

    try:
        config = Config.load_file(config_path) if config_path else get_config()
        if workers is not None:
            config = config.model_copy(
                update={"analysis": config.analysis.model_copy(update={"max_workers": workers})}
            )
        set_config(config)

        if not solution_path.is_file():
            raise FileNotFoundError(ErrorMessage.SOLUTION_NOT_FOUND.format(path=solution_path))

        dependencies = DependencyAnalyzer(config=config).analyze(solution_path)
        diagram = PlantUmlGenerator(config.diagram).generate_diagram(dependencies)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(diagram, encoding="utf-8")
    except Exception as e:
        logger.debug("Diagram generation failed", exc_info=True)
        message = str(e).strip()
        _fail(message.splitlines()[0] if message else type(e).__name__)

    console.print(SuccessMessage.DIAGRAM_WRITTEN.format(path=output_path))


def run() -> None:
    """Console entry point; option parsing errors also exit with status 1."""
    try:
        exit_code = main.main(standalone_mode=False)
    except click.exceptions.Abort:
        _fail("Aborted")
    except click.ClickException as e:
        _fail(e.format_message())
    sys.exit(exit_code or 0)


if __name__ == "__main__":
    run()
