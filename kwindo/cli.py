"""
kwindo command line interface.

Usage:
    kwindo [options] <command> [args...] [<command> [args...]]...

Global options come first; everything from the first command on is
compiled into a single KWin script and run in one go.
"""

import logging

import click
from rich.console import Console
from rich.markup import escape

from . import __version__
from .actions import ACTIONS
from .compiler import compile_script
from .config import load_settings
from .errors import KwindoError
from .logging_config import log_timing, setup_logging
from .models import Channel, RenderContext, ScriptOutput
from .protocol import decode_log
from .transport import ScriptFile, execute_script

logger = logging.getLogger("kwindo")


def _epilog() -> str:
    lines = [
        "\b",
        "Commands:",
        "  search <term>          Windows whose title, class, name and role all match <term>",
        "  getactivewindow        The active window",
    ]
    for verb, action in ACTIONS.items():
        lines.append(f"  {verb + ' <window>':<22} {action.description}")
    lines += [
        "",
        "\b",
        "Window can be specified as:",
        "  %1 - the first window in the stack (default)",
        "  %2 - the second window in the stack",
        "  %@ - all windows in the stack",
        "  <window id> - the window with the given ID",
    ]
    return "\n".join(lines)


# Option parsing stops at the first command; later dashes belong to the grammar.
CONTEXT_SETTINGS = dict(
    help_option_names=["-h", "--help"],
    allow_interspersed_args=False,
)


def emit_output(output: ScriptOutput, marker: str) -> None:
    """Forward decoded records: results to stdout, errors to stderr."""
    for record in output.records:
        if record.channel == Channel.RESULT:
            click.echo(record.payload)
        elif record.channel == Channel.ERROR:
            click.echo(record.payload, err=True)
        elif record.channel == Channel.DEBUG:
            logger.debug(f"[script] {record.payload}")

    if not output.started:
        logger.warning(f"No output from script {marker} found in the journal")
    elif not output.finished:
        logger.warning(f"Script {marker} did not report FINISH; output may be incomplete")


@click.command(context_settings=CONTEXT_SETTINGS, epilog=_epilog())
@click.option('-d', '--debug', is_flag=True, help='Enable debug output')
@click.option('-n', '--dry-run', is_flag=True,
              help="Don't actually run the script. Just print it to stdout.")
@click.version_option(__version__, prog_name="kwindo")
@click.argument('commands', nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def cli(ctx: click.Context, debug: bool, dry_run: bool, commands: tuple):
    """Control KDE Plasma windows, xdotool style, through KWin scripting."""
    if not commands:
        click.echo(ctx.get_help())
        return

    setup_logging(debug=debug)
    console = Console(stderr=True)

    try:
        settings = load_settings()

        with ScriptFile(prefix=settings.script_prefix) as script_file:
            context = RenderContext(marker=script_file.marker, debug=debug, kde5=settings.kde5)

            with log_timing("Generate KWin script", logger):
                compiled = compile_script(list(commands), context)
            logger.debug(f"Script:\n{compiled.text}")

            if dry_run:
                click.echo(compiled.text, nl=False)
                return

            script_file.write(compiled.text)
            journal = execute_script(script_file.path, settings)

    except KwindoError as e:
        console.print(f"[red]Error: {escape(e.message)}[/red]")
        if e.suggestion:
            console.print(f"[dim]{escape(e.suggestion)}[/dim]")
        logger.debug(f"Error details: {e.to_dict()}")
        ctx.exit(1)

    logger.debug("===== Output =====")
    emit_output(decode_log(journal, compiled.marker, settings.log_prefix), compiled.marker)
