"""baselinekit CLI"""

import click

from baselinekit import __version__
from baselinekit.cli.baseline import baseline
from baselinekit.cli.cache import cache

from .debug import add_debug_option


@click.group()
@click.version_option(__version__, prog_name="baselinekit")
@click.pass_context
def cli(ctx):
    """
    Keep a local copy of the document baseline in sync with its remote.
    """
    ctx.ensure_object(dict)


cli.add_command(add_debug_option(baseline))
cli.add_command(add_debug_option(cache))

add_debug_option(cli)

if __name__ == "__main__":
    cli(obj={})
