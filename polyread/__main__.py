import json
import sys

from pathlib import Path

import click

from polyread.__version__ import __version__
from polyread.config import ConfigError, reader_config
from polyread.errors import ReaderError
from polyread.main import check_file, create_reader, describe, scan
from polyread.position import Position

FILE = click.Path(exists=True, dir_okay=False, readable=True,
                  resolve_path=True, path_type=Path)


@click.group()
@click.version_option(__version__, prog_name="polyread")
def main():
    """Decode UTF-8 files and report their code points and errors."""


@main.command("scan")
@click.argument("file", type=FILE)
@click.option("-d", "--define", multiple=True, metavar="OPTION=VALUE",
              help="reader option")
@click.option("--json", "as_json", is_flag=True,
              help="print code points as JSON objects")
@click.option("-v", "--verbose", is_flag=True)
def scan_command(file, define, as_json, verbose):
    """Print code points of FILE with their positions."""
    config = reader_config(define)
    with open(file, 'rb') as fin:
        reader = create_reader(fin, config, verbose=verbose)
        for char in scan(reader):
            if as_json:
                pos = Position(char.line, char.column, char.offset)
                obj = {"char": str(char), "code": char.code,
                       "size": char.size, "position": pos.to_dict()}
                click.echo(json.dumps(obj, ensure_ascii=False))
            else:
                click.echo(describe(char))

    # with report=collect, errors are printed once the scan is done
    errors = reader.error.errors if reader.error is not None else []
    for position, error in errors:
        click.echo(f"{file}:{position}: {error}", err=True)
    if errors:
        sys.exit(1)


@main.command("check")
@click.argument("file", type=FILE)
@click.option("-d", "--define", multiple=True, metavar="OPTION=VALUE",
              help="reader option")
@click.option("-v", "--verbose", is_flag=True)
def check_command(file, define, verbose):
    """Report encoding errors found in FILE."""
    errors = check_file(file, define, verbose=verbose)
    for position, error in errors:
        click.echo(f"{file}:{position}: {error}")
    if errors:
        sys.exit(1)


def run():
    try:
        main()
    except (ReaderError, ConfigError) as e:
        print(e, file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    run()
