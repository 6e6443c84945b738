"""Command-line interface for Dynamic JSON."""

import logging
from pathlib import Path
from typing import NoReturn, Optional

import click

from . import __version__
from .dynamic_json import DynamicJSON
from .types import DynamicJSONError
from .values import ABSENT


def _common_options(command):
    command = click.option('--indent', default=2, show_default=True,
                           help='Indentation of JSON output (0 for compact)')(command)
    command = click.option('--output', '-o', type=click.Path(dir_okay=False, path_type=Path),
                           help='Write the result to a file instead of stdout')(command)
    command = click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')(command)
    return command


def _engine(verbose: bool, **options) -> DynamicJSON:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    return DynamicJSON(**options)


def _load(engine: DynamicJSON, path: Path):
    return engine.loads(path.read_text(encoding='utf-8'))


def _emit(text: str, output: Optional[Path]) -> None:
    if output is None:
        click.echo(text)
        return
    output.write_text(text + "\n", encoding='utf-8')
    click.echo(f"✅ Wrote result to {output}", err=True)


def _fail(error: Exception) -> NoReturn:
    click.echo(f"❌ Error: {error}", err=True)
    raise SystemExit(1)


@click.group()
@click.version_option(version=__version__)
def main():
    """Dynamic JSON - diff, patch, merge and navigate JSON documents."""
    pass


@main.command()
@click.argument('original', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument('updated', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@_common_options
def diff(original: Path, updated: Path, verbose: bool, output: Optional[Path], indent: int):
    """Print the merge patch that turns ORIGINAL into UPDATED."""
    engine = _engine(verbose)
    try:
        patch = engine.diff(_load(engine, original), _load(engine, updated))
    except (DynamicJSONError, ValueError, OSError) as e:
        _fail(e)

    if patch is ABSENT:
        _emit("No changes", output)
    else:
        _emit(engine.dumps(patch, indent=indent or None), output)


@main.command()
@click.argument('original', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument('patch_file', metavar='PATCH',
                type=click.Path(exists=True, dir_okay=False, path_type=Path))
@_common_options
def patch(original: Path, patch_file: Path, verbose: bool, output: Optional[Path], indent: int):
    """Apply the merge patch PATCH to ORIGINAL and print the result."""
    engine = _engine(verbose)
    try:
        result = engine.apply_patch(_load(engine, original), _load(engine, patch_file))
    except (DynamicJSONError, ValueError, OSError) as e:
        _fail(e)

    _emit(engine.dumps(result, indent=indent or None), output)


@main.command()
@click.argument('original', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument('updated', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--format', 'output_format', type=click.Choice(['text', 'json']), default='text',
              show_default=True, help='Output format for the change list')
@_common_options
def changes(original: Path, updated: Path, output_format: str, verbose: bool,
            output: Optional[Path], indent: int):
    """List every change between ORIGINAL and UPDATED with its path."""
    engine = _engine(verbose)
    try:
        entries = engine.diff_with_paths(_load(engine, original), _load(engine, updated))
    except (DynamicJSONError, ValueError, OSError) as e:
        _fail(e)

    if output_format == 'json':
        _emit(engine.dumps([entry.to_dict() for entry in entries], indent=indent or None), output)
    elif not entries:
        _emit("No changes", output)
    else:
        _emit("\n".join(entry.describe() for entry in entries), output)


@main.command()
@click.argument('left', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument('right', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--concat-arrays', is_flag=True, help='Concatenate arrays instead of replacing them')
@_common_options
def merge(left: Path, right: Path, concat_arrays: bool, verbose: bool,
          output: Optional[Path], indent: int):
    """Deep-merge RIGHT over LEFT and print the result."""
    engine = _engine(verbose, concat_arrays=concat_arrays)
    try:
        result = engine.merge(_load(engine, left), _load(engine, right))
    except (DynamicJSONError, ValueError, OSError) as e:
        _fail(e)

    _emit(engine.dumps(result, indent=indent or None), output)


@main.command()
@click.argument('input_file', metavar='FILE',
                type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument('path')
@_common_options
def get(input_file: Path, path: str, verbose: bool, output: Optional[Path], indent: int):
    """Print the value at PATH in FILE, e.g. /user/orders[0]/id."""
    engine = _engine(verbose)
    try:
        value = engine.get(_load(engine, input_file), path)
    except (DynamicJSONError, ValueError, OSError) as e:
        _fail(e)

    _emit(engine.dumps(value, indent=indent or None), output)


@main.command(name='check-path')
@click.argument('input_file', metavar='FILE',
                type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument('path')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
def check_path(input_file: Path, path: str, verbose: bool):
    """Print whether PATH resolves in FILE; exits with 1 when it does not."""
    engine = _engine(verbose)
    try:
        document = _load(engine, input_file)
    except (DynamicJSONError, ValueError, OSError) as e:
        _fail(e)

    if engine.is_valid_for(document, path):
        click.echo("valid")
    else:
        click.echo("invalid")
        raise SystemExit(1)


if __name__ == '__main__':
    main()
