import logging
import traceback
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from splitapi.config import (
    DEFAULT_FILENAMES,
    DocumentConfig,
    SplitConfig,
    create_default_config,
    get_config,
)
from splitapi.exceptions import SplitError
from splitapi.schema.loader import SchemaLoader
from splitapi.splitter import NamespaceSplitter, SplitResult
from splitapi.splitting.closure import find_dangling_references
from splitapi.splitting.grouper import DEFAULT_SEPARATOR

console = Console()
app = typer.Typer(
    name='splitapi',
    help='Split a Swagger/OpenAPI document into per-namespace client modules',
    no_args_is_help=True,
)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(message)s',
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _print_result(result: SplitResult) -> None:
    for group in result.succeeded:
        console.print(f'Generated: {group.path}')
    for group in result.failed:
        console.print(f'[red]Failed:[/red] {group.key}: {group.error}')


@app.command()
def generate(
    config: Annotated[
        str | None,
        typer.Option(
            '--config', '-c', help='Path to configuration file (YAML or JSON)'
        ),
    ] = None,
    source: Annotated[
        str | None,
        typer.Option('--source', '-s', help='URL or path of the API description'),
    ] = None,
    output: Annotated[
        str | None,
        typer.Option('--output', '-o', help='Directory for the generated modules'),
    ] = None,
    fail_fast: Annotated[
        bool, typer.Option('--fail-fast', help='Stop at the first failing namespace')
    ] = False,
    verbose: Annotated[
        bool, typer.Option('--verbose', '-v', help='Show debug logging')
    ] = False,
) -> None:
    """Generate one module per namespace of an API description.

    Either pass --source and --output, or a configuration file. Without
    both, splitapi.yaml, splitapi.yml, splitapi.json or [tool.splitapi] in
    pyproject.toml is used.

    Examples:
        splitapi generate -s https://api.example.com/swagger/docs/v1 -o ./src/api
        splitapi generate --config my-config.yaml
    """
    _configure_logging(verbose)

    try:
        if source or output:
            if not (source and output):
                raise typer.BadParameter('--source and --output must be given together')
            split_config = SplitConfig(
                documents=[DocumentConfig(source=source, output=output)]
            )
        else:
            split_config = get_config(config)

        for document_config in split_config.documents:
            if fail_fast:
                document_config = document_config.model_copy(update={'fail_fast': True})

            with Progress(
                SpinnerColumn(),
                TextColumn('[progress.description]{task.description}'),
                console=console,
            ) as progress:
                task = progress.add_task(
                    f'Splitting {document_config.source} into {document_config.output}...',
                    total=None,
                )
                try:
                    result = NamespaceSplitter(document_config).run()
                except SplitError as e:
                    if e.result is not None:
                        _print_result(e.result)
                    raise

                progress.update(
                    task, description=f'Split completed for {document_config.source}!'
                )

            _print_result(result)
            if not result.groups:
                console.print(
                    f'[yellow]Warning:[/yellow] no definitions found in {document_config.source}'
                )

        console.print('[green]Successfully generated code[/green]')

    except typer.BadParameter:
        raise
    except Exception as e:
        console.print(f'[red]Error:[/red] {str(e)}')
        traceback.print_exc()
        raise typer.Exit(1)


@app.command()
def inspect(
    source: Annotated[str, typer.Argument(help='URL or path of the API description')],
    separator: Annotated[
        str, typer.Option('--separator', help='Namespace separator')
    ] = DEFAULT_SEPARATOR,
    verbose: Annotated[
        bool, typer.Option('--verbose', '-v', help='Show debug logging')
    ] = False,
) -> None:
    """Show the namespace groups of an API description without writing files."""
    _configure_logging(verbose)

    try:
        splitter = NamespaceSplitter(
            DocumentConfig(source=source, output='.', namespace_separator=separator),
            loader=SchemaLoader(),
        )
        groups = splitter.plan()
        dangling = find_dangling_references(splitter.document)
    except Exception as e:
        console.print(f'[red]Error:[/red] {str(e)}')
        raise typer.Exit(1)

    table = Table(title=f'{splitter.document.info.title} {splitter.document.info.version}')
    table.add_column('Namespace')
    table.add_column('Definitions', justify='right')
    table.add_column('Closure', justify='right')
    table.add_column('Dangling references')

    for group in groups:
        isolated = splitter.isolate(group)
        missing = sorted(
            {name for member in group for name in dangling.get(member, [])}
        )
        table.add_row(group.key, str(len(group)), str(len(isolated)), ', '.join(missing))

    console.print(table)


@app.command()
def init(
    path: Annotated[
        str, typer.Option('--output', '-o', help='Where to write the configuration')
    ] = DEFAULT_FILENAMES[0],
    force: Annotated[
        bool, typer.Option('--force', help='Overwrite an existing file')
    ] = False,
) -> None:
    """Create a starter configuration file."""
    config_path = Path(path)
    if config_path.exists() and not force:
        console.print(f'[red]Error:[/red] {config_path} already exists (use --force)')
        raise typer.Exit(1)

    config_path.write_text(
        yaml.safe_dump(create_default_config(), sort_keys=False), encoding='utf-8'
    )
    console.print(f'Created {config_path}')


@app.command()
def version() -> None:
    """Show the version of splitapi."""
    from splitapi import __version__

    console.print(f'splitapi version: {__version__}')


if __name__ == '__main__':
    app()
