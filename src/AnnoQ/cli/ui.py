"""Click CLI interface definitions.

Defines the command-line interface structure and routes commands to the
command runner. Region and rsID lookups go to the backend named in
``api.backend``; gene lookups, counts and the attribute listing exist only on
the REST backend, and ``search`` always targets the search-engine backend.
"""

from __future__ import annotations

from functools import wraps
from pathlib import Path
from typing import Any, Callable

import click
from dotenv import load_dotenv

from AnnoQ.cli.runner import CommandRunner
from AnnoQ.config import AppConfig, load_config_with_defaults
from AnnoQ.config.app import DEFAULT_CONFIG_PATH
from AnnoQ.core.fields import normalize_fields
from AnnoQ.core.models import PaginationWindow
from AnnoQ.core.query import (
    RangeFilter,
    add_filter,
    exists_filter,
    new_query,
    range_filter,
    term_filter,
    with_keyword,
    with_source,
)
from AnnoQ.renderers import OUTPUT_FORMATS


@click.group(help="AnnoQ: query SNP annotations from the AnnoQ service.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=DEFAULT_CONFIG_PATH,
    show_default=True,
    help="Path to YAML config file.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path) -> None:
    """CLI entry group.

    Loads environment variables from .env file before processing config. The
    selected file is layered over the defaults (see ``load_config_with_defaults``).
    """
    load_dotenv()

    ctx.obj = load_config_with_defaults(config_path)


def _output_option(func: Callable[..., Any]) -> Callable[..., Any]:
    return click.option(
        "--format",
        "output_format",
        type=click.Choice(OUTPUT_FORMATS),
        default="json",
        show_default=True,
        help="Output format.",
    )(func)


def _lookup_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach field selection, filter and pagination options."""
    options = [
        click.option(
            "--fields",
            "-f",
            "fields",
            multiple=True,
            help="Field to return (repeatable), or one JSON text / JSON file path.",
        ),
        click.option(
            "--filter-field",
            "filter_fields",
            multiple=True,
            help="Field that must be non-empty (repeatable).",
        ),
        click.option("--from", "pagination_from", type=int, default=0, show_default=True, help="Pagination offset."),
        click.option("--size", "pagination_size", type=int, default=None, help="Page size (default: api.page_size)."),
        click.option("--all", "fetch_all", is_flag=True, help="Download every match; pagination is ignored."),
        _output_option,
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _fields_arg(fields: tuple[str, ...]) -> Any:
    """Map repeated ``--fields`` values onto the accepted field forms."""
    if not fields:
        return None
    if len(fields) == 1:
        # single value may be JSON text, a file path or one field name
        value = fields[0].strip()
        if value.startswith("{") or Path(value).is_file():
            return value
    return list(fields)


def _runner(func: Callable[..., Any]) -> Callable[..., Any]:
    @wraps(func)
    def wrapper(ctx: click.Context, *args: Any, **kwargs: Any) -> None:
        return func(ctx, CommandRunner(ctx.obj), *args, **kwargs)

    return click.pass_context(wrapper)


@cli.command("attributes")
@_output_option
@_runner
def attributes_cmd(ctx: click.Context, runner: CommandRunner, output_format: str) -> None:
    """List the SNP attributes known to the service."""
    runner.run(
        action=ctx.command.name,
        backend="rest",
        call=lambda client: client.snp_attributes(),
        output_format=output_format,
    )


@cli.command("region")
@click.argument("chromosome")
@click.option("--start", type=int, default=1, show_default=True)
@click.option("--end", type=int, default=100000, show_default=True)
@_lookup_options
@_runner
def region_cmd(
    ctx: click.Context,
    runner: CommandRunner,
    chromosome: str,
    start: int,
    end: int,
    fields: tuple[str, ...],
    filter_fields: tuple[str, ...],
    pagination_from: int,
    pagination_size: int | None,
    fetch_all: bool,
    output_format: str,
) -> None:
    """Search SNPs by chromosome and position range."""
    cfg: AppConfig = ctx.obj
    size = cfg.api.page_size if pagination_size is None else pagination_size
    if cfg.api.backend == "graphql":
        call = lambda client: client.region_query(  # noqa: E731
            chromosome, start, end, _graphql_annotations(fields)
        )
        backend = "graphql"
    else:
        call = lambda client: client.region_query(  # noqa: E731
            chromosome,
            start,
            end,
            fields=_fields_arg(fields),
            filter_fields=filter_fields,
            pagination_from=pagination_from,
            pagination_size=size,
            fetch_all=fetch_all,
        )
        backend = "rest"
    runner.run(action=ctx.command.name, backend=backend, call=call, output_format=output_format)


@cli.command("rsids")
@click.argument("rsids", nargs=-1, required=True)
@_lookup_options
@_runner
def rsids_cmd(
    ctx: click.Context,
    runner: CommandRunner,
    rsids: tuple[str, ...],
    fields: tuple[str, ...],
    filter_fields: tuple[str, ...],
    pagination_from: int,
    pagination_size: int | None,
    fetch_all: bool,
    output_format: str,
) -> None:
    """Search SNPs by rsID (space- or comma-separated)."""
    cfg: AppConfig = ctx.obj
    size = cfg.api.page_size if pagination_size is None else pagination_size
    ids = [part.strip() for value in rsids for part in value.split(",") if part.strip()]
    if cfg.api.backend == "graphql":
        if len(ids) == 1:
            call = lambda client: client.rsid_query(ids[0], _graphql_annotations(fields))  # noqa: E731
        else:
            call = lambda client: client.rsids_query(ids, _graphql_annotations(fields))  # noqa: E731
        backend = "graphql"
    else:
        call = lambda client: client.rsids_query(  # noqa: E731
            ids,
            fields=_fields_arg(fields),
            filter_fields=filter_fields,
            pagination_from=pagination_from,
            pagination_size=size,
            fetch_all=fetch_all,
        )
        backend = "rest"
    runner.run(action=ctx.command.name, backend=backend, call=call, output_format=output_format)


@cli.command("gene")
@click.argument("gene")
@_lookup_options
@_runner
def gene_cmd(
    ctx: click.Context,
    runner: CommandRunner,
    gene: str,
    fields: tuple[str, ...],
    filter_fields: tuple[str, ...],
    pagination_from: int,
    pagination_size: int | None,
    fetch_all: bool,
    output_format: str,
) -> None:
    """Search SNPs by gene id, gene symbol or UniProt id."""
    size = ctx.obj.api.page_size if pagination_size is None else pagination_size
    runner.run(
        action=ctx.command.name,
        backend="rest",
        call=lambda client: client.gene_query(
            gene,
            fields=_fields_arg(fields),
            filter_fields=filter_fields,
            pagination_from=pagination_from,
            pagination_size=size,
            fetch_all=fetch_all,
        ),
        output_format=output_format,
    )


@cli.command("count-region")
@click.argument("chromosome")
@click.option("--start", type=int, default=1, show_default=True)
@click.option("--end", type=int, default=100000, show_default=True)
@click.option("--filter-field", "filter_fields", multiple=True)
@_output_option
@_runner
def count_region_cmd(
    ctx: click.Context,
    runner: CommandRunner,
    chromosome: str,
    start: int,
    end: int,
    filter_fields: tuple[str, ...],
    output_format: str,
) -> None:
    """Count SNPs in a chromosome region."""
    runner.run(
        action=ctx.command.name,
        backend="rest",
        call=lambda client: client.count_region(chromosome, start, end, filter_fields=filter_fields),
        output_format=output_format,
    )


@cli.command("count-rsids")
@click.argument("rsids", nargs=-1, required=True)
@click.option("--filter-field", "filter_fields", multiple=True)
@_output_option
@_runner
def count_rsids_cmd(
    ctx: click.Context,
    runner: CommandRunner,
    rsids: tuple[str, ...],
    filter_fields: tuple[str, ...],
    output_format: str,
) -> None:
    """Count SNPs matching the given rsIDs."""
    runner.run(
        action=ctx.command.name,
        backend="rest",
        call=lambda client: client.count_rsids(",".join(rsids), filter_fields=filter_fields),
        output_format=output_format,
    )


@cli.command("count-gene")
@click.argument("gene")
@click.option("--filter-field", "filter_fields", multiple=True)
@_output_option
@_runner
def count_gene_cmd(
    ctx: click.Context,
    runner: CommandRunner,
    gene: str,
    filter_fields: tuple[str, ...],
    output_format: str,
) -> None:
    """Count SNPs associated with a gene product."""
    runner.run(
        action=ctx.command.name,
        backend="rest",
        call=lambda client: client.count_gene(gene, filter_fields=filter_fields),
        output_format=output_format,
    )


@cli.command("search")
@click.option("--exists", "exists_fields", multiple=True, help="Field that must exist (repeatable).")
@click.option("--term", "terms", multiple=True, help="FIELD=VALUE equality filter (repeatable).")
@click.option("--range", "ranges", multiple=True, help="FIELD:GT:LT range filter; leave a bound empty to omit it.")
@click.option("--keyword", default=None, help="Full-text keyword (cannot be combined with filters).")
@click.option("--source", "source_fields", multiple=True, help="Field to return (repeatable).")
@click.option("--from", "pagination_from", type=int, default=0, show_default=True)
@click.option("--size", "pagination_size", type=int, default=None)
@_output_option
@_runner
def search_cmd(
    ctx: click.Context,
    runner: CommandRunner,
    exists_fields: tuple[str, ...],
    terms: tuple[str, ...],
    ranges: tuple[str, ...],
    keyword: str | None,
    source_fields: tuple[str, ...],
    pagination_from: int,
    pagination_size: int | None,
    output_format: str,
) -> None:
    """Run a search-engine query built from filters or a keyword."""
    size = ctx.obj.api.page_size if pagination_size is None else pagination_size

    def call(client: Any) -> Any:
        query = new_query()
        if keyword:
            query = with_keyword(query, keyword)
        for field in exists_fields:
            query = add_filter(query, exists_filter(field))
        for spec in terms:
            field, sep, value = spec.partition("=")
            if not sep:
                raise click.BadParameter(f"expected FIELD=VALUE, got {spec!r}", param_hint="--term")
            query = add_filter(query, term_filter(field, value))
        for spec in ranges:
            query = add_filter(query, _parse_range(spec))
        if source_fields:
            query = with_source(query, source_fields)
        return client.execute_search(query, PaginationWindow(pagination_from, size))

    runner.run(action=ctx.command.name, backend="search", call=call, output_format=output_format)


def _parse_range(spec: str) -> RangeFilter:
    parts = spec.split(":")
    if len(parts) != 3:
        raise click.BadParameter(f"expected FIELD:GT:LT, got {spec!r}", param_hint="--range")
    field, gt, lt = parts
    try:
        return range_filter(field, gt=_number(gt), lt=_number(lt))
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--range") from e


def _number(text: str) -> float | int | None:
    text = text.strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        return float(text)


def _graphql_annotations(fields: tuple[str, ...]) -> list[str]:
    spec = normalize_fields(_fields_arg(fields))
    if spec is None:
        raise click.UsageError("the GraphQL backend needs at least one --fields value")
    return list(spec.names)
