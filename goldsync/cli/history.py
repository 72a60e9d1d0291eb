"""History and cache commands for the goldsync CLI."""

from __future__ import annotations

import asyncio
from dataclasses import replace
from pathlib import Path

import typer

from goldsync.core.config import GoldSyncConfig, get_default_config
from goldsync.core.data.cache import CacheReader
from goldsync.core.data.codec import RangeBounds, RangeQueryCodec
from goldsync.core.data.storage import DocumentStore, DuckDBDocumentStore
from goldsync.core.exceptions import CacheError, DataValidationError, DateParseError
from goldsync.core.models import SyncOutcome, SyncState
from goldsync.core.services import HistorySyncService, IntegrityValidator

from .utils import SYNC_FAILED_EXIT_CODE, VALIDATION_EXIT_CODE, emit_error, get_cli_options, prepare_output


def register(app: typer.Typer) -> None:
    """Register the history commands on the provided application."""

    app.command("history")(history_command)
    app.command("cache")(cache_command)


def get_history_service(config: GoldSyncConfig) -> HistorySyncService:
    """Factory hook for obtaining a :class:`HistorySyncService` instance."""

    return HistorySyncService.from_config(config)


def get_document_store(config: GoldSyncConfig) -> DocumentStore:
    """Factory hook for obtaining the configured document store."""

    return DuckDBDocumentStore(config.store.db_path, config.store.collection)


def _resolve_config(ctx: typer.Context, db: Path | None, base_url: str | None) -> GoldSyncConfig:
    config = get_cli_options(ctx).config or get_default_config()
    if db is not None:
        config = replace(config, store=replace(config.store, db_path=str(db)))
    if base_url is not None:
        config = replace(config, provider=replace(config.provider, base_url=base_url))
    return config


def _parse_bounds(config: GoldSyncConfig, from_date: str, to_date: str) -> RangeBounds:
    try:
        return RangeQueryCodec(config.tz()).bounds(from_date, to_date)
    except DateParseError as error:
        emit_error(error.message, error.error_code, details=error.details)
        raise typer.Exit(code=VALIDATION_EXIT_CODE) from error


async def _run_sync(config: GoldSyncConfig, from_date: str, to_date: str) -> SyncOutcome:
    async with get_history_service(config) as service:
        return await service.sync(from_date, to_date)


def history_command(
    ctx: typer.Context,
    from_date: str = typer.Argument(..., help="First day of the range (dd/MM/yyyy)."),
    to_date: str = typer.Argument(..., help="Last day of the range (dd/MM/yyyy)."),
    db: Path | None = typer.Option(None, "--db", help="DuckDB cache file."),
    base_url: str | None = typer.Option(None, "--base-url", help="Provider base URL."),
) -> None:
    """Serve the gold price history for a range, refilling the cache when needed."""

    config = _resolve_config(ctx, db, base_url)
    _parse_bounds(config, from_date, to_date)

    outcome = asyncio.run(_run_sync(config, from_date, to_date))

    formatter, stream, stack, _ = prepare_output(ctx)
    try:
        if outcome.records is not None:
            formatter.render(outcome.records, stream=stream)
    finally:
        stack.close()

    if outcome.state is SyncState.FAILED:
        emit_error(outcome.error or "History sync failed", "SYNC_FAILED", details={"from_date": from_date, "to_date": to_date})
        raise typer.Exit(code=SYNC_FAILED_EXIT_CODE)
    if outcome.write.error:
        emit_error(outcome.write.error, "CACHE_WRITE_FAILED", details={"records": len(outcome.records or ())})


def cache_command(
    ctx: typer.Context,
    from_date: str = typer.Argument(..., help="First day of the range (dd/MM/yyyy)."),
    to_date: str = typer.Argument(..., help="Last day of the range (dd/MM/yyyy)."),
    db: Path | None = typer.Option(None, "--db", help="DuckDB cache file."),
) -> None:
    """Show what the cache holds for a range, without contacting the provider."""

    config = _resolve_config(ctx, db, None)
    bounds = _parse_bounds(config, from_date, to_date)

    store = get_document_store(config)
    try:
        records = asyncio.run(CacheReader(store).read(bounds))
    except (CacheError, DataValidationError) as error:
        emit_error(error.message, error.error_code, details=error.details)
        raise typer.Exit(code=SYNC_FAILED_EXIT_CODE) from error
    finally:
        store.close()

    formatter, stream, stack, _ = prepare_output(ctx)
    try:
        formatter.render(records, stream=stream)
    finally:
        stack.close()

    if records:
        report = IntegrityValidator(config.integrity.max_valid_price).inspect(records)
        verdict = "suspect" if report.suspect else "trusted"
        typer.echo(
            f"{report.record_count} cached records, {report.outlier_count} above {report.threshold:,.0f}: {verdict}",
            err=True,
        )
    else:
        typer.echo("0 cached records: a history request would refill this range", err=True)
