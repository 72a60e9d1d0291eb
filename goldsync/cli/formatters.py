"""Renderers for quotation series printed by the CLI."""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol, TextIO

from rich.box import SIMPLE
from rich.console import Console
from rich.table import Table

from goldsync.core.models import QuotationRecord

COLUMNS = ("date", "type", "buy", "sell")


class QuotationFormatter(Protocol):
    name: str

    def render(self, records: Sequence[QuotationRecord], *, stream: TextIO) -> None: ...


@dataclass(slots=True)
class TableFormatter:
    """Rich table, prices grouped by thousands."""

    name: str = "table"
    no_color: bool = False

    def render(self, records: Sequence[QuotationRecord], *, stream: TextIO) -> None:
        console = Console(file=stream, color_system=None if self.no_color else "auto", no_color=self.no_color)
        if not records:
            console.print("No quotations in range.")
            return

        table = Table(box=SIMPLE)
        header_style = "" if self.no_color else "bold"
        table.add_column("date", header_style=header_style)
        table.add_column("type", header_style=header_style)
        table.add_column("buy", header_style=header_style, justify="right")
        table.add_column("sell", header_style=header_style, justify="right")
        for record in records:
            table.add_row(record.date, record.type, f"{record.buy:,.0f}", f"{record.sell:,.0f}")
        console.print(table)


@dataclass(slots=True)
class JSONLFormatter:
    """One JSON object per quotation."""

    name: str = "jsonl"

    def render(self, records: Sequence[QuotationRecord], *, stream: TextIO) -> None:
        for record in records:
            stream.write(json.dumps(record.model_dump(include=set(COLUMNS)), ensure_ascii=False))
            stream.write("\n")
        stream.flush()


def create_formatter(name: str, *, no_color: bool = False) -> QuotationFormatter:
    """Instantiate a formatter by name (``table`` or ``jsonl``)."""

    normalized = name.strip().lower()
    if normalized == "table":
        return TableFormatter(no_color=no_color)
    if normalized == "jsonl":
        return JSONLFormatter()
    raise ValueError(f"Unsupported format '{name}'. Available formats: table, jsonl.")


__all__ = ["COLUMNS", "JSONLFormatter", "QuotationFormatter", "TableFormatter", "create_formatter"]
