"""Output helpers for the amortisation calculator.

This module renders schedules and their summary figures as a text table,
tab-separated values, JSON or CSV. Rendering only reads a ``Schedule``;
no calculations happen here.
"""

from __future__ import annotations

import csv
import json
from decimal import Decimal
from pathlib import Path
from typing import IO, Iterable, List, Optional

from .data_models import Payment, Schedule, ScheduleMeta

TSV_HEADERS = ["Month", "Payment", "Principal", "Interest", "Remaining Balance", "Days"]


def _percent(value: Optional[Decimal]) -> str:
    if value is None:
        return "n/a"
    return f"{value * 100:.4f}%"


def print_summary(meta: ScheduleMeta, file: Optional[IO[str]] = None) -> None:
    """Print the schedule summary in a human‑readable format."""
    print("Summary", file=file)
    print("-" * 72, file=file)
    print(f"Total payable      : {meta.total_payable:.2f}", file=file)
    print(f"Total principal    : {meta.total_principal:.2f}", file=file)
    print(f"Total interest     : {meta.total_interest:.2f}", file=file)
    print(f"Annual rate used   : {_percent(meta.annual_rate)}", file=file)
    print(f"Daily rate         : {meta.daily_rate:.10f}", file=file)
    print(f"APR (calculated)   : {_percent(meta.calculated_apr)}", file=file)
    print(f"EAR (calculated)   : {_percent(meta.calculated_ear)}", file=file)
    print("-" * 72, file=file)


def print_schedule(payments: Iterable[Payment], file: Optional[IO[str]] = None) -> None:
    """Print the schedule as a fixed-width table."""
    print("Amortisation Schedule:", file=file)
    print("Month | Payment   | Principal | Interest | Remaining Balance | Days", file=file)
    for p in payments:
        print(
            f"{p.month:5d} | {p.payment:9.2f} | {p.principal:9.2f} | "
            f"{p.interest:8.2f} | {p.balance:17.2f} | {p.days:4d}",
            file=file,
        )


def print_tsv(payments: Iterable[Payment], file: Optional[IO[str]] = None) -> None:
    print("\t".join(TSV_HEADERS), file=file)
    for p in payments:
        row = [
            str(p.month),
            f"{p.payment:.2f}",
            f"{p.principal:.2f}",
            f"{p.interest:.2f}",
            f"{p.balance:.2f}",
            str(p.days),
        ]
        print("\t".join(row), file=file)


def schedule_to_json(schedule: Schedule) -> str:
    """Serialise the schedule to JSON, keeping decimals as exact strings."""
    return json.dumps(schedule.to_dict(), indent=2)


def export_to_json(path: Path, schedule: Schedule) -> None:
    """Export schedule and summary to a JSON file."""
    with path.open("w", encoding="utf-8") as f:
        f.write(schedule_to_json(schedule))


def export_to_csv(path: Path, payments: Iterable[Payment]) -> None:
    """Export the payment rows to a CSV file."""
    header: List[str] = ["Month", "Payment", "Principal", "Interest", "Balance", "Days"]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for p in payments:
            writer.writerow(
                [
                    p.month,
                    str(p.payment),
                    str(p.principal),
                    str(p.interest),
                    str(p.balance),
                    p.days,
                ]
            )
