#!/usr/bin/env python3
"""
View and manage stored claims.

Usage:
    python view_claims.py                            # List all claims
    python view_claims.py 123456789012               # View claim details
    python view_claims.py --status New               # Filter by status
    python view_claims.py --set-status 123456789012 Approved
    python view_claims.py --delete 123456789012
    python view_claims.py --stats                    # Show statistics
"""

import argparse
import json
import os
import sys
from collections import Counter
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv
from rich import box
from rich.console import Console
from rich.table import Table

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from src.intake.schema import ClaimRecord
from src.storage import SQLiteClaimStore, get_claim_store

console = Console()


def format_datetime(dt: datetime) -> str:
    """Format a timestamp for display."""
    return dt.strftime("%Y-%m-%d %H:%M")


def truncate(text: str, max_len: int = 50) -> str:
    """Truncate text with ellipsis."""
    if not text:
        return ""
    text = str(text)
    if len(text) > max_len:
        return text[:max_len-3] + "..."
    return text


def status_markup(status: str) -> str:
    """Color-code a status value."""
    lowered = status.lower()
    if lowered == "approved":
        return f"[green]{status}[/green]"
    if lowered in ("rejected", "denied"):
        return f"[red]{status}[/red]"
    if lowered in ("new", "in review", "pending"):
        return f"[yellow]{status}[/yellow]"
    return status


def make_summary_table(claims: list[ClaimRecord]) -> Table:
    """Create summary table with key claim info."""
    table = Table(
        title="📋 All Claims",
        box=box.ROUNDED,
        header_style="bold cyan",
    )

    table.add_column("Claim ID", style="bold")
    table.add_column("Created", style="dim")
    table.add_column("Status")
    table.add_column("Name")
    table.add_column("Policy #")
    table.add_column("Incident")
    table.add_column("Vehicle")
    table.add_column("Severity")
    table.add_column("Est. Cost")

    for claim in claims:
        assessment = claim.damage_assessment
        table.add_row(
            claim.id,
            format_datetime(claim.created_at),
            status_markup(claim.status),
            truncate(claim.customer_name, 20),
            truncate(claim.policy_number, 15),
            claim.incident_type.value,
            f"{claim.vehicle_brand} ({claim.vehicle_type.value})",
            assessment.severity if assessment else "-",
            f"${assessment.estimated_cost:,.0f}" if assessment else "-",
        )

    return table


def make_detail_table(claim: ClaimRecord) -> Table:
    """Detailed view of a single claim."""
    table = Table(
        title=f"📋 Claim {claim.id}",
        box=box.ROUNDED,
        show_header=False,
        padding=(0, 1),
    )
    table.add_column("Field", style="bold cyan", width=20)
    table.add_column("Value", overflow="fold")

    table.add_row("Status", status_markup(claim.status))
    table.add_row("Created", format_datetime(claim.created_at))

    table.add_row("", "")
    table.add_row("[bold]CUSTOMER[/bold]", "")
    table.add_row("Name", claim.customer_name)
    table.add_row("Email", claim.email)
    table.add_row("Phone", claim.phone)
    table.add_row("Policy #", claim.policy_number)

    table.add_row("", "")
    table.add_row("[bold]INCIDENT[/bold]", "")
    table.add_row("Date", claim.incident_date)
    table.add_row("Type", claim.incident_type.value)
    table.add_row("Vehicle", f"{claim.vehicle_brand} ({claim.vehicle_type.value})")
    table.add_row("Description", claim.description)

    table.add_row("", "")
    table.add_row("[bold]EVIDENCE[/bold]", "")
    table.add_row("Photo", "Yes" if claim.image else "No")

    assessment = claim.damage_assessment
    if assessment:
        table.add_row("", "")
        table.add_row("[bold]DAMAGE ASSESSMENT[/bold]", "")
        table.add_row("Severity", assessment.severity)
        table.add_row("Est. Cost", f"${assessment.estimated_cost:,.2f}")
        table.add_row("Repair Time", f"{assessment.repair_time:g}")
        table.add_row("Notes", assessment.notes or "-")

    return table


def print_stats(store: SQLiteClaimStore):
    """Print database statistics."""
    claims = store.list_all()
    by_status = Counter(c.status for c in claims)
    by_type = Counter(c.incident_type.value for c in claims)

    table = Table(title="📊 Claim Statistics", box=box.ROUNDED, show_header=False)
    table.add_column("Metric", style="bold cyan")
    table.add_column("Count", justify="right")

    table.add_row("Total Claims", str(store.count()))
    table.add_row("With Assessment", str(sum(1 for c in claims if c.damage_assessment)))
    for status, count in sorted(by_status.items()):
        table.add_row(f"Status: {status}", str(count))
    for incident_type, count in sorted(by_type.items()):
        table.add_row(f"Incident: {incident_type}", str(count))

    console.print(table)
    console.print(f"[dim]Database: {store.db_path}[/dim]")


def main():
    load_dotenv()

    parser = argparse.ArgumentParser(description="View and manage stored claims")
    parser.add_argument("claim_id", nargs="?", help="Specific claim ID to view")
    parser.add_argument("--status", help="Filter by status")
    parser.add_argument("--set-status", nargs=2, metavar=("CLAIM_ID", "STATUS"), help="Change a claim's status")
    parser.add_argument("--delete", metavar="CLAIM_ID", help="Delete a claim")
    parser.add_argument("--stats", action="store_true", help="Show statistics")
    parser.add_argument("--export", action="store_true", help="Export claim as JSON")
    parser.add_argument("--db", help="SQLite database path (default: CLAIMS_DB_PATH)")

    args = parser.parse_args()

    store = SQLiteClaimStore(Path(args.db)) if args.db else get_claim_store()

    if args.stats:
        print_stats(store)
        return

    if args.set_status:
        claim_id, status = args.set_status
        updated = store.update_status(claim_id, status)
        if updated is None:
            console.print(f"[red]Claim not found: {claim_id}[/red]")
            sys.exit(1)
        console.print(make_detail_table(updated))
        return

    if args.delete:
        if not store.delete(args.delete):
            console.print(f"[red]Claim not found: {args.delete}[/red]")
            sys.exit(1)
        console.print(f"Deleted claim {args.delete}")
        return

    if args.claim_id:
        claim = store.get(args.claim_id)
        if claim is None:
            console.print(f"[red]Claim not found: {args.claim_id}[/red]")
            sys.exit(1)
        if args.export:
            print(json.dumps(claim.to_storage(), indent=2))
        else:
            console.print(make_detail_table(claim))
        return

    claims = store.list_all(status=args.status)
    if not claims:
        console.print("\nNo claims found.")
        return
    console.print(make_summary_table(claims))
    console.print(f"Total: {len(claims)} claim(s)")


if __name__ == "__main__":
    main()
