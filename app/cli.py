"""CLI tools for warranty claim reporting."""

from pathlib import Path

import click

from app.core.config import settings
from app.db.session import SessionLocal
from app.services import claim_service
from app.services.claim_export_service import export_claims_csv, generate_export_filename
from app.services.claim_selection_service import ClaimsFilter, apply_filter
from app.services.homeowner_attribution_service import ALL_BUILDER_GROUPS
from app.services.warranty_analytics_service import AnalyticsOptions, compute_warranty_metrics


@click.group()
def cli():
    """Warranty claims CLI tools."""
    pass


@cli.command()
@click.option("--builder-group", default=ALL_BUILDER_GROUPS, help="Builder group id (default: all)")
@click.option(
    "--as-of",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Reference date for the active-homeowner window (default: now)",
)
def warranty_metrics(builder_group: str, as_of):
    """
    Print the warranty analytics snapshot.

    Example:
        python -m app.cli warranty-metrics --builder-group all --as-of 2024-06-30
    """
    db = SessionLocal()
    try:
        claims, homeowners, messages = claim_service.load_analytics_inputs(db)
    finally:
        db.close()

    metrics = compute_warranty_metrics(
        claims,
        homeowners,
        messages,
        builder_group,
        as_of=as_of,
        options=AnalyticsOptions.from_settings(settings),
    )

    click.echo(f"Builder group:           {metrics.builder_group_id}")
    click.echo(f"Active homeowners:       {metrics.active_homeowners}")
    click.echo(f"Claimants:               {metrics.claimants}")
    click.echo(f"Approved claimants:      {metrics.approved_claimants}")
    click.echo(
        f"Avg CBS cycle time:      {metrics.avg_cbs_cycle_time} business days "
        f"({metrics.cbs_cycle_time.sample_size} claims)"
    )
    click.echo(
        f"Avg contractor cycle:    {metrics.avg_contractor_cycle_time} business days "
        f"({metrics.contractor_cycle_time.sample_size} claims)"
    )
    click.echo(f"Cycle time split:        {metrics.cbs_percentage}% CBS / {metrics.contractor_percentage}% contractor")
    click.echo(f"Needs attention:         {len(metrics.needs_attention_claims)}")
    click.echo(f"In process and new:      {len(metrics.in_process_and_new_claims)}")
    if metrics.exclusions:
        click.echo(f"⚠️  {len(metrics.exclusions)} cycle time measurement(s) skipped:")
        for exclusion in metrics.exclusions:
            click.echo(f"   {exclusion.claim_id} [{exclusion.metric.value}] {exclusion.reason.value}")


@cli.command()
@click.option(
    "--filter",
    "claims_filter",
    type=click.Choice([f.value for f in ClaimsFilter]),
    default=ClaimsFilter.ALL.value,
    help="Which claims to export",
)
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output file (default: Warranty_Claims_<Filter>_<date>.csv)",
)
def export_claims(claims_filter: str, output: Path | None):
    """
    Export claims to CSV.

    Example:
        python -m app.cli export-claims --filter Open
    """
    db = SessionLocal()
    try:
        records = claim_service.list_claim_records(db)
    finally:
        db.close()

    payload = export_claims_csv(records, claims_filter)
    path = output or Path(generate_export_filename(claims_filter))
    path.write_text(payload, encoding="utf-8", newline="")
    click.echo(f"✅ Exported {len(apply_filter(records, claims_filter))} claim(s) to {path}")


if __name__ == "__main__":
    cli()
