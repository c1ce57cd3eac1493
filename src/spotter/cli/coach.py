#!/usr/bin/env python3
"""
Spotter CLI

Command-line interface for the workout generation engine.

Usage:
    spotter plan PROFILE [--week N] [--json] [--exclude ID ...] [--strict-equipment]
    spotter splits PROFILE
    spotter safety PROFILE
    spotter media EXERCISE_ID [--premium] [--provider ID]
"""

import json
import logging
from typing import Optional, Tuple

import click

from spotter.catalog import load_catalog
from spotter.config import Settings, load_settings
from spotter.engine import (
    GenerationOptions,
    SafetyProfileFilter,
    WorkoutPlanner,
    format_program_text,
    select_optimal_split,
)
from spotter.exceptions import SpotterError
from spotter.media import AUTO, available_libraries, media_sources, resolve_media_url
from spotter.profile import UserSafetyProfile, load_profile


def _fail(message: str) -> None:
    click.echo(f"❌ {message}", err=True)
    raise SystemExit(1)


@click.group()
@click.option('--config', 'config_path', type=click.Path(dir_okay=False), help='Path to spotter.yaml')
@click.option('--verbose', '-v', is_flag=True, help='Debug logging')
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[str], verbose: bool):
    """
    Spotter - Deterministic Workout Programs

    Safety-first weekly plans from a profile and an exercise catalog.
    """
    try:
        settings = load_settings(config_path)
    except SpotterError as e:
        _fail(str(e))

    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, settings.log_level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    ctx.obj = settings


@cli.command()
@click.argument('profile_path', type=click.Path(exists=True, dir_okay=False))
@click.option('--week', default=1, type=click.IntRange(min=1), help='Program week (1 = first week)')
@click.option('--json', 'as_json', is_flag=True, help='Emit JSON instead of text')
@click.option('--exclude', 'exclude_ids', multiple=True, help='Exercise id to omit (repeatable)')
@click.option('--strict-equipment', is_flag=True, help='Only use exercises with your equipment')
@click.pass_obj
def plan(
    settings: Settings,
    profile_path: str,
    week: int,
    as_json: bool,
    exclude_ids: Tuple[str, ...],
    strict_equipment: bool
):
    """Generate a weekly program."""
    try:
        profile = load_profile(profile_path)
        catalog = load_catalog(settings.catalog_path)
        planner = WorkoutPlanner(resolver=settings.metadata_resolver())
        options = GenerationOptions.from_settings(
            settings,
            week_number=week,
            exclude_exercise_ids=tuple(exclude_ids),
            restrict_to_equipment=strict_equipment,
        )
        program = planner.generate(profile, catalog, options)
    except SpotterError as e:
        _fail(f"Error generating plan: {e}")

    if as_json:
        click.echo(json.dumps(program.to_dict(), indent=2, ensure_ascii=False))
    else:
        click.echo(format_program_text(program))


@cli.command()
@click.argument('profile_path', type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
def splits(settings: Settings, profile_path: str):
    """Show how every split scores for a profile."""
    try:
        profile = load_profile(profile_path)
    except SpotterError as e:
        _fail(str(e))

    selection = select_optimal_split(profile)

    click.echo("=" * 60)
    click.echo("SPLIT SELECTION")
    click.echo("=" * 60)
    click.echo(f"\nSelected: {selection.split.name} ({selection.score}/100)")

    for entry in selection.ranking:
        click.echo(f"\n{'─' * 60}")
        marker = "✓ " if entry is selection.selected else "  "
        click.echo(f"{marker}{entry.split.name} [{entry.split.split_id}]: {entry.score}/100")
        click.echo('─' * 60)
        for criterion in entry.breakdown:
            click.echo(f"  {criterion.criterion:11} {criterion.points:>3}/{criterion.max_points:<3} {criterion.detail}")

    click.echo("\n" + "=" * 60)


@cli.command()
@click.argument('profile_path', type=click.Path(exists=True, dir_okay=False))
@click.option('--limit', default=20, help='Maximum exclusions to list')
@click.pass_obj
def safety(settings: Settings, profile_path: str, limit: int):
    """Show what the safety filter removes for a profile."""
    try:
        profile = load_profile(profile_path)
        catalog = load_catalog(settings.catalog_path)
        safety_filter = SafetyProfileFilter(resolver=settings.metadata_resolver())
    except SpotterError as e:
        _fail(str(e))

    result = safety_filter.apply(catalog, UserSafetyProfile.from_profile(profile))

    click.echo("=" * 60)
    click.echo("SAFETY FILTER")
    click.echo("=" * 60)
    click.echo(f"\nCatalog: {len(catalog)} exercises")
    click.echo(f"Safe: {len(result.safe_exercises)}")
    click.echo(f"Excluded: {len(result.excluded)}")
    click.echo("Medical clearance: ", nl=False)
    if result.requires_medical_clearance:
        click.secho("REQUIRED", fg='red')
    else:
        click.secho("not required", fg='green')

    if result.warnings:
        click.echo(f"\n{'─' * 60}")
        click.echo("WARNINGS")
        click.echo('─' * 60)
        for warning in result.warnings:
            click.echo(f"  ⚠  {warning}")

    if result.excluded:
        click.echo(f"\n{'─' * 60}")
        click.echo("EXCLUDED EXERCISES")
        click.echo('─' * 60)
        for record in result.excluded[:limit]:
            click.echo(f"\n{record.exercise.name} [{record.exercise.exercise_id}]")
            for reason in record.reasons:
                click.echo(f"  - {reason}")
        if len(result.excluded) > limit:
            click.echo(f"\n... and {len(result.excluded) - limit} more")

    click.echo("\n" + "=" * 60)


@cli.command()
@click.argument('exercise_id')
@click.option('--premium', is_flag=True, help='Caller has premium library access')
@click.option('--provider', default=AUTO, help='Preferred provider id (default: auto)')
@click.pass_obj
def media(settings: Settings, exercise_id: str, premium: bool, provider: str):
    """Resolve demonstration media for an exercise."""
    try:
        catalog = load_catalog(settings.catalog_path)
        registry = settings.media_registry()
    except SpotterError as e:
        _fail(str(e))

    exercise = catalog.get(exercise_id)
    if exercise is None:
        _fail(f"Unknown exercise id '{exercise_id}'")

    url = resolve_media_url(exercise, registry, preferred=provider, has_premium=premium)

    click.echo(f"{exercise.name} [{exercise.exercise_id}]")
    click.echo(f"URL: {url or 'N/A'}")

    sources = media_sources(exercise, registry, has_premium=premium)
    if sources:
        click.echo("\nSources:")
        for source in sources:
            click.echo(f"  {source.provider:17} {source.format:5} {source.quality:9} {source.url}")

    click.echo("\nLibraries:")
    for library in available_libraries(registry, has_premium=premium):
        status = "✓" if library["available"] else "✗"
        click.echo(f"  {status} {library['name']} - {library['description']}")


if __name__ == '__main__':
    cli()
