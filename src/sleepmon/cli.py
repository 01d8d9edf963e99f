"""CLI for the sleepmon sleep tracker."""

from __future__ import annotations

from datetime import datetime

import click

from sleepmon.models import AppData, GoalType


def _load(file: str) -> AppData:
    from sleepmon.store import load_app_data

    try:
        return load_app_data(file)
    except ValueError as e:
        raise click.ClickException(str(e))


def _commit(file: str, data: AppData) -> None:
    """Recompute goals/achievements, save, and announce any new unlocks."""
    from sleepmon.analytics.engine import refresh
    from sleepmon.store import save_app_data

    updated, result = refresh(data)
    save_app_data(file, updated)
    for a in result.unlocked:
        click.echo(f"Achievement unlocked: {a.icon} {a.title} - {a.description}")


def _parse_time(value: str | None) -> datetime:
    from sleepmon.store import parse_timestamp

    if value is None:
        return datetime.now().astimezone()
    try:
        return parse_timestamp(value)
    except ValueError:
        raise click.BadParameter(f"not an ISO-8601 timestamp: {value}")


@click.group()
def main() -> None:
    """sleepmon: personal sleep tracking, goals and insights."""


@main.command("summary")
@click.argument("file", type=click.Path(dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Print the summary as JSON.")
def summary_cmd(file: str, as_json: bool) -> None:
    """Show headline sleep metrics."""
    from sleepmon.analytics.metrics import summarize
    from sleepmon.analytics.streaks import consecutive_days
    from sleepmon.display import format_duration, format_hours

    data = _load(file)
    summary = summarize(data.sessions)

    if as_json:
        click.echo(summary.to_json())
        return

    if not summary.has_data:
        click.echo("No sleep data yet. Start tracking your sleep to see analytics.")
        return

    click.echo(f"\n{'=' * 60}")
    click.echo(f"  Sleep Summary ({summary.session_count} sessions)")
    click.echo(f"{'=' * 60}")
    click.echo(f"  Last night:      {format_duration(summary.last_duration)}")
    click.echo(f"  Avg (7 nights):  {format_duration(summary.avg_duration_7d)} "
               f"(quality {summary.avg_quality_7d:.1f}/5)")
    click.echo(f"  Avg (30 nights): {format_duration(summary.avg_duration_30d)}")
    click.echo(f"  Avg (all):       {format_hours(summary.avg_duration_all)} "
               f"(quality {summary.avg_quality_all:.1f}/5)")
    click.echo(f"  Total sleep:     {format_hours(summary.total_minutes)}")
    click.echo(f"  Current streak:  {consecutive_days(data.sessions)} days")
    dist = "  ".join(
        f"{rating}*:{count}" for rating, count in summary.quality_distribution.items()
    )
    click.echo(f"  Quality ratings: {dist}")
    if data.current_start is not None:
        from sleepmon.tracker import elapsed_minutes

        elapsed = elapsed_minutes(data.current_start, datetime.now().astimezone())
        click.echo(f"  In progress:     {format_duration(elapsed)} "
                   f"(since {data.current_start.isoformat()})")
    click.echo(f"{'=' * 60}")


@main.command("insights")
@click.argument("file", type=click.Path(dir_okay=False))
def insights_cmd(file: str) -> None:
    """Show insights and recommended actions."""
    from sleepmon.analytics.insights import generate_insights, recommendations
    from sleepmon.display import INSIGHT_ICONS, INSIGHT_TYPE_MARKERS

    data = _load(file)

    click.echo("Your Insights")
    for insight in generate_insights(data.sessions):
        marker = INSIGHT_TYPE_MARKERS[insight.type]
        click.echo(f"  [{marker}] {INSIGHT_ICONS[insight.icon]} {insight.title}")
        click.echo(f"      {insight.description}")

    click.echo("\nRecommended Actions")
    for rec in recommendations(data.sessions):
        click.echo(f"  - {rec}")


@main.command("goals")
@click.argument("file", type=click.Path(dir_okay=False))
def goals_cmd(file: str) -> None:
    """Show goal progress."""
    from sleepmon.analytics.engine import refresh
    from sleepmon.analytics.goals import goal_progress, is_complete
    from sleepmon.display import (
        GOAL_ICONS,
        format_goal_target,
        format_goal_value,
        goal_title,
        progress_bar,
    )

    data, _ = refresh(_load(file))

    for goal in data.goals:
        pct = goal_progress(goal)
        done = " done" if is_complete(goal) else ""
        click.echo(f"  {GOAL_ICONS[goal.type]} {goal_title(goal.type)} "
                   f"(id {goal.id}): {format_goal_value(goal)} / "
                   f"{format_goal_target(goal)}{done}")
        click.echo(f"      {progress_bar(pct)} {pct:.0f}%")


@main.command("achievements")
@click.argument("file", type=click.Path(dir_okay=False))
def achievements_cmd(file: str) -> None:
    """List unlocked and locked achievements."""
    from sleepmon.analytics.achievements import unlocked_count

    data = _load(file)
    click.echo(f"Achievements {unlocked_count(data.achievements)}/{len(data.achievements)}")
    for a in data.achievements:
        if a.unlocked:
            when = ""
            if a.unlocked_at is not None:
                when = f" ({a.unlocked_at.astimezone().date().isoformat()})"
            click.echo(f"  {a.icon} {a.title}{when}")
    for a in data.achievements:
        if not a.unlocked:
            click.echo(f"  [locked] {a.title} - {a.description}")


@main.command("history")
@click.argument("file", type=click.Path(dir_okay=False))
@click.option("--limit", "-n", default=None, type=click.IntRange(min=1),
              help="Show only the most recent N sessions.")
def history_cmd(file: str, limit: int | None) -> None:
    """List sleep sessions, newest first."""
    from sleepmon.analytics.metrics import summarize
    from sleepmon.display import format_duration, format_hours

    data = _load(file)
    if not data.sessions:
        click.echo("No sleep history yet. Your sleep sessions will appear here.")
        return

    shown = list(reversed(data.sessions))
    if limit is not None:
        shown = shown[:limit]

    fmt = "%Y-%m-%d %H:%M"
    click.echo(f"  {'ID':<15} {'Start':<16}  {'End':<16}  {'Duration':>8}  Quality")
    for s in shown:
        start = s.start.astimezone().strftime(fmt)
        end = s.end.astimezone().strftime(fmt)
        click.echo(f"  {s.id:<15} {start:<16}  {end:<16}  "
                   f"{format_duration(s.duration):>8}  {s.quality}/5")
        if s.note:
            click.echo(f"      {s.note}")

    summary = summarize(data.sessions)
    click.echo(f"\n  Total sessions: {summary.session_count}   "
               f"Avg duration: {format_duration(summary.avg_duration_all)}   "
               f"Avg quality: {summary.avg_quality_all:.1f}/5   "
               f"Total hours: {format_hours(summary.total_minutes)}")


@main.command("log")
@click.argument("file", type=click.Path(dir_okay=False))
@click.option("--start", "-s", required=True, help="Sleep start (ISO-8601).")
@click.option("--end", "-e", required=True, help="Wake time (ISO-8601).")
@click.option("--quality", "-q", default=3, type=click.IntRange(1, 5), help="Quality rating 1-5.")
@click.option("--note", "-n", default="", help="Free-text note.")
def log_cmd(file: str, start: str, end: str, quality: int, note: str) -> None:
    """Add a completed sleep session."""
    from sleepmon.tracker import log_session
    from sleepmon.display import format_duration

    data = _load(file)
    try:
        data = log_session(data, _parse_time(start), _parse_time(end), quality, note)
    except ValueError as e:
        raise click.ClickException(str(e))

    session = data.sessions[-1]
    click.echo(f"Logged session {session.id}: {format_duration(session.duration)}, "
               f"quality {session.quality}/5")
    _commit(file, data)


@main.command("start")
@click.argument("file", type=click.Path(dir_okay=False))
@click.option("--at", default=None, help="Start time (ISO-8601, default now).")
def start_cmd(file: str, at: str | None) -> None:
    """Start tracking a sleep session."""
    from sleepmon.tracker import start_session
    from sleepmon.store import save_app_data

    data = _load(file)
    try:
        data = start_session(data, now=_parse_time(at))
    except ValueError as e:
        raise click.ClickException(str(e))
    save_app_data(file, data)
    click.echo(f"Sleep session started at {data.current_start.isoformat()}")


@main.command("stop")
@click.argument("file", type=click.Path(dir_okay=False))
@click.option("--quality", "-q", default=3, type=click.IntRange(1, 5), help="Quality rating 1-5.")
@click.option("--note", "-n", default="", help="Free-text note.")
@click.option("--at", default=None, help="Wake time (ISO-8601, default now).")
def stop_cmd(file: str, quality: int, note: str, at: str | None) -> None:
    """End the in-progress sleep session."""
    from sleepmon.tracker import end_session
    from sleepmon.display import format_duration

    data = _load(file)
    try:
        data = end_session(data, quality=quality, note=note, now=_parse_time(at))
    except ValueError as e:
        raise click.ClickException(str(e))

    session = data.sessions[-1]
    click.echo(f"Session {session.id} saved: {format_duration(session.duration)}, "
               f"quality {session.quality}/5")
    _commit(file, data)


@main.command("delete")
@click.argument("file", type=click.Path(dir_okay=False))
@click.argument("session_id")
def delete_cmd(file: str, session_id: str) -> None:
    """Delete a sleep session by id."""
    from sleepmon.tracker import delete_session

    data = _load(file)
    try:
        data = delete_session(data, session_id)
    except ValueError as e:
        raise click.ClickException(str(e))
    click.echo(f"Deleted session {session_id}.")
    _commit(file, data)


@main.command("set-goal")
@click.argument("file", type=click.Path(dir_okay=False))
@click.argument("goal_type", type=click.Choice([t.value for t in GoalType]))
@click.argument("target", type=float)
def set_goal_cmd(file: str, goal_type: str, target: float) -> None:
    """Change the target of a goal."""
    from dataclasses import replace

    from sleepmon.analytics.engine import refresh
    from sleepmon.analytics.goals import set_goal_target

    data, _ = refresh(_load(file))
    goal = next(g for g in data.goals if g.type == GoalType(goal_type))
    data = replace(data, goals=set_goal_target(data.goals, goal.id, target))
    click.echo(f"{goal_type} goal target set to {target:g} {goal.unit}".rstrip())
    _commit(file, data)


@main.command("routine")
@click.argument("file", type=click.Path(dir_okay=False))
@click.option("--toggle", "-t", "toggle_id", default=None, help="Toggle an item by id.")
@click.option("--add", "-a", "add_title", default=None, help="Add an item.")
@click.option("--remove", "-r", "remove_id", default=None, help="Remove an item by id.")
@click.option("--reset", is_flag=True, help="Uncheck every item.")
def routine_cmd(
    file: str,
    toggle_id: str | None,
    add_title: str | None,
    remove_id: str | None,
    reset: bool,
) -> None:
    """Show or edit the bedtime routine checklist."""
    from dataclasses import replace

    from sleepmon import routine
    from sleepmon.store import save_app_data

    data = _load(file)
    items = data.routine_items
    try:
        if add_title is not None:
            items = routine.add_item(items, add_title)
        if toggle_id is not None:
            items = routine.toggle_item(items, toggle_id)
        if remove_id is not None:
            items = routine.remove_item(items, remove_id)
        if reset:
            items = routine.reset_routine(items)
    except ValueError as e:
        raise click.ClickException(str(e))

    if items != data.routine_items:
        data = replace(data, routine_items=items)
        save_app_data(file, data)

    done = sum(1 for i in items if i.completed)
    click.echo(f"Bedtime routine: {done} of {len(items)} completed "
               f"({routine.routine_progress(items):.0f}%)")
    for item in items:
        mark = "x" if item.completed else " "
        click.echo(f"  [{mark}] {item.id}. {item.title}")


@main.command("recompute")
@click.argument("file", type=click.Path(dir_okay=False))
@click.option("--output", "-o", default=None, help="Write the result JSON to this file.")
def recompute_cmd(file: str, output: str | None) -> None:
    """Recompute goals and achievements and save them."""
    import json

    from sleepmon.analytics.engine import refresh
    from sleepmon.store import app_data_to_dict, save_app_data

    data, result = refresh(_load(file))
    save_app_data(file, data)

    click.echo(repr(result))
    for a in result.unlocked:
        click.echo(f"Achievement unlocked: {a.icon} {a.title}")

    if output:
        stored = app_data_to_dict(data)
        payload = {
            "metrics": result.metrics.to_dict(),
            "goals": stored["goals"],
            "achievements": stored["achievements"],
            "insights": [
                {
                    "type": i.type.value,
                    "title": i.title,
                    "description": i.description,
                    "icon": i.icon.value,
                }
                for i in result.insights
            ],
            "recommendations": result.recommendations,
        }
        with open(output, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, ensure_ascii=False)
        click.echo(f"\nResult written to {output}")


if __name__ == "__main__":
    main()
