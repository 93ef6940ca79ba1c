import json
from pathlib import Path
from typing import Any, Dict, Optional

import click

from .exceptions import MontagePlannerError

# Lazy load rich to keep startup fast for scripted use
_console = None


def get_console():
    global _console
    if _console is None:
        from rich.console import Console
        _console = Console(stderr=True)
    return _console


def _read_json(path: Path) -> Dict[str, Any]:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise click.ClickException(f"{path} is not valid JSON: {exc}") from exc


def _write_json(document: Dict[str, Any], output: Optional[Path]) -> None:
    text = json.dumps(document, indent=2, ensure_ascii=False)
    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text + "\n", encoding="utf-8")
        get_console().print(f"💾 Written to [bold]{output}[/]")
    else:
        click.echo(text)


@click.group()
def cli():
    """Montage Planner - timeline planning for real-estate montage videos"""
    pass


@cli.command()
@click.argument("project_json", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--voiceover-duration", type=float, default=None,
              help="Narration length in seconds (default: probe voiceover file or estimate from script)")
@click.option("--project-root", type=click.Path(file_okay=False, path_type=Path), default=None,
              help="Project directory (default: directory of PROJECT_JSON)")
@click.option("--style", default=None, help="Style preset id")
@click.option("--log-dir", type=click.Path(file_okay=False, path_type=Path), default=None,
              help="Also write a detailed log file here")
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Write the plan here instead of stdout")
def plan(project_json: Path, voiceover_duration: Optional[float], project_root: Optional[Path],
         style: Optional[str], log_dir: Optional[Path], output: Optional[Path]):
    """Build a montage plan from a project document."""
    from pydantic import ValidationError

    from .core.models import Project
    from .core.narration import narration_duration
    from .core.plan_assembler import plan_for_project
    from .logger import configure_file_logging

    console = get_console()
    root = project_root or project_json.parent

    try:
        project = Project.model_validate(_read_json(project_json))
        if log_dir:
            configure_file_logging(log_dir, project.id or project_json.stem)
        if voiceover_duration is None:
            voiceover_duration = narration_duration(project, root)
        montage_plan = plan_for_project(project, voiceover_duration, style=style)
    except MontagePlannerError as exc:
        raise click.ClickException(str(exc)) from exc
    except ValidationError as exc:
        raise click.ClickException(f"{project_json} is not a valid project: {exc}") from exc

    console.print(
        f"🎬 [bold green]{len(montage_plan.timeline)}[/] clips, "
        f"{montage_plan.total_duration_sec:.1f}s total"
    )
    _write_json(montage_plan.to_document(), output)


@cli.command()
@click.argument("plan_json", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--project-root", type=click.Path(file_okay=False, path_type=Path), required=True,
              help="Directory the plan's relative paths are joined onto")
@click.option("--fps", type=float, default=None, help="Frame rate (default: plan format fps)")
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Write the resolved schedule here instead of stdout")
def resolve(plan_json: Path, project_root: Path, fps: Optional[float], output: Optional[Path]):
    """Resolve a plan (or a project holding `montagePlan`) into frames."""
    from .core.frame_resolver import resolve_plan
    from .core.models import MontagePlan, check_plan_consistency

    console = get_console()
    document = _read_json(plan_json)
    if isinstance(document, dict) and "montagePlan" in document:
        document = document["montagePlan"]
        if document is None:
            raise click.ClickException("Project has no montage plan yet")

    if fps is not None and fps.is_integer():
        fps = int(fps)

    try:
        montage_plan = MontagePlan.from_document(document)
        for problem in check_plan_consistency(montage_plan):
            console.print(f"[yellow]⚠️  {problem}[/]")
        resolved = resolve_plan(montage_plan, project_root, fps=fps)
    except MontagePlannerError as exc:
        raise click.ClickException(str(exc)) from exc

    console.print(
        f"🎞️ [bold green]{resolved.total_duration_frames}[/] frames @ {resolved.fps} fps"
    )
    _write_json(resolved.to_document(), output)


@cli.command()
def styles():
    """List available style presets."""
    from rich.table import Table

    from .style_presets import get_style_preset, list_available_styles

    try:
        names = list_available_styles()
    except MontagePlannerError as exc:
        raise click.ClickException(str(exc)) from exc

    table = Table(title="Style Presets")
    table.add_column("Preset", style="cyan", no_wrap=True)
    table.add_column("Font")
    table.add_column("Description", style="magenta")

    for name in names:
        preset = get_style_preset(name)
        table.add_row(name, preset["tokens"].get("fontFamily", ""), preset["description"])

    get_console().print(table)


if __name__ == "__main__":
    cli()
