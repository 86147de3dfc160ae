"""CLI entry point: jrekit.

Subcommands:
    jrekit analyze [INPUT]        # Derive the module list from JAR files (jdeps)
    jrekit download [PLATFORM]    # Fetch, extract and verify JDKs
    jrekit build-jre [PLATFORM]   # Link minimal runtimes (jlink)
    jrekit package [PLATFORM]     # Assemble portable archives
    jrekit build [PLATFORM]       # All three stages per platform
    jrekit platforms              # List supported targets and JDK versions

PLATFORM defaults to every supported target.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from jrekit.config import Settings
from jrekit.core.logging import setup_logging
from jrekit.exceptions import NoArtifactsError, UnknownPlatformError, UnsupportedVersionError
from jrekit.modules.analyzer import DependencyAnalyzer
from jrekit.modules.discovery import discover_artifacts, find_package_artifacts
from jrekit.modules.report import format_artifacts, format_report
from jrekit.modules.toolchain import locate_tool_home
from jrekit.pipeline import BatchOutcome, BuildPipeline, run_batch
from jrekit.platforms import JDK_RELEASES, PLATFORMS, get_release, select_platforms


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
@click.option(
    "-C",
    "--work-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Project directory (default: current directory)",
)
@click.pass_context
def main(ctx: click.Context, verbose: bool, work_dir: Path | None) -> None:
    """jrekit: minimal Java runtimes and portable packages per platform."""
    setup_logging(verbose)
    ctx.obj = Settings.from_env(work_dir=work_dir)


def _targets(platform_key: str | None):
    try:
        return select_platforms(platform_key)
    except UnknownPlatformError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def _require_release(settings: Settings) -> None:
    try:
        get_release(settings.jdk_version)
    except UnsupportedVersionError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


_STATUS_MARKS = {"completed": "OK", "skipped": "CACHED"}


def _print_summary(title: str, outcome: BatchOutcome) -> None:
    summary = outcome.tracker.get_summary()
    click.echo("")
    click.echo(f"=== {title} ===")
    for step in summary["steps"]:
        mark = _STATUS_MARKS.get(step["status"], "FAILED")
        info = step["error"] if mark == "FAILED" else step["detail"]
        duration = f"{step['duration']:.1f}s" if step["duration"] is not None else "-"
        click.echo(f"  {step['name']:<16} {mark:<7} {duration:>7}  {info or ''}")
    click.echo(
        f"{summary['succeeded']}/{summary['total']} platforms succeeded "
        f"in {summary['total_duration']:.1f}s"
    )
    if not outcome.ok:
        click.echo("Failed: " + ", ".join(outcome.tracker.failed), err=True)


def _run_stage(settings: Settings, platform_key: str | None, stage: str, title: str) -> None:
    targets = _targets(platform_key)
    pipeline = BuildPipeline(settings)
    outcome = run_batch(targets, getattr(pipeline, stage))
    _print_summary(title, outcome)
    sys.exit(outcome.exit_code)


@main.command("analyze")
@click.argument("input_path", required=False, metavar="[INPUT]")
@click.pass_obj
def analyze(settings: Settings, input_path: str | None) -> None:
    """Detect the modules required by a JAR file or a folder of JARs."""
    try:
        artifacts = discover_artifacts(input_path, settings.work_dir)
    except NoArtifactsError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    for line in format_artifacts(artifacts):
        click.echo(line)
    click.echo("")

    tool_home = locate_tool_home(settings)
    analyzer = DependencyAnalyzer(tool_home, multi_release=settings.jdk_version)
    report = analyzer.run(artifacts, settings.work_dir)

    for line in format_report(report):
        click.echo(line)


@main.command("download")
@click.argument("platform_key", required=False, metavar="[PLATFORM]")
@click.pass_obj
def download(settings: Settings, platform_key: str | None) -> None:
    """Download, extract and verify the JDK for each platform."""
    _require_release(settings)
    _run_stage(settings, platform_key, "download", f"JDK {settings.jdk_version} downloads")


@main.command("build-jre")
@click.argument("platform_key", required=False, metavar="[PLATFORM]")
@click.pass_obj
def build_jre(settings: Settings, platform_key: str | None) -> None:
    """Link a minimal runtime image for each platform."""
    _run_stage(settings, platform_key, "build_jre", "Runtime images")


@main.command("package")
@click.argument("platform_key", required=False, metavar="[PLATFORM]")
@click.pass_obj
def package(settings: Settings, platform_key: str | None) -> None:
    """Assemble a portable archive for each platform."""
    _targets(platform_key)
    if not find_package_artifacts(settings.jars_dir):
        click.echo(f"Error: No JAR files found in {settings.jars_dir}", err=True)
        sys.exit(1)
    _run_stage(settings, platform_key, "package", "Portable packages")


@main.command("build")
@click.argument("platform_key", required=False, metavar="[PLATFORM]")
@click.pass_obj
def build(settings: Settings, platform_key: str | None) -> None:
    """Download, link and package each platform in one pass."""
    _require_release(settings)
    _targets(platform_key)
    if not find_package_artifacts(settings.jars_dir):
        click.echo(f"Error: No JAR files found in {settings.jars_dir}", err=True)
        sys.exit(1)
    _run_stage(settings, platform_key, "build", "Portable builds")


@main.command("platforms")
@click.pass_obj
def platforms(settings: Settings) -> None:
    """List supported platform targets and JDK versions."""
    click.echo("Platforms:")
    for target in PLATFORMS.values():
        click.echo(
            f"  {target.key:<14} {target.display_name:<14} "
            f"{target.archive_format:<7} {target.jre_name}"
        )
    click.echo("")
    versions = ", ".join(
        f"{v}*" if v == settings.jdk_version else v for v in JDK_RELEASES
    )
    click.echo(f"JDK versions: {versions}  (* selected)")


if __name__ == "__main__":
    main()
