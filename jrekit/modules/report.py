"""Human-readable rendering of an analysis run."""

from __future__ import annotations

from collections.abc import Sequence

from jrekit.modules.models import AnalysisReport, ArtifactDescriptor


def format_artifacts(artifacts: Sequence[ArtifactDescriptor]) -> list[str]:
    plural = "s" if len(artifacts) > 1 else ""
    lines = [f"Found {len(artifacts)} JAR file{plural}:"]
    for idx, artifact in enumerate(artifacts, 1):
        lines.append(f"  {idx}. {artifact.name} ({artifact.size_mb:.2f} MB)")
    return lines


def format_report(report: AnalysisReport) -> list[str]:
    lines: list[str] = []

    if len(report.results) > 1:
        lines.append("Per-JAR results:")
        for result in report.results:
            if result.success:
                lines.append(f"  [+] {result.artifact}: {len(result.modules)} modules")
            else:
                lines.append(f"  [!] {result.artifact}: analysis failed")
        lines.append("")
    elif report.results and not report.results[0].success:
        lines.append(f"[!] {report.results[0].artifact}: could not detect modules")
        lines.append("")

    if report.tool_home is None:
        lines.append("[!] No JDK with jdeps found; using the default module set")
        lines.append("")

    lines.append(f"Combined module list ({len(report.modules)} modules):")
    lines.extend(f"  - {m}" for m in report.modules)
    lines.append("")
    lines.append("Module string:")
    lines.append(f"  {report.module_string}")
    lines.append("")
    if report.output_file is not None:
        lines.append(f"Saved to: {report.output_file.name}")
    lines.append(f"Source: {report.source}")

    low, high = report.estimated_size_mb()
    lines.append(f"Estimated JRE size: {low}-{high} MB per platform")
    return lines
