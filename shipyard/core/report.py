from __future__ import annotations

from shipyard.core.models import PipelineRun, RunState, UnitStatus


def build_run_summary(run: PipelineRun) -> dict:
    """JSON-serialisable summary of a finished run."""
    return {
        "state": run.state.value,
        "plan": run.plan.names(),
        "published": run.published_units(),
        "failed_unit": run.failed_unit,
        "abort_reason": run.abort_reason,
        "units": [
            {
                "name": name,
                "status": result.status.value,
                "reason": result.reason,
                "attempts": result.attempts,
            }
            for name, result in run.results.items()
        ],
    }


def render_run_report(run: PipelineRun) -> str:
    """Render the operator-facing outcome of a run.

    Notes:
        On abort the published prefix is always listed so the operator can
        decide between a re-run, which is safe because already published
        versions count as success, and manual intervention.
    """
    lines: list[str] = []
    published = run.published_units()
    if run.state == RunState.COMPLETED:
        lines.append(f"Release completed: {len(published)} unit(s) published")
    elif run.state == RunState.ABORTED:
        if run.failed_unit:
            lines.append(f"Release aborted: unit {run.failed_unit} failed: {run.abort_reason}")
        else:
            pending = run.plan[run.current_index].name
            lines.append(f"Release aborted before unit {pending}: {run.abort_reason}")
        lines.append("Published so far: " + (", ".join(published) if published else "none"))
    else:
        lines.append(f"Release {run.state.value}")

    for name, result in run.results.items():
        marker = {
            UnitStatus.PUBLISHED: "published",
            UnitStatus.ALREADY_PUBLISHED: "already published",
            UnitStatus.FAILED: "FAILED",
            UnitStatus.PENDING: "not attempted",
        }[result.status]
        lines.append(f"  - {name}: {marker}")
    return "\n".join(lines)
