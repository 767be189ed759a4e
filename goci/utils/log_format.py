from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StepLogRecord:
    step_name: str
    command: str
    outcome: str  # success|failure|timeout|cancelled
    duration_s: float
    exit_code: int | None
    stdout: str | None  # None when the step does not capture stdout
    stderr: str


def _section(text: str | None, *, empty: str) -> str:
    if text is None:
        return "(not captured)"
    return text.rstrip() if text.strip() else empty


def format_standard_log(record: StepLogRecord) -> str:
    exit_text = "-" if record.exit_code is None else str(record.exit_code)

    return (
        f"=== {record.step_name} ===\n"
        f"Command: {record.command}\n"
        f"Outcome: {record.outcome} ({record.duration_s:.1f}s, exit {exit_text})\n"
        f"--- stdout ---\n{_section(record.stdout, empty='(no stdout)')}\n"
        f"--- stderr ---\n{_section(record.stderr, empty='(no stderr)')}\n"
        f"=== END ==="
    )
