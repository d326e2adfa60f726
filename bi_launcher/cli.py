"""
Command-line interface for bench-invoke.

Exposes timer calibration and a small driver that launches every copy of one
command at once and reaps them as they finish.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from bi_common.errors import ConfigurationError
from bi_common.logging import configure_logging
from bi_launcher.engine import (
    children_pending,
    init_state,
    invoke,
    millisleep,
    time_cal,
    wait_for_next,
)
from bi_launcher.engine.reaper import ReapResult
from bi_launcher.engine.timer import DEFAULT_TRIALS
from bi_launcher.models import CommandInfo, CopyInfo, LauncherConfig, StdinPolicy

app = typer.Typer(help="Launch and time benchmark command copies.", no_args_is_help=True)
console = Console(stderr=True)


@app.callback()
def entry(
    ctx: typer.Context,
    debug: int = typer.Option(
        0, "--debug", "-d", min=0, help="Diagnostic verbosity; above 8 logs every calibration trial."
    ),
) -> None:
    """Global options shared by every command."""
    configure_logging(debug=debug > 0, force=True)
    ctx.obj = {"debug": debug}


@app.command("calibrate")
def calibrate(
    ctx: typer.Context,
    trials: int = typer.Option(DEFAULT_TRIALS, "--trials", min=1, help="Clock changes to observe."),
) -> None:
    """Measure the real resolution of the wall clock."""
    result = time_cal(trials=trials, debug=_debug_level(ctx))
    console.print(
        f"timer resolution ({result.trials} iterations): "
        f"[bold]{result.resolution_ns} ns[/bold] ({result.avg_rounds} avg rounds)"
    )


def _debug_level(ctx: typer.Context) -> int:
    return int((ctx.obj or {}).get("debug", 0))


def _status_text(result: ReapResult) -> str:
    if result.exited:
        return f"exit {result.exit_code}"
    if result.signaled:
        return f"signal {result.term_signal}"
    return f"status {result.status}"


@app.command("run")
def run(
    ctx: typer.Context,
    command: str = typer.Argument(..., help="Command template run with the shell's -c."),
    copies: int = typer.Option(1, "--copies", "-n", min=1, help="Number of copies to start."),
    bind: Optional[List[str]] = typer.Option(
        None, "--bind", "-b", help="Bind target; repeat to cycle targets across copies."
    ),
    directory: Optional[Path] = typer.Option(None, "--dir", "-C", help="Working directory."),
    input_file: Optional[Path] = typer.Option(None, "--input", "-i", help="File attached to stdin."),
    output_file: Optional[Path] = typer.Option(None, "--output", "-o", help="File receiving stdout."),
    error_file: Optional[Path] = typer.Option(None, "--error", "-e", help="File receiving stderr."),
    shell: Optional[str] = typer.Option(None, "--shell", help="Shell used to run the command."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print commands without running them."),
    redirect: Optional[bool] = typer.Option(
        None, "--redirect/--no-redirect", help="Attach child stdio to files."
    ),
    stdin_policy: Optional[StdinPolicy] = typer.Option(
        None, "--stdin-policy", help="Stdin source when no input file is given."
    ),
    poll_ms: int = typer.Option(
        0, "--poll-ms", min=0, help="Poll for finished children every N ms instead of blocking."
    ),
    log_file: Optional[Path] = typer.Option(
        None, "--log", "-l", help="Write launch lines here instead of stdout."
    ),
) -> None:
    """Start every copy of COMMAND, then wait for all of them."""
    try:
        config = LauncherConfig.from_env(
            shell=shell,
            dry_run=True if dry_run else None,
            redirect=redirect,
            stdin_policy=stdin_policy,
            debug=_debug_level(ctx) or None,
        )
    except (ValueError, ConfigurationError) as exc:
        console.print(f"[red]Invalid configuration:[/red] {exc}")
        raise typer.Exit(2)

    info = CommandInfo(
        cmd=command,
        dir=str(directory) if directory else None,
        input=str(input_file) if input_file else None,
        output=str(output_file) if output_file else None,
        error=str(error_file) if error_file else None,
    )
    log_stream = log_file.open("a", encoding="utf-8") if log_file else sys.stdout
    try:
        state = init_state(config, output=log_stream)
        outstanding: dict[int, CopyInfo] = {}
        for num in range(copies):
            target = bind[num % len(bind)] if bind else None
            copy = CopyInfo(num=num, bind=target)
            pid = invoke(copy, info, None, state)
            if pid > 0:
                outstanding[pid] = copy

        table = Table(title="Finished children", show_header=True, header_style="bold magenta")
        table.add_column("Copy", justify="right", style="cyan")
        table.add_column("PID", justify="right")
        table.add_column("Started (s.ns)", justify="right", style="blue")
        table.add_column("Status")

        failed = 0
        while outstanding:
            result = wait_for_next(blocking=poll_ms == 0)
            if not result.ready:
                if poll_ms and children_pending():
                    millisleep(poll_ms, state)
                    continue
                break
            copy = outstanding.pop(result.pid, None)
            if copy is None:
                continue
            if result.exit_code != 0:
                failed += 1
            start = copy.start_time
            table.add_row(
                str(copy.num),
                str(result.pid),
                f"{start.sec}.{start.nsec:09d}" if start else "-",
                _status_text(result),
            )
    finally:
        if log_file:
            log_stream.close()

    if table.row_count:
        console.print(table)
    if outstanding:
        lost = ", ".join(
            f"copy {copy.num} (pid {pid})" for pid, copy in sorted(outstanding.items())
        )
        console.print(f"[red]Children not reaped:[/red] {lost}")
        raise typer.Exit(1)
    if failed:
        raise typer.Exit(1)


def main() -> None:
    """Invoke the bi-launch Typer application."""
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
