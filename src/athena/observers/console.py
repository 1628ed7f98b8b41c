# src/athena/observers/console.py
import typer

from .events import BaseEvent


class ConsoleObserver:
    """Prints job progress to stderr so stdout stays machine readable."""

    def notify(self, event: BaseEvent) -> None:
        d = event.dict()
        k = event.__class__.__name__
        typer.echo(
            f"[{d['ts']}] {k} run={d['run_id']} data={{"
            + ", ".join(f"{x}={y}" for x, y in d.items() if x not in ("ts", "run_id", "endpoint"))
            + "}",
            err=True,
        )
