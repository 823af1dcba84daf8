"""Entry point and dependency wiring."""

from __future__ import annotations

from rich.console import Console

from shellgate.cli.app import app
from shellgate.config.settings import Settings
from shellgate.executor.safe_executor import SafeExecutor
from shellgate.pipeline import GatedPipeline
from shellgate.policy.consent import ConsentSession
from shellgate.policy.permission_gate import PermissionGate


def build_pipeline(
    settings: Settings | None = None,
    session: ConsentSession | None = None,
    console: Console | None = None,
) -> GatedPipeline:
    settings = settings or Settings()

    gate = PermissionGate(
        session=session or ConsentSession(),
        console=console,
        prompt_timeout=settings.prompt_timeout,
    )
    executor = SafeExecutor(max_output_bytes=settings.max_output_bytes)

    return GatedPipeline(gate=gate, executor=executor, settings=settings)


if __name__ == "__main__":
    app()
