"""Command-line entry point for running diagnostics."""

from __future__ import annotations

import argparse
from pathlib import Path
import tempfile

from config import ConfigController
from config.diagnostics import probe as config_probe
from core.diagnostics import probe as core_probe
from core.logging import enable_file_logging, set_log_level
from diagnostics.runner import format_results, run_diagnostics
from services.diagnostics import probe as focus_probe
from services.focus_health import FocusProbeSettings
from services.in_memory_focus import InMemoryFocusService

OFFLINE_MUC_DOMAIN = "conference.localhost"

SCENARIOS = ("healthy", "not-ready", "collisions", "rejecting")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""

    parser = argparse.ArgumentParser(description="Run focus health diagnostics probes.")
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Run probes against a temporary offline directory.",
    )
    parser.add_argument(
        "--base-dir",
        type=Path,
        default=None,
        help="Directory holding config/default.yaml (defaults to the current directory).",
    )
    parser.add_argument(
        "--scenario",
        choices=SCENARIOS,
        default="healthy",
        help="Behaviour of the in-memory focus service checked by the probe.",
    )
    return parser.parse_args(argv)


def build_focus_service(scenario: str) -> InMemoryFocusService:
    """Return an in-memory focus service behaving as ``scenario`` describes."""

    if scenario == "not-ready":
        return InMemoryFocusService()
    if scenario == "collisions":
        return InMemoryFocusService(muc_domain=OFFLINE_MUC_DOMAIN, simulated_collisions=3)
    if scenario == "rejecting":
        return InMemoryFocusService(muc_domain=OFFLINE_MUC_DOMAIN, accept_requests=False)
    return InMemoryFocusService(muc_domain=OFFLINE_MUC_DOMAIN)


def _load_settings(base_dir: Path) -> FocusProbeSettings:
    controller = ConfigController.load_from(base_dir / "config")
    logging_cfg = controller.get_config()["logging"]
    set_log_level(logging_cfg["level"])
    if logging_cfg["file"]:
        enable_file_logging(Path(logging_cfg["file"]))
    return FocusProbeSettings.from_config(controller.get_focus_config())


def _run(base_dir: Path, scenario: str) -> list:
    def config_probe_with_base():
        return config_probe(base_dir=base_dir)

    def core_probe_live():
        return core_probe()

    def focus_probe_scenario():
        settings = _load_settings(base_dir)
        return focus_probe(build_focus_service(scenario), settings=settings)

    return run_diagnostics(
        [
            config_probe_with_base,
            core_probe_live,
            focus_probe_scenario,
        ]
    )


def main(argv: list[str] | None = None) -> int:
    """Run diagnostics and return an exit code."""

    args = parse_args(argv)
    base_dir = args.base_dir

    if args.offline and base_dir is None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            tmp_base = Path(tmp_dir)

            config_dir = tmp_base / "config"
            config_dir.mkdir(parents=True, exist_ok=True)
            (config_dir / "default.yaml").write_text(
                "health:\n  focus:\n    namespace_tag: focus-health-offline\n",
                encoding="utf-8",
            )

            results = _run(tmp_base, args.scenario)
    else:
        results = _run(base_dir if base_dir is not None else Path.cwd(), args.scenario)

    print(format_results(results))

    has_failures = any(result.failed for result in results)
    return 1 if has_failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
