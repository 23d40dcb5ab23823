"""
fxpanel - Command-line Entry Point

Resolves the startup environment, loads the localization engine and prints
a summary of the result.

Usage:
    python -m fxpanel --convar citizen_root=/opt/cfx-server --convar serverProfile=default

Convars can also be passed as ``FXPANEL_CONVAR_<name>`` environment variables.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Optional, Sequence

logger = logging.getLogger("fxpanel")


def _parse_convar(value: str) -> tuple[str, str]:
    name, sep, convar_value = value.partition("=")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got {value!r}")
    return name.strip(), convar_value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fxpanel",
        description="Resolve the fxpanel startup environment.",
    )
    parser.add_argument(
        "--convar",
        action="append",
        type=_parse_convar,
        default=[],
        metavar="NAME=VALUE",
        help="Set a host convar (repeatable)",
    )
    parser.add_argument("--dev-env-file", default=None, help="dotenv file with TXDEV_* values")
    parser.add_argument("--log-file", default=None, help="Also write logs to this file")
    parser.add_argument("--json", action="store_true", help="Print the snapshot as JSON")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        int: Exit code (0 for success, the fatal exit code otherwise).

    Raises:
        SystemExit: With the fatal exit code when environment resolution fails.
    """
    args = build_parser().parse_args(argv)

    from fxpanel.core.config import ConfigManager
    from fxpanel.core.i18n import LocalizationEngine
    from fxpanel.core.logging_setup import configure_logging
    from fxpanel.domain.exceptions import BootFatalError
    from fxpanel.runtime.bootstrap import EnvironmentResolver, report_fatal
    from fxpanel.runtime.host import MappingHost

    configure_logging(log_file=args.log_file)

    host = MappingHost.from_environment(overrides=dict(args.convar))
    resolver = EnvironmentResolver(host, dev_env_file=args.dev_env_file)

    snapshot = resolver.bootstrap()
    if snapshot.dev_env.verbose:
        configure_logging(verbose=True, log_file=args.log_file)

    config = ConfigManager.for_profile(snapshot.paths.profile_root_path)
    try:
        translator = LocalizationEngine(snapshot.paths.data_root_path, config.language)
    except BootFatalError as e:
        report_fatal(e.condition)
        return e.exit_code

    if args.json:
        summary = snapshot.to_dict()
        summary["locale"] = translator.canonical_locale
        print(json.dumps(summary, indent=2))
    else:
        print(f"fxpanel v{snapshot.tool_version} on FXServer build {snapshot.version.build_number}")
        print(f"  profile:  {snapshot.paths.profile_name} ({snapshot.paths.profile_root_path})")
        print(f"  hosting:  {snapshot.hosting_mode.name}")
        print(f"  admin:    {snapshot.forced_interface or '0.0.0.0'}:{snapshot.admin_port}")
        print(f"  language: {translator.language} ({translator.canonical_locale})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
