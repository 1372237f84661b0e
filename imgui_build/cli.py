# SPDX-License-Identifier: MIT
"""Command-line interface for imgui-build."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import Mapping
from pathlib import Path

from imgui_build.configure.config import BuildSettings
from imgui_build.configure.pkgconfig import DEPENDENCY_LIBRARIES
from imgui_build.core.errors import ImguiBuildError
from imgui_build.core.features import Feature, FeatureFlags
from imgui_build.core.resolver import BACKENDS
from imgui_build.pipeline import Pipeline

# Set up logging
logger = logging.getLogger("imgui_build")


def setup_logging(
    verbose: bool = False, debug: bool = False, release: bool = False
) -> None:
    """Configure logging based on verbosity level.

    Without flags, debug-profile builds log at DEBUG and release builds
    at INFO.
    """
    if debug:
        level = logging.DEBUG
        fmt = "%(levelname)s: %(name)s: %(message)s"
    elif verbose or not release:
        level = logging.DEBUG
        fmt = "%(levelname)s: %(message)s"
    else:
        level = logging.INFO
        fmt = "%(levelname)s: %(message)s"

    # Log records go to stderr; stdout carries cargo: directives.
    logging.basicConfig(level=level, format=fmt, stream=sys.stderr, force=True)
    if level == logging.INFO:
        logger.info("Logging at INFO for release builds; use --verbose for debug messages")


def parse_variables(args: list[str]) -> tuple[dict[str, str], list[str]]:
    """Parse KEY=value arguments from a list.

    Args:
        args: List of arguments.

    Returns:
        Tuple of (variables dict, remaining args).
    """
    variables: dict[str, str] = {}
    remaining: list[str] = []

    for arg in args:
        if "=" in arg and not arg.startswith("-"):
            key, _, value = arg.partition("=")
            if key:  # Valid KEY=value
                variables[key] = value
            else:
                remaining.append(arg)
        else:
            remaining.append(arg)

    return variables, remaining


def parse_feature_args(values: list[str] | None) -> FeatureFlags:
    """Parse repeated/comma-separated --feature values."""
    names: list[str] = []
    for value in values or []:
        names.extend(value.split(","))
    return FeatureFlags.from_names(names)


def build_environ(
    args: argparse.Namespace, base: Mapping[str, str] | None = None
) -> dict[str, str]:
    """Layer command-line settings over the process environment.

    Precedence (highest to lowest):
        1. Explicit options (--out-dir, --manifest-dir, --target, --profile)
        2. Command line variables: imgui-build OUT_DIR=...
        3. Environment variables
    """
    environ = dict(os.environ if base is None else base)
    variables, _ = parse_variables(getattr(args, "extra", None) or [])
    environ.update(variables)

    if getattr(args, "manifest_dir", None):
        environ["CARGO_MANIFEST_DIR"] = str(Path(args.manifest_dir).absolute())
    if getattr(args, "out_dir", None):
        environ["OUT_DIR"] = str(Path(args.out_dir).absolute())
    if getattr(args, "target", None):
        environ["TARGET"] = args.target
        # An explicit triple wins over Cargo's cfg variables.
        environ.pop("CARGO_CFG_TARGET_ARCH", None)
        environ.pop("CARGO_CFG_TARGET_OS", None)
        environ.pop("CARGO_CFG_TARGET_ENV", None)
    if getattr(args, "profile", None):
        environ["PROFILE"] = args.profile
    return environ


def feature_args(args: argparse.Namespace) -> list[str]:
    """--feature values given before and after the subcommand."""
    return (getattr(args, "feature", None) or []) + (
        getattr(args, "command_feature", None) or []
    )


def load_settings(
    args: argparse.Namespace, base: Mapping[str, str] | None = None
) -> BuildSettings:
    environ = build_environ(args, base)
    return BuildSettings.from_environ(
        environ, extra_features=parse_feature_args(feature_args(args))
    )


def cmd_build(args: argparse.Namespace) -> int:
    """Run the whole pipeline.

    Cargo directives are printed on stdout; a failure is reported as one
    error line naming the failed stage.
    """
    environ = build_environ(args)
    setup_logging(args.verbose, args.debug, environ.get("PROFILE") == "release")

    try:
        settings = load_settings(args, environ)
        result = Pipeline(settings).run()
    except ImguiBuildError as e:
        logger.error("%s", e)
        return 1

    logger.info("Bindings: %s", result.bindings_path)
    logger.info("Library: %s", result.library_path)
    return 0


def cmd_files(args: argparse.Namespace) -> int:
    """Print the resolved compile units without building anything."""
    environ = build_environ(args)
    setup_logging(args.verbose, args.debug, environ.get("PROFILE") == "release")
    # Listing files does not write anything, so no output directory is needed.
    environ.setdefault("OUT_DIR", str(Path("build").absolute()))

    try:
        settings = load_settings(args, environ)
    except ImguiBuildError as e:
        logger.error("%s", e)
        return 1

    pipeline = Pipeline(settings)
    groups = pipeline.resolve()
    print(f"Target: {settings.target}")
    print(f"Features: {', '.join(settings.features.names()) or '(none)'}")
    for label, units in (
        ("core", groups.core),
        ("backend", groups.backend),
        ("other", groups.other),
    ):
        print(f"{label}:")
        for unit in units:
            print(f"  {unit}")
    print(f"wrapper:\n  source {pipeline.wrapper}")
    return 0


def cmd_features(args: argparse.Namespace) -> int:
    """List the known features."""
    restricted = {spec.feature: spec.required_os for spec in BACKENDS}
    for feature in Feature:
        notes = []
        required_os = restricted.get(feature)
        if required_os is not None:
            notes.append(f"{required_os.value} only")
        if feature in DEPENDENCY_LIBRARIES:
            notes.append(f"requires {DEPENDENCY_LIBRARIES[feature]}")
        suffix = f" ({', '.join(notes)})" if notes else ""
        print(f"{feature.value}{suffix}")
    return 0


def add_common_args(parser: argparse.ArgumentParser, suppress: bool = False) -> None:
    """Add common arguments to a parser.

    Subcommand copies pass suppress=True so that an option given before
    the subcommand is not reset to its default.
    """
    default = argparse.SUPPRESS if suppress else False
    parser.add_argument(
        "-v", "--verbose", action="store_true", default=default, help="Verbose output"
    )
    parser.add_argument(
        "--debug", action="store_true", default=default, help="Debug output"
    )


def add_settings_args(
    parser: argparse.ArgumentParser, variables: bool = True, suppress: bool = False
) -> None:
    """Add arguments that override build settings.

    The top-level parser omits the KEY=value positional: next to the
    subcommand positional it would swallow the command name.

    With suppress=True (subcommand copies) unset options leave the
    top-level values alone, and --feature collects into its own list so
    features from both sides of the command name are kept.
    """
    default = argparse.SUPPRESS if suppress else None
    parser.add_argument(
        "-F",
        "--feature",
        action="append",
        dest="command_feature" if suppress else "feature",
        metavar="NAME",
        help="Enable a feature (repeatable, comma-separated)",
    )
    parser.add_argument(
        "-m",
        "--manifest-dir",
        default=default,
        help="Host project directory (CARGO_MANIFEST_DIR)",
    )
    parser.add_argument(
        "-o", "--out-dir", default=default, help="Output directory (OUT_DIR)"
    )
    parser.add_argument(
        "--target", metavar="TRIPLE", default=default, help="Target triple"
    )
    parser.add_argument(
        "--profile",
        choices=["debug", "release"],
        default=default,
        help="Build profile (PROFILE)",
    )
    if variables:
        parser.add_argument(
            "extra",
            nargs="*",
            help="Build variables (KEY=value)",
        )


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the imgui-build CLI."""
    parser = argparse.ArgumentParser(
        prog="imgui-build",
        description="Generate bindings for and compile a vendored Dear ImGui tree.",
        epilog="Run 'imgui-build <command> --help' for command-specific help.",
    )
    from imgui_build import __version__

    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    # Default command args (for 'imgui-build' with no subcommand)
    add_common_args(parser)
    add_settings_args(parser, variables=False)

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    build_parser = subparsers.add_parser(
        "build", help="Generate bindings and compile the library"
    )
    add_common_args(build_parser, suppress=True)
    add_settings_args(build_parser, suppress=True)
    build_parser.set_defaults(func=cmd_build)

    files_parser = subparsers.add_parser(
        "files", help="Show the compile units selected for the build"
    )
    add_common_args(files_parser, suppress=True)
    add_settings_args(files_parser, suppress=True)
    files_parser.set_defaults(func=cmd_files)

    features_parser = subparsers.add_parser("features", help="List known features")
    add_common_args(features_parser, suppress=True)
    features_parser.set_defaults(func=cmd_features)

    args = parser.parse_args(argv)

    if args.command is None:
        return cmd_build(args)

    result: int = args.func(args)
    return result


if __name__ == "__main__":
    sys.exit(main())
