"""
Command-line interface for the Delay Simulator.

Provides commands for:
- Sampling delays from a file-based key or an inline descriptor
- Listing the keys defined by a set of distribution files
- Checking request mappings against the distribution files
"""

import argparse
import json
import logging
import random
import statistics
import sys
from pathlib import Path

from . import config as sim_config
from .errors import DelaySimError, InvalidConfigurationError
from .mappings.stub_mapping import load_mappings
from .registry.distribution_registry import DistributionRegistry
from .registry.file_source import DirectoryFileSource
from .statistics.distributions import Distribution, FileBasedDistribution
from .statistics.factory import DistributionFactory
from .validators.consistency_checker import ConsistencyChecker

# Above this many samples, print a summary instead of every value
_MAX_VALUES_PRINTED = 20


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="delaysim",
        description="Response delay simulator for mock servers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Sample a key defined in layered distribution files
  delaysim --root ./wiremock -d __files/base.json -d __files/peak.json \\
      sample --key GET:/orders --count 1000

  # Sample an inline descriptor
  delaysim sample --descriptor '{"type": "lognormal", "medianMillis": 90, "sigma": 0.1}'

  # List defined keys
  delaysim -d __files/base.json list

  # Fail if any mapping uses an undefined file based key
  delaysim -d __files/base.json check --mappings mappings
        """,
    )

    parser.add_argument(
        "--root",
        type=str,
        default=None,
        help="Files root for distribution and mapping files (default: DELAYSIM_ROOT or cwd)",
    )
    parser.add_argument(
        "-d",
        "--distribution",
        dest="distributions",
        action="append",
        default=None,
        metavar="FILE",
        help=(
            "Distribution file relative to the root; repeat to layer files, later ones "
            "override earlier ones (default: DELAYSIM_DISTRIBUTION_FILES)"
        ),
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    sample_parser = subparsers.add_parser("sample", help="Sample delays")
    target = sample_parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--key", type=str, help="File based distribution key")
    target.add_argument("--descriptor", type=str, help="Inline JSON distribution descriptor")
    sample_parser.add_argument(
        "--count",
        type=int,
        default=1,
        help="Number of samples (default: 1)",
    )
    sample_parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducible samples",
    )

    subparsers.add_parser("list", help="List distribution keys")

    check_parser = subparsers.add_parser(
        "check", help="Check mappings only use defined distribution keys"
    )
    check_parser.add_argument(
        "--mappings",
        type=str,
        default=None,
        help="Mappings directory relative to the root (default: DELAYSIM_MAPPINGS_DIR or mappings)",
    )

    return parser


def _files_root(args: argparse.Namespace) -> Path:
    if args.root:
        return Path(args.root).expanduser().resolve()
    return sim_config.get_files_root()


def _load_registry(args: argparse.Namespace) -> DistributionRegistry:
    files = args.distributions
    if files is None:
        files = sim_config.get_distribution_files()
    registry = DistributionRegistry(DirectoryFileSource(_files_root(args)))
    registry.load(files)
    return registry


def _format_summary(values: list[int]) -> str:
    ordered = sorted(values)
    p95 = ordered[min(len(ordered) - 1, int(len(ordered) * 0.95))]
    return (
        f"   count={len(values)} min={ordered[0]} median={statistics.median(ordered):g} "
        f"mean={statistics.fmean(ordered):.1f} p95={p95} max={ordered[-1]}"
    )


def cmd_sample(args: argparse.Namespace):
    """Sample delays from a key or a descriptor."""
    if args.count < 1:
        print("Error: --count must be at least 1")
        sys.exit(1)
    if args.seed is not None:
        random.seed(args.seed)

    registry = _load_registry(args)
    distribution: Distribution
    if args.key:
        distribution = FileBasedDistribution(args.key, registry=registry)
    else:
        try:
            descriptor = json.loads(args.descriptor)
        except json.JSONDecodeError as e:
            raise InvalidConfigurationError(f"--descriptor is not valid JSON: {e}") from e
        distribution = DistributionFactory.create(descriptor, registry=registry)

    values = distribution.sample_many(args.count)
    if len(values) <= _MAX_VALUES_PRINTED:
        for value in values:
            print(value)
    else:
        print(_format_summary(values))


def cmd_list(args: argparse.Namespace):
    """List distribution keys with their types."""
    registry = _load_registry(args)
    if not registry.populated:
        print("No distribution files configured")
        return
    for key in registry.keys():
        distribution = registry.resolve(key)
        print(f"  - {key} [{distribution.type_name}]")
    print(f"{len(registry)} key(s)")


def cmd_check(args: argparse.Namespace):
    """Check mappings against distribution files."""
    registry = _load_registry(args)
    mappings_name = args.mappings or sim_config.get_mappings_dir() or "mappings"
    mappings = load_mappings(_files_root(args) / mappings_name, registry=registry)
    ConsistencyChecker(registry).check(mappings)
    print(f"OK: {len(mappings)} mapping(s), {len(registry)} distribution key(s)")


def main():
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    commands = {"sample": cmd_sample, "list": cmd_list, "check": cmd_check}
    try:
        commands[args.command](args)
    except DelaySimError as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
