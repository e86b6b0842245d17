"""CLI entry point: python -m zfpharness [name=value ...] [help]"""

import argparse
import sys


def _is_help(token) -> bool:
    return token[:4].lower() == "help"


def _cmd_help(tokens):
    """Print the cd_values line and option table; bad options are reported, not fatal."""
    from .cli_formatting import print_cd_values, print_error, print_options
    from .codec.zfp_params import encode_cd_values, format_cd_values
    from .config import HarnessConfig

    config = HarnessConfig()
    errors = []
    for token in tokens:
        try:
            HarnessConfig.from_assignments([token], base=config)
        except ValueError as e:
            errors.append(str(e))
    try:
        words, n = encode_cd_values(config.compression_mode())
    except ValueError as e:
        errors.append(str(e))
    else:
        # Usable as-is with h5repack.
        print_cd_values(format_cd_values(words[:n]))

    print_options(config.options())
    for message in errors:
        print_error(message)
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="zfpharness",
        description="Write plain and ZFP-compressed HDF5 datasets for comparison",
        add_help=False,
    )
    parser.add_argument("options", nargs="*", metavar="name=value",
                        help="Option assignments; 'help' lists all options")
    args, unknown = parser.parse_known_args(argv)
    # Dash-prefixed tokens are just unrecognized options here.
    tokens = list(args.options) + list(unknown)

    if any(_is_help(t) for t in tokens):
        return _cmd_help([t for t in tokens if not _is_help(t)])

    from .cli_formatting import print_cd_values, print_error
    from .codec.zfp_params import encode_cd_values, format_cd_values
    from .config import HarnessConfig
    from .errors import HarnessError, PreconditionError, ResourceError

    try:
        config = HarnessConfig.from_assignments(tokens)
        words, n = encode_cd_values(config.compression_mode())
    except ValueError as e:
        print_error(str(e))
        return 1

    print_cd_values(format_cd_values(words[:n]))

    try:
        _cmd_run(config)
    except ResourceError as e:
        print_error(f"{e.operation} failed, errno={e.errno} ({e.strerror})")
        return 1
    except (HarnessError, PreconditionError) as e:
        print_error(str(e))
        return 1
    except OSError as e:
        print_error(f"{e.__class__.__name__} failed, errno={e.errno} ({e.strerror})")
        return 1
    return 0


def _cmd_run(config):
    from .cli_formatting import console, print_roundtrip_results
    from .harness import run_roundtrip
    from .storage.h5_container import summarize_container

    console.print(f"[bold]Writing[/bold] {config.ofile} ({config.npoints} points)...")
    report = run_roundtrip(config)
    print_roundtrip_results(report, summarize_container(report.output))


if __name__ == "__main__":
    sys.exit(main())
