import argparse
import sys
from pathlib import Path

from Bio import SeqIO

from blastrun.config.settings import Settings
from blastrun.logging.logger import Log
from blastrun.worker.search_runner import build_search_runner


def _parse_param(raw: str) -> tuple[str, str]:
    key, sep, value = raw.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got '{raw}'")
    return key, value


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blastrun",
        description="Run a remote BLAST search and write the collated hits as XML.",
    )
    parser.add_argument("fasta", type=Path, help="FASTA file with the query sequences")
    parser.add_argument("--program", help="BLAST program, e.g. blastn or blastp")
    parser.add_argument("--database", help="database to search, e.g. nr")
    parser.add_argument("--expect", help="e-value threshold")
    parser.add_argument(
        "--param",
        action="append",
        type=_parse_param,
        default=[],
        metavar="KEY=VALUE",
        help="extra parameter passed to the service verbatim (repeatable)",
    )
    parser.add_argument("-o", "--output", type=Path, help="write the document here instead of stdout")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point: read sequences -> run one search -> write the document."""
    args = build_arg_parser().parse_args(argv)
    settings = Settings()
    # the document may go to stdout, so logs go to stderr
    Log.configure(settings.log_level, stream=sys.stderr)

    sequences = list(SeqIO.parse(args.fasta, "fasta"))
    Log.info(f"Loaded {len(sequences)} sequence(s) from {args.fasta}")

    options = dict(args.param)
    if args.expect:
        options["Expect"] = args.expect

    with build_search_runner(settings) as runner:
        outcome = runner.run(sequences, args.program, args.database, options).result()

    if not outcome.succeeded:
        print(f"{outcome.error_kind}: {outcome.message}", file=sys.stderr)
        return 1
    if args.output:
        args.output.write_text(outcome.document, encoding="utf-8")
        Log.info(f"Wrote {len(outcome.document)} chars to {args.output}")
    else:
        sys.stdout.write(outcome.document + "\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
