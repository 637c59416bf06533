#!/usr/bin/env python3
from coverage import Coverage  # type: ignore
import sys
import argparse
import re

parser = argparse.ArgumentParser(description="Compute code coverage for tests.")
parser.add_argument(
    "--dir",
    dest="dir",
    help="output HTML to directory",
    default="htmlcov/",
)
parser.add_argument(
    "--emit-data-file",
    dest="emit_data_file",
    help="emit a .coverage file",
    action="store_true",
)
parser.add_argument(
    "--filter",
    dest="filter_re",
    type=lambda x: re.compile(x),
    help=("Only run tests matching this regular expression."),
)
args = parser.parse_args()

cov = Coverage(
    include="zdemangle/*",
    data_file=".coverage" if args.emit_data_file else None,
    branch=True,
)
cov.start()

import run_tests

run_tests.set_up_logging(debug=False)
ret = run_tests.main(
    run_tests.TestOptions(
        should_overwrite=False,
        diff_context=3,
        filter_re=args.filter_re,
        coverage=cov,
    )
)

cov.stop()

cov.html_report(directory=args.dir, show_contexts=True, skip_empty=True)
print(f"Wrote html to {args.dir}")

sys.exit(ret)
