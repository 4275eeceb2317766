import argparse
import sys

from hn_alert.pipeline import run_pipeline


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Poll Hacker News for new submissions from configured domains.")
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single cycle and exit, regardless of LOOP.",
    )
    parser.add_argument(
        "--skip-email",
        action="store_true",
        help="Check domains and log qualifying items but do not send alert emails.",
    )
    return parser.parse_args()


if __name__ == "__main__":
    args = parse_args()
    sys.exit(run_pipeline(enable_email=not args.skip_email, once=args.once))
