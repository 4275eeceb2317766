import argparse
import json
import sys

from hn_alert.config import domain_url
from hn_alert.errors import ExtractionError, FetchError
from hn_alert.extractors import extract_item_ages
from hn_alert.fetcher import fetch_listing
from hn_alert.logging_utils import configure_logging


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fetch a domain's listing page and print the extracted item ages as JSON.")
    parser.add_argument("domain", help="Domain to look up, e.g. brandur.org")
    parser.add_argument(
        "--file",
        help="Read listing markup from this file instead of fetching it.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable structured logs while testing extraction.",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    if args.verbose:
        configure_logging()

    try:
        if args.file:
            with open(args.file, encoding="utf-8") as fh:
                content = fh.read()
        else:
            content = fetch_listing(domain_url(args.domain))
        ages = extract_item_ages(content)
    except (FetchError, ExtractionError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    rows = [
        {"raw": item.raw, "age_seconds": int(item.age.total_seconds()), "item_id": item.item_id}
        for item in ages
    ]
    print(json.dumps({"domain": args.domain, "items": rows}, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
