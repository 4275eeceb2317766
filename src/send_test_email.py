import sys

from hn_alert.config import load_settings
from hn_alert.errors import ConfigError
from hn_alert.logging_utils import configure_logging, logger
from hn_alert.pipeline import send_test_alert


def main() -> int:
    configure_logging()

    try:
        settings = load_settings()
    except ConfigError as exc:
        logger.error(str(exc), extra={"event": "config_invalid"})
        return 2

    return send_test_alert(settings)


if __name__ == "__main__":
    sys.exit(main())
