class HNAlertError(Exception):
    """Base class for every error raised by hn_alert."""


class ConfigError(HNAlertError):
    pass


class MissingSettingError(ConfigError):
    def __init__(self, name: str) -> None:
        super().__init__(f"missing environment value for: {name}")
        self.name = name


class FetchError(HNAlertError):
    def __init__(self, url: str, cause: str) -> None:
        super().__init__(f"error while requesting {url!r}: {cause}")
        self.url = url
        self.cause = cause


class ExtractionError(HNAlertError):
    pass


class UnrecognizedUnitError(ExtractionError):
    def __init__(self, num: int, unit: str) -> None:
        super().__init__(f"couldn't parse duration: {num} {unit}")
        self.num = num
        self.unit = unit


class NotifyError(HNAlertError):
    def __init__(self, domain: str, cause: str) -> None:
        super().__init__(f"error sending alert for {domain!r}: {cause}")
        self.domain = domain
        self.cause = cause
