from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
import tomllib


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _default_config_root() -> Path:
    return Path.home() / ".config" / "awqat"


def _quote(value: object) -> str:
    text = str(value).replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{text}"'


@dataclass(slots=True)
class LocationSettings:
    city: str = "Riyadh"
    country: str = "Saudi Arabia"


@dataclass(slots=True)
class PrayerSettings:
    api_base: str = "https://api.aladhan.com/v1"
    calculation_method: str = "4"
    madhab: str = "Shafi"
    timeout: float = 10.0


@dataclass(slots=True)
class GeolocationSettings:
    enabled: bool = True
    endpoint: str = "https://ipapi.co/json/"
    timeout: float = 10.0
    maximum_age: float = 0.0


@dataclass(slots=True)
class NotificationSettings:
    desktop: bool = True
    app_name: str = "Awqat"
    timeout: int = 10


@dataclass(slots=True)
class LoggingSettings:
    level: str = "WARNING"
    file: str = ""


@dataclass(slots=True)
class AwqatConfig:
    location: LocationSettings = field(default_factory=LocationSettings)
    prayer_settings: PrayerSettings = field(default_factory=PrayerSettings)
    geolocation: GeolocationSettings = field(default_factory=GeolocationSettings)
    notifications: NotificationSettings = field(default_factory=NotificationSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    @classmethod
    def default(cls) -> "AwqatConfig":
        return cls()

    def to_dict(self) -> dict:
        return {
            "location": {
                "city": self.location.city,
                "country": self.location.country,
            },
            "prayer_settings": {
                "api_base": self.prayer_settings.api_base,
                "calculation_method": self.prayer_settings.calculation_method,
                "madhab": self.prayer_settings.madhab,
                "timeout": self.prayer_settings.timeout,
            },
            "geolocation": {
                "enabled": self.geolocation.enabled,
                "endpoint": self.geolocation.endpoint,
                "timeout": self.geolocation.timeout,
                "maximum_age": self.geolocation.maximum_age,
            },
            "notifications": {
                "desktop": self.notifications.desktop,
                "app_name": self.notifications.app_name,
                "timeout": self.notifications.timeout,
            },
            "logging": {
                "level": self.logging.level,
                "file": self.logging.file,
            },
        }


class ConfigManager:
    """Simple TOML configuration loader."""

    def __init__(self, config_path: Path | None = None) -> None:
        self.config_path = config_path or (_default_config_root() / "config.toml")
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        self._errors: list[str] = []

    def errors(self) -> list[str]:
        return list(self._errors)

    def load(self) -> AwqatConfig:
        self._errors.clear()
        if not self.config_path.exists():
            config = AwqatConfig.default()
            self._write(config)
            return config

        try:
            with self.config_path.open("rb") as handle:
                raw = tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            self._errors.append(f"Invalid config file {self.config_path}: {exc}")
            return AwqatConfig.default()

        defaults = AwqatConfig.default()

        def _section(name: str) -> dict:
            value = raw.get(name, {})
            if isinstance(value, dict):
                return value
            self._errors.append(f"Invalid [{name}] section: expected a table")
            return {}

        location_cfg = _section("location")
        prayer_cfg = _section("prayer_settings")
        geo_cfg = _section("geolocation")
        notify_cfg = _section("notifications")
        logging_cfg = _section("logging")

        def _float(section: str, key: str, value: object, default: float) -> float:
            if value is None:
                return default
            try:
                result = float(value)
            except (TypeError, ValueError):
                self._errors.append(f"Invalid {section}.{key}: {value!r}")
                return default
            if result < 0:
                self._errors.append(f"Invalid {section}.{key}: must not be negative")
                return default
            return result

        def _bool(section: str, key: str, value: object, default: bool) -> bool:
            if value is None:
                return default
            if isinstance(value, bool):
                return value
            self._errors.append(f"Invalid {section}.{key}: expected true or false")
            return default

        level = str(logging_cfg.get("level", defaults.logging.level)).upper()
        if level not in LOG_LEVELS:
            self._errors.append(f"Invalid logging.level: {level}")
            level = defaults.logging.level

        return AwqatConfig(
            location=LocationSettings(
                city=str(location_cfg.get("city") or defaults.location.city),
                country=str(location_cfg.get("country") or defaults.location.country),
            ),
            prayer_settings=PrayerSettings(
                api_base=str(prayer_cfg.get("api_base") or defaults.prayer_settings.api_base).rstrip("/"),
                calculation_method=str(
                    prayer_cfg.get("calculation_method", defaults.prayer_settings.calculation_method)
                ),
                madhab=str(prayer_cfg.get("madhab", defaults.prayer_settings.madhab)),
                timeout=_float(
                    "prayer_settings", "timeout", prayer_cfg.get("timeout"), defaults.prayer_settings.timeout
                ),
            ),
            geolocation=GeolocationSettings(
                enabled=_bool("geolocation", "enabled", geo_cfg.get("enabled"), defaults.geolocation.enabled),
                endpoint=str(geo_cfg.get("endpoint") or defaults.geolocation.endpoint),
                timeout=_float("geolocation", "timeout", geo_cfg.get("timeout"), defaults.geolocation.timeout),
                maximum_age=_float(
                    "geolocation", "maximum_age", geo_cfg.get("maximum_age"), defaults.geolocation.maximum_age
                ),
            ),
            notifications=NotificationSettings(
                desktop=_bool(
                    "notifications", "desktop", notify_cfg.get("desktop"), defaults.notifications.desktop
                ),
                app_name=str(notify_cfg.get("app_name") or defaults.notifications.app_name),
                timeout=int(
                    _float("notifications", "timeout", notify_cfg.get("timeout"), defaults.notifications.timeout)
                ),
            ),
            logging=LoggingSettings(
                level=level,
                file=str(logging_cfg.get("file", defaults.logging.file)),
            ),
        )

    def _write(self, config: AwqatConfig) -> None:
        data = config.to_dict()
        lines = [
            "[location]",
            f"city = {_quote(data['location']['city'])}",
            f"country = {_quote(data['location']['country'])}",
            "",
            "[prayer_settings]",
            f"api_base = {_quote(data['prayer_settings']['api_base'])}",
            f"calculation_method = {_quote(data['prayer_settings']['calculation_method'])}",
            f"madhab = {_quote(data['prayer_settings']['madhab'])}",
            f"timeout = {data['prayer_settings']['timeout']}",
            "",
            "[geolocation]",
            f"enabled = {str(data['geolocation']['enabled']).lower()}",
            f"endpoint = {_quote(data['geolocation']['endpoint'])}",
            f"timeout = {data['geolocation']['timeout']}",
            f"maximum_age = {data['geolocation']['maximum_age']}",
            "",
            "[notifications]",
            f"desktop = {str(data['notifications']['desktop']).lower()}",
            f"app_name = {_quote(data['notifications']['app_name'])}",
            f"timeout = {data['notifications']['timeout']}",
            "",
            "[logging]",
            f"level = {_quote(data['logging']['level'])}",
            f"file = {_quote(data['logging']['file'])}",
        ]
        self.config_path.write_text("\n".join(lines) + "\n", encoding="utf-8")

    def save(self, config: AwqatConfig) -> None:
        self._write(config)
