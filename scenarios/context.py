from dataclasses import dataclass, field
from typing import Optional

from config import Settings, Timeouts


@dataclass
class ScenarioContext:
    # Identyfikacja
    scenario_name: str
    base_url: str

    # Dane klienta / formularza
    locale: str = "en_US"
    consent_strategy: str = "accept"   # accept / manage / block
    screenshot_dir: Optional[str] = None

    timeouts: Timeouts = field(default_factory=Timeouts)

    # Flagi — {name: is_enabled}
    flags: dict[str, bool] = field(default_factory=dict)

    def flag(self, name: str, default: bool = False) -> bool:
        return self.flags.get(name, default)

    @property
    def is_mobile(self) -> bool:
        return self.flag('mobile')

    @property
    def is_desktop(self) -> bool:
        return not self.flag('mobile')

    def url(self, path: str = "") -> str:
        if path.startswith("http://") or path.startswith("https://"):
            return path
        if path and not path.startswith("/"):
            path = f"/{path}"
        return f"{self.base_url.rstrip('/')}{path}"

    @classmethod
    def from_settings(cls, settings: Settings, scenario_name: str, **overrides) -> "ScenarioContext":
        values = dict(
            scenario_name=scenario_name,
            base_url=settings.base_url,
            locale=settings.locale,
            consent_strategy=settings.consent_strategy,
            screenshot_dir=settings.screenshot_dir,
            timeouts=settings.timeouts,
        )
        values.update(overrides)
        return cls(**values)
