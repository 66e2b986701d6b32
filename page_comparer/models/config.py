"""Configuration models for the page comparer."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from page_comparer.capture.action_runner import action_hook
from page_comparer.models.route import Action, RouteDefinition

DESKTOP_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/92.0.4515.159 Safari/537.36"
)

MOBILE_USER_AGENT = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 15_0 like Mac OS X) "
    "AppleWebKit/605.1.15 (KHTML, like Gecko) "
    "Version/15.0 Mobile/15E148 Safari/604.1"
)


class DeviceProfile(BaseModel):
    name: str = "desktop"
    label: str = "Desktop"
    width: int = 1280
    height: int = 720
    user_agent: str = DESKTOP_USER_AGENT

    @property
    def entry_prefix(self) -> str:
        """Archive file prefix: empty for desktop, ``<name>_`` otherwise."""
        return "" if self.name == "desktop" else f"{self.name}_"

    @property
    def viewport(self) -> dict:
        return {"width": self.width, "height": self.height}


def default_devices() -> list[DeviceProfile]:
    return [
        DeviceProfile(),
        DeviceProfile(
            name="mobile", label="Mobile", width=375, height=800,
            user_agent=MOBILE_USER_AGENT,
        ),
    ]


class RouteConfig(BaseModel):
    name: str
    path: str
    pre_load: list[Action] = Field(default_factory=list)
    after_load: list[Action] = Field(default_factory=list)
    cleanup: list[Action] = Field(default_factory=list)

    def to_definition(self, timeout_ms: int = 10000) -> RouteDefinition:
        """Build a route definition whose hooks replay the configured actions."""
        return RouteDefinition(
            name=self.name,
            path=self.path,
            pre_load=action_hook(self.pre_load, timeout_ms) if self.pre_load else None,
            after_load=action_hook(self.after_load, timeout_ms) if self.after_load else None,
            cleanup=action_hook(self.cleanup, timeout_ms) if self.cleanup else None,
        )


class ComparerConfig(BaseModel):
    # Origins
    before_url: str
    after_url: str

    # Routes
    routes: list[RouteConfig] = Field(default_factory=list)

    # Devices
    devices: list[DeviceProfile] = Field(default_factory=default_devices)

    # Diff settings
    tolerance: int = Field(default=10, ge=0, le=255)
    margin: int = Field(default=50, ge=0)
    whiteness_threshold: int = Field(default=240, ge=0, le=255)

    # Retry
    max_retries: int = Field(default=3, ge=1)
    retry_delay_seconds: float = Field(default=0.0, ge=0)

    # Output
    output_dir: str = "./compares"
    archive_name: str = "compare.zip"

    # Browser
    headless: bool = True
    action_timeout_seconds: int = 10

    @field_validator("before_url", "after_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("routes")
    @classmethod
    def unique_route_names(cls, v: list[RouteConfig]) -> list[RouteConfig]:
        names = [r.name for r in v]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate route names: {', '.join(duplicates)}")
        return v

    @field_validator("devices")
    @classmethod
    def unique_device_names(cls, v: list[DeviceProfile]) -> list[DeviceProfile]:
        if not v:
            raise ValueError("At least one device profile is required")
        names = [d.name for d in v]
        if len(set(names)) != len(names):
            raise ValueError("Device profile names must be unique")
        return v

    @property
    def archive_path(self) -> Path:
        return Path(self.output_dir) / self.archive_name

    @property
    def report_path(self) -> Path:
        return Path(self.output_dir) / "report.json"

    def route_definitions(self) -> list[RouteDefinition]:
        timeout_ms = self.action_timeout_seconds * 1000
        return [r.to_definition(timeout_ms) for r in self.routes]

    @classmethod
    def load(cls, path: str | Path) -> "ComparerConfig":
        """Load config from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path) as f:
            data = json.load(f)
        return cls(**data)

    def save(self, path: str | Path) -> None:
        """Save config to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.model_dump(), f, indent=2)
