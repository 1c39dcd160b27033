"""Configuration loading and validation.

Usage:
    config = load("portlet-config.yaml")       # raises ConfigError on bad config
    config.tools["checkstyle"]["icon"]         # "checkstyle.png"
    generate_template("portlet-config.yaml")   # writes example file to disk
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

_TRUE_VALUES  = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class ConfigError(Exception):
    """Raised when the configuration is missing or invalid."""


# ---------------------------------------------------------------------------
# Config dataclass
# ---------------------------------------------------------------------------

@dataclass
class Config:
    show_icons: bool = False
    hide_clean_jobs: bool = False
    resources_url: str = ""
    tools: dict[str, dict[str, Any]] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------

def load(config_path: str = "portlet-config.yaml") -> Config:
    """Load and validate configuration from a YAML file.

    Environment variables PORTLET_SHOW_ICONS, PORTLET_HIDE_CLEAN_JOBS and
    PORTLET_RESOURCES_URL override file values.

    Raises:
        ConfigError: if the file is missing, malformed, or holds values of
                     the wrong type.
    """
    path = Path(config_path)

    if not path.is_file():
        raise ConfigError(
            f"Config file not found: '{config_path}'\n"
            "Run `python -m issues_portlet init` to generate a template."
        )

    try:
        with path.open(encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse '{config_path}': {exc}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Failed to read '{config_path}': {exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"'{config_path}' must be a YAML mapping at the top level.")

    errors: list[str] = []
    portlet = raw.get("portlet") or {}
    if not isinstance(portlet, dict):
        errors.append("  - 'portlet' must be a mapping")
        portlet = {}

    show_icons = _env_flag("PORTLET_SHOW_ICONS", errors)
    if show_icons is None:
        show_icons = portlet.get("show_icons", False)
    hide_clean_jobs = _env_flag("PORTLET_HIDE_CLEAN_JOBS", errors)
    if hide_clean_jobs is None:
        hide_clean_jobs = portlet.get("hide_clean_jobs", False)
    resources_url = os.environ.get("PORTLET_RESOURCES_URL") or portlet.get("resources_url") or ""
    tools = raw.get("tools") or {}

    config = Config(
        show_icons=show_icons,
        hide_clean_jobs=hide_clean_jobs,
        resources_url=resources_url,
        tools=tools,
    )
    _validate(config, errors)
    if isinstance(config.resources_url, str):
        config.resources_url = config.resources_url.strip()
    return config


def _env_flag(name: str, errors: list[str]) -> bool | None:
    """Return the boolean value of environment variable *name*, None if unset."""
    value = os.environ.get(name)
    if value is None or not value.strip():
        return None
    value = value.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    errors.append(f"  - environment variable {name}='{os.environ[name]}' is not a boolean")
    return None


def _validate(config: Config, errors: list[str]) -> None:
    """Raise ConfigError if any value has the wrong type."""
    if not isinstance(config.show_icons, bool):
        errors.append("  - 'portlet.show_icons' must be true or false")
    if not isinstance(config.hide_clean_jobs, bool):
        errors.append("  - 'portlet.hide_clean_jobs' must be true or false")
    if not isinstance(config.resources_url, str):
        errors.append("  - 'portlet.resources_url' must be a string")

    if not isinstance(config.tools, dict):
        errors.append("  - 'tools' must be a mapping of tool id to tool settings")
    else:
        for tool_id, settings in config.tools.items():
            if not isinstance(tool_id, str):
                errors.append(f"  - tool id {tool_id!r} must be a string")
            if not isinstance(settings, dict):
                errors.append(f"  - 'tools.{tool_id}' must be a mapping")
                continue
            for key in ("name", "link_name", "icon"):
                value = settings.get(key)
                if value is not None and not isinstance(value, str):
                    errors.append(f"  - 'tools.{tool_id}.{key}' must be a string")

    if errors:
        raise ConfigError("Invalid configuration:\n" + "\n".join(errors))


# ---------------------------------------------------------------------------
# Template generator (used by `init` command)
# ---------------------------------------------------------------------------

TEMPLATE = """\
portlet:
  show_icons: false          # Prefix column headers with the tool icon
  hide_clean_jobs: false     # Hide jobs without any reported issue
  resources_url: "/static/icons"

tools:
  # Tool id: display name, link name and icon of the tool
  checkstyle:
    name: "CheckStyle"
    icon: "checkstyle.png"
  spotbugs:
    name: "SpotBugs"
    link_name: "SpotBugs Warnings"
    icon: "spotbugs.png"
"""


def generate_template(output_path: str = "portlet-config.yaml") -> None:
    """Write a template portlet-config.yaml to *output_path*.

    Raises:
        ConfigError: if the file already exists.
    """
    path = Path(output_path)
    if path.exists():
        raise ConfigError(
            f"'{output_path}' already exists. Remove it first or choose a different path."
        )
    path.write_text(TEMPLATE, encoding="utf-8")
