"""Tool metadata lookup and icon resolution.

Usage:
    registry = ToolRegistry.from_config(config)
    label    = registry.create("checkstyle", "CheckStyle")
    images   = ImagePaths("/static/icons")
    images.get_image_path(label.small_icon_url)   # "/static/icons/checkstyle.png"
"""

from dataclasses import dataclass
from typing import Mapping, Protocol
from urllib.parse import urlsplit

from issues_portlet.config import Config


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class UnknownToolError(LookupError):
    """Raised when a tool id is neither registered nor given a fallback name."""


# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ToolLabel:
    tool_id: str
    name: str
    link_name: str = ""
    small_icon_url: str = ""


class LabelFactory(Protocol):
    def create(self, tool_id: str, name: str = "") -> ToolLabel:
        ...


class ToolRegistry:
    """Label lookup backed by a fixed mapping of tool id to ToolLabel.

    Unregistered tools get a label built from the name they reported, without
    an icon. Without such a name the lookup fails with UnknownToolError.
    """

    def __init__(self, labels: Mapping[str, ToolLabel] | None = None) -> None:
        self._labels = dict(labels or {})

    @classmethod
    def from_config(cls, config: Config) -> "ToolRegistry":
        labels = {}
        for tool_id, settings in config.tools.items():
            name = settings.get("name") or tool_id
            labels[tool_id] = ToolLabel(
                tool_id=tool_id,
                name=name,
                link_name=settings.get("link_name") or name,
                small_icon_url=settings.get("icon") or "",
            )
        return cls(labels)

    def __contains__(self, tool_id: str) -> bool:
        return tool_id in self._labels

    def create(self, tool_id: str, name: str = "") -> ToolLabel:
        if tool_id in self._labels:
            return self._labels[tool_id]
        if name:
            return ToolLabel(tool_id=tool_id, name=name, link_name=name)
        raise UnknownToolError(f"No label registered for tool '{tool_id}'")


# ---------------------------------------------------------------------------
# Icons
# ---------------------------------------------------------------------------

class ImageResolver(Protocol):
    def get_image_path(self, icon: str) -> str:
        ...


class ImagePaths:
    """Resolves icon file names against the URL the icons are served from."""

    def __init__(self, resources_url: str = "") -> None:
        self.resources_url = resources_url.rstrip("/")

    def get_image_path(self, icon: str) -> str:
        if not icon:
            return ""
        # Absolute paths and full URLs are used as they are
        if icon.startswith("/") or urlsplit(icon).scheme or not self.resources_url:
            return icon
        return f"{self.resources_url}/{icon}"
