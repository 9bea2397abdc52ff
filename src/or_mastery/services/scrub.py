"""Scrub view: hands-free auto-scrolling of long procedure notes."""

from dataclasses import dataclass

from or_mastery.domain.errors import ValidationError
from or_mastery.domain.models import Procedure

SPEED_PRESETS: dict[str, float] = {"slow": 10.0, "normal": 18.0, "fast": 28.0}
DEFAULT_SPEED = SPEED_PRESETS["normal"]
WRAP_PAUSE_SECONDS = 0.7
EMPTY_SECTION_TEXT = "No content yet. Add notes in the main page."

# section key -> (title, procedure attribute)
SECTIONS: dict[str, tuple[str, str]] = {
    "draping": ("Draping", "draping"),
    "instruments": ("Instruments / Trays", "instruments_trays"),
    "workflow": ("Workflow / Notes", "workflow_notes"),
}


@dataclass(frozen=True)
class ScrubPanel:
    """Title and body shown in the scrub view."""

    section: str
    title: str
    body: str


def scrub_panel(procedure: Procedure, section: str) -> ScrubPanel:
    """Return the panel content for one notes section."""
    if section not in SECTIONS:
        raise ValidationError(f"Unknown section: {section}")
    title, attribute = SECTIONS[section]
    body = getattr(procedure, attribute) or ""
    return ScrubPanel(
        section=section,
        title=title,
        body=body if body.strip() else EMPTY_SECTION_TEXT,
    )


@dataclass
class AutoScroller:
    """Scroll position of the open scrub panel, advanced by ``tick``.

    Scrolling runs only while a panel is open, auto-scroll is on, and the
    pointer is not over the text. After reaching the bottom it waits
    ``WRAP_PAUSE_SECONDS`` and jumps back to the top.
    """

    section: str | None = None
    enabled: bool = True
    hovered: bool = False
    speed: float = DEFAULT_SPEED
    offset: float = 0.0
    content_height: float = 0.0
    viewport_height: float = 0.0
    _wrap_wait: float | None = None

    @property
    def is_open(self) -> bool:
        return self.section is not None

    @property
    def running(self) -> bool:
        return self.is_open and self.enabled and not self.hovered

    @property
    def max_offset(self) -> float:
        return max(0.0, self.content_height - self.viewport_height)

    def open(
        self, section: str, content_height: float, viewport_height: float
    ) -> None:
        """Open a panel with default speed, scrolled to the top."""
        if section not in SECTIONS:
            raise ValidationError(f"Unknown section: {section}")
        self.section = section
        self.content_height = content_height
        self.viewport_height = viewport_height
        self.enabled = True
        self.hovered = False
        self.speed = DEFAULT_SPEED
        self.offset = 0.0
        self._wrap_wait = None

    def close(self) -> None:
        """Close the panel and stop scrolling."""
        self.section = None
        self.hovered = False
        self.offset = 0.0
        self._wrap_wait = None

    def toggle(self) -> bool:
        self.enabled = not self.enabled
        return self.enabled

    def hover(self, hovered: bool) -> None:
        self.hovered = hovered

    def set_speed(self, speed: float | str) -> None:
        """Set speed in pixels per second, or by preset name."""
        if isinstance(speed, str):
            if speed not in SPEED_PRESETS:
                raise ValidationError(f"Unknown speed: {speed}")
            speed = SPEED_PRESETS[speed]
        if speed <= 0:
            raise ValidationError("Speed must be positive.")
        self.speed = float(speed)

    def resize(self, content_height: float, viewport_height: float) -> None:
        self.content_height = content_height
        self.viewport_height = viewport_height
        self.offset = min(self.offset, self.max_offset)

    def tick(self, elapsed: float) -> float:
        """Advance by ``elapsed`` seconds and return the new offset."""
        if not self.running or elapsed <= 0:
            return self.offset
        limit = self.max_offset
        if limit <= 0:
            return self.offset
        if self._wrap_wait is not None:
            self._wrap_wait -= elapsed
            if self._wrap_wait <= 0:
                self._wrap_wait = None
                self.offset = 0.0
            return self.offset
        self.offset = min(limit, self.offset + self.speed * elapsed)
        if self.offset >= limit - 1:
            self._wrap_wait = WRAP_PAUSE_SECONDS
        return self.offset
