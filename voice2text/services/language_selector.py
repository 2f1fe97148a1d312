"""Recognition language choice."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..models.ui import DisplayState, START_LABEL
from .recording_session import RecordingSessionController

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LanguageOption:
    """One entry of the language menu."""
    key: str
    name: str
    locale: str
    title: str
    prompt: str


DEFAULT_LANGUAGES: Tuple[LanguageOption, ...] = (
    LanguageOption("english", "English", "en-US", "Speak in English", "Say something, I'm listening!"),
    LanguageOption("hindi", "Hindi", "hi-IN", "हिंदी मे बोलो", "कुछ तो बोलो, मैं सुन रहा हूँ!"),
    LanguageOption("french", "French", "fr-FR", "Parle en français", "Dis quelque chose, je t'écoute !"),
)


def load_language_options(entries: Optional[Iterable[Dict[str, Any]]]) -> Tuple[LanguageOption, ...]:
    """Build the language menu from the ``recognition.languages`` config list."""
    if not entries:
        return DEFAULT_LANGUAGES
    options = []
    for entry in entries:
        try:
            options.append(LanguageOption(
                key=str(entry["key"]).lower(),
                name=entry["name"],
                locale=entry["locale"],
                title=entry.get("title", f"Speak in {entry['name']}"),
                prompt=entry.get("prompt", DEFAULT_LANGUAGES[0].prompt),
            ))
        except (KeyError, TypeError) as e:
            raise ValueError(f"Invalid language entry {entry!r}: missing {e}") from e
    return tuple(options)


class LanguageSelector:
    """Chooses which locale the next recording session uses."""

    def __init__(self,
                 controller: RecordingSessionController,
                 display: DisplayState,
                 options: Iterable[LanguageOption] = DEFAULT_LANGUAGES,
                 default: str = "english"):
        self.controller = controller
        self.display = display
        self._options: Dict[str, LanguageOption] = {option.key: option for option in options}
        if not self._options:
            raise ValueError("At least one language option is required")
        if default.lower() not in self._options:
            logger.warning(f"Unknown default language '{default}', using {next(iter(self._options))}")
            default = next(iter(self._options))
        self._current = self._options[default.lower()]
        self.choose(self._current.key)

    @property
    def current(self) -> LanguageOption:
        return self._current

    @property
    def options(self) -> List[LanguageOption]:
        return list(self._options.values())

    def choose(self, key: str) -> LanguageOption:
        """Select a language. Raises KeyError for unknown keys."""
        option = self._options[key.lower()]
        self._current = option
        self.controller.set_language(option.locale, option.prompt)

        self.display.title = option.title
        self.display.language_label = option.name
        self.display.show_text(option.prompt)
        if not self.controller.is_capturing:
            self.display.start_label = START_LABEL
        return option

    def cycle(self) -> LanguageOption:
        keys = list(self._options)
        next_key = keys[(keys.index(self._current.key) + 1) % len(keys)]
        return self.choose(next_key)
