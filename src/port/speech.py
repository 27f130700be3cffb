"""Port for the host speech and audio subsystem."""

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class Voice:
    """A synthesis voice offered by the speech engine."""
    name: str
    lang: str


class SpeechEngine(Protocol):
    """Text-to-speech and audio playback on the host."""

    def is_available(self) -> bool:
        ...

    def list_voices(self) -> list[Voice]:
        ...

    def speak(self, text: str, voice: Voice | None, rate: float, pitch: float) -> None:
        """Start speaking ``text``. Returns once playback has started."""
        ...

    def play_audio(self, audio: bytes, mime_type: str) -> None:
        """Start playing an encoded audio clip."""
        ...

    def wait(self) -> None:
        """Block until the current utterance or clip has finished."""
        ...

    def cancel(self) -> None:
        """Stop any in-flight utterance or clip."""
        ...
