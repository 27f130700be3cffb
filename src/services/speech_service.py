"""Speech adapter: text-to-speech and recording playback for entries."""

import logging

from domain.model.entry import Entry
from port.speech import SpeechEngine, Voice
from utils.data_url import decode_data_url

logger = logging.getLogger(__name__)

PREFERRED_LANGUAGE = 'sq'
MIN_RATE, MAX_RATE = 0.1, 10.0
MIN_PITCH, MAX_PITCH = 0.0, 2.0


class SpeechAdapter:
    """Speaks words and plays recorded audio through a SpeechEngine.

    Only one sound plays at a time: every new utterance cancels the
    previous one. Nothing is kept beyond the current utterance.
    """

    def __init__(
        self,
        engine: SpeechEngine,
        rate: float = 1.0,
        pitch: float = 1.0,
        preferred_language: str = PREFERRED_LANGUAGE,
    ):
        self.engine = engine
        self.rate = rate
        self.pitch = pitch
        self.preferred_language = preferred_language
        self._voices: list[Voice] | None = None
        self.selected_voice: Voice | None = None

    @property
    def supported(self) -> bool:
        return self.engine.is_available()

    @property
    def rate(self) -> float:
        return self._rate

    @rate.setter
    def rate(self, value: float) -> None:
        self._rate = max(MIN_RATE, min(float(value), MAX_RATE))

    @property
    def pitch(self) -> float:
        return self._pitch

    @pitch.setter
    def pitch(self, value: float) -> None:
        self._pitch = max(MIN_PITCH, min(float(value), MAX_PITCH))

    @property
    def voices(self) -> list[Voice]:
        """Available voices, loaded on first access.

        The first load also picks a default voice: one for the preferred
        language if offered, otherwise the first voice.
        """
        if self._voices is None:
            try:
                self._voices = self.engine.list_voices() if self.supported else []
            except Exception as e:
                logger.warning("Failed to list speech voices", extra={"error": str(e)})
                self._voices = []
            if self.selected_voice is None and self._voices:
                self.selected_voice = next(
                    (v for v in self._voices if v.lang.lower().startswith(self.preferred_language)),
                    self._voices[0],
                )
        return self._voices

    def select_voice(self, name: str) -> bool:
        """Select a voice by name. Returns False if no such voice exists."""
        voice = next((v for v in self.voices if v.name == name), None)
        if voice is None:
            return False
        self.selected_voice = voice
        return True

    def speak(self, text: str) -> bool:
        """Speak text, cancelling anything already playing. Returns False if nothing was spoken."""
        if not self.supported or not text or not text.strip():
            return False
        self.engine.cancel()
        self.voices  # loads voices and picks the default voice
        try:
            self.engine.speak(text, self.selected_voice, self.rate, self.pitch)
        except Exception as e:
            logger.warning("Speech synthesis failed", extra={"error": str(e)})
            return False
        return True

    def stop(self) -> None:
        if self.supported:
            self.engine.cancel()

    def wait(self) -> None:
        """Block until the current utterance or clip has finished."""
        if self.supported:
            self.engine.wait()

    def play_recording(self, recording: str) -> bool:
        """Play a stored data-URL recording. Returns False if it cannot be decoded."""
        if not self.supported:
            return False
        try:
            mime_type, audio = decode_data_url(recording)
        except ValueError as e:
            logger.warning("Cannot play stored recording", extra={"error": str(e)})
            return False
        self.engine.cancel()
        try:
            self.engine.play_audio(audio, mime_type)
        except Exception as e:
            logger.warning("Recording playback failed", extra={"error": str(e)})
            return False
        return True

    def play_entry(self, entry: Entry) -> bool:
        """Play an entry's recording when it has one, otherwise speak its word."""
        if entry.recording and self.play_recording(entry.recording):
            return True
        return self.speak(entry.word)
