"""In-memory implementation of SpeechEngine for testing."""

from port.speech import Voice


class FakeSpeechEngine:
    def __init__(self, voices: list[Voice] | None = None, available: bool = True):
        self.voices = voices if voices is not None else [Voice(name='en-US-AriaNeural', lang='en-US')]
        self.available = available
        self.spoken: list[tuple[str, Voice | None, float, float]] = []
        self.played: list[tuple[bytes, str]] = []
        self.cancel_count = 0
        self.wait_count = 0

    def is_available(self) -> bool:
        return self.available

    def list_voices(self) -> list[Voice]:
        return list(self.voices)

    def speak(self, text: str, voice: Voice | None, rate: float, pitch: float) -> None:
        self.spoken.append((text, voice, rate, pitch))

    def play_audio(self, audio: bytes, mime_type: str) -> None:
        self.played.append((audio, mime_type))

    def wait(self) -> None:
        self.wait_count += 1

    def cancel(self) -> None:
        self.cancel_count += 1
