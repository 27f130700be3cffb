"""Edge TTS implementation of SpeechEngine.

Speech is synthesized with the edge-tts service and handed, like stored
recordings, to an external audio player process. Cancelling terminates
that process.
"""

import asyncio
import logging
import mimetypes
import shutil
import subprocess
import tempfile
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Awaitable, Callable, TypeVar

from port.speech import Voice

logger = logging.getLogger(__name__)

DEFAULT_VOICE = 'sq-AL-AnilaNeural'

# Player executable → arguments placed before the audio file path
PLAYERS: dict[str, list[str]] = {
    'ffplay': ['-nodisp', '-autoexit', '-loglevel', 'quiet'],
    'mpv': ['--no-video', '--really-quiet'],
    'mpg123': ['-q'],
    'afplay': [],
}

T = TypeVar('T')


def find_player() -> str | None:
    """First supported audio player found on PATH."""
    for name in PLAYERS:
        if shutil.which(name):
            return name
    return None


def rate_to_percent(rate: float) -> str:
    """Map a 1.0-centred speaking rate to edge-tts' signed percentage."""
    return f"{round((rate - 1.0) * 100):+d}%"


def pitch_to_hertz(pitch: float) -> str:
    """Map a 1.0-centred pitch to edge-tts' signed Hz offset."""
    return f"{round((pitch - 1.0) * 100):+d}Hz"


class EdgeTTSEngine:
    def __init__(self, player: str | None = None):
        self.player = player if player is not None else find_player()
        self._process: subprocess.Popen | None = None
        self._audio_file: Path | None = None

    def is_available(self) -> bool:
        return self.player is not None

    def list_voices(self) -> list[Voice]:
        import edge_tts

        raw = self._run_coroutine(edge_tts.list_voices)
        return [Voice(name=v['ShortName'], lang=v['Locale']) for v in raw]

    def speak(self, text: str, voice: Voice | None, rate: float, pitch: float) -> None:
        voice_name = voice.name if voice else DEFAULT_VOICE
        logger.debug("Synthesizing speech", extra={"voice": voice_name, "chars": len(text)})
        audio = self._run_coroutine(lambda: self._synthesize(text, voice_name, rate, pitch))
        self.play_audio(audio, 'audio/mpeg')

    def play_audio(self, audio: bytes, mime_type: str) -> None:
        if self.player is None:
            raise RuntimeError("No audio player available")
        self.cancel()
        suffix = mimetypes.guess_extension(mime_type) or '.audio'
        with tempfile.NamedTemporaryFile(suffix=suffix, delete=False) as f:
            f.write(audio)
            self._audio_file = Path(f.name)
        self._process = subprocess.Popen(
            [self.player, *PLAYERS.get(self.player, []), str(self._audio_file)],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )

    def wait(self) -> None:
        """Block until the current clip finishes playing, then remove its file."""
        if self._process is not None:
            self._process.wait()
        self.cancel()

    def cancel(self) -> None:
        if self._process is not None and self._process.poll() is None:
            self._process.terminate()
            try:
                self._process.wait(timeout=2)
            except subprocess.TimeoutExpired:
                self._process.kill()
        self._process = None
        if self._audio_file is not None:
            self._audio_file.unlink(missing_ok=True)
            self._audio_file = None

    async def _synthesize(self, text: str, voice_name: str, rate: float, pitch: float) -> bytes:
        import edge_tts

        communicate = edge_tts.Communicate(
            text,
            voice_name,
            rate=rate_to_percent(rate),
            pitch=pitch_to_hertz(pitch),
        )
        audio_chunks: list[bytes] = []
        async for chunk in communicate.stream():
            if chunk["type"] == "audio":
                audio_chunks.append(chunk["data"])
        if not audio_chunks:
            raise RuntimeError("Edge TTS response did not contain audio data")
        return b"".join(audio_chunks)

    def _run_coroutine(self, coro_factory: Callable[[], Awaitable[T]]) -> T:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return asyncio.run(coro_factory())

        # Called from inside an event loop (the CLI runs under asyncio.run)
        def runner() -> T:
            loop = asyncio.new_event_loop()
            try:
                return loop.run_until_complete(coro_factory())
            finally:
                loop.close()

        with ThreadPoolExecutor(max_workers=1) as executor:
            return executor.submit(runner).result()
