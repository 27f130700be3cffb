"""Tests for EdgeTTSEngine. No network or audio device is used."""

import unittest
from unittest.mock import MagicMock, patch
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from adapter.speech.edge_tts import EdgeTTSEngine, PLAYERS, pitch_to_hertz, rate_to_percent
from port.speech import Voice


class TestProsody(unittest.TestCase):

    def test_rate_to_percent(self):
        self.assertEqual(rate_to_percent(1.0), '+0%')
        self.assertEqual(rate_to_percent(1.5), '+50%')
        self.assertEqual(rate_to_percent(0.5), '-50%')

    def test_pitch_to_hertz(self):
        self.assertEqual(pitch_to_hertz(1.0), '+0Hz')
        self.assertEqual(pitch_to_hertz(1.2), '+20Hz')
        self.assertEqual(pitch_to_hertz(0.0), '-100Hz')


class TestEdgeTTSEngine(unittest.TestCase):

    def test_unavailable_without_player(self):
        with patch('adapter.speech.edge_tts.find_player', return_value=None):
            engine = EdgeTTSEngine()
        self.assertFalse(engine.is_available())
        with self.assertRaises(RuntimeError):
            engine.play_audio(b'abc', 'audio/mpeg')

    @patch('adapter.speech.edge_tts.subprocess.Popen')
    def test_play_audio_starts_player_and_cancel_cleans_up(self, mock_popen):
        process = MagicMock()
        process.poll.return_value = None
        mock_popen.return_value = process
        engine = EdgeTTSEngine(player='mpg123')

        engine.play_audio(b'abc', 'audio/mpeg')

        command = mock_popen.call_args.args[0]
        self.assertEqual(command[:-1], ['mpg123', *PLAYERS['mpg123']])
        audio_file = Path(command[-1])
        self.assertEqual(audio_file.read_bytes(), b'abc')

        engine.cancel()

        process.terminate.assert_called_once()
        self.assertFalse(audio_file.exists())

    @patch('adapter.speech.edge_tts.subprocess.Popen')
    def test_wait_removes_finished_clip(self, mock_popen):
        process = MagicMock()
        process.poll.return_value = 0
        mock_popen.return_value = process
        engine = EdgeTTSEngine(player='mpg123')

        engine.play_audio(b'abc', 'audio/mpeg')
        audio_file = Path(mock_popen.call_args.args[0][-1])
        engine.wait()

        process.wait.assert_called_once_with()
        process.terminate.assert_not_called()
        self.assertFalse(audio_file.exists())

    @patch('adapter.speech.edge_tts.subprocess.Popen')
    def test_speak_synthesizes_then_plays(self, mock_popen):
        engine = EdgeTTSEngine(player='mpv')

        async def fake_synthesize(text, voice_name, rate, pitch):
            self.assertEqual((text, voice_name), ('mace', 'sq-AL-IlirNeural'))
            return b'mp3'

        with patch.object(engine, '_synthesize', side_effect=fake_synthesize):
            engine.speak('mace', Voice('sq-AL-IlirNeural', 'sq-AL'), 1.0, 1.0)

        mock_popen.assert_called_once()
        engine.cancel()

    def test_list_voices(self):
        async def fake_list_voices():
            return [{'ShortName': 'sq-AL-AnilaNeural', 'Locale': 'sq-AL'}]

        engine = EdgeTTSEngine(player='mpv')
        with patch('edge_tts.list_voices', side_effect=fake_list_voices):
            voices = engine.list_voices()
        self.assertEqual(voices, [Voice('sq-AL-AnilaNeural', 'sq-AL')])


if __name__ == '__main__':
    unittest.main()
