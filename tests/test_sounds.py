"""Tests for alert beep synthesis and the SoundManager."""

import io
import wave

import numpy as np
import pytest

from queuetimer.audio.sounds import (
    BEEP_SECONDS, SAMPLE_RATE, SOUND_LEVELS, SoundManager, generate_beep,
)


def _samples(wav_bytes):
    with wave.open(io.BytesIO(wav_bytes), "rb") as wf:
        assert wf.getnchannels() == 1
        assert wf.getsampwidth() == 2
        assert wf.getframerate() == SAMPLE_RATE
        frames = wf.readframes(wf.getnframes())
    return np.frombuffer(frames, dtype=np.int16)


# ═══════════════════════════════════════════════════════════════════════════
#  SYNTHESIS
# ═══════════════════════════════════════════════════════════════════════════


class TestGenerateBeep:

    @pytest.mark.parametrize("level", list(SOUND_LEVELS))
    def test_valid_wav_of_expected_length(self, level):
        samples = _samples(generate_beep(level))
        assert len(samples) == int(SAMPLE_RATE * BEEP_SECONDS)

    def test_off_is_silent(self):
        assert not _samples(generate_beep("off")).any()

    def test_louder_levels_peak_higher(self):
        peaks = [
            np.abs(_samples(generate_beep(level))).max()
            for level in ("soft", "medium", "loud")
        ]
        assert peaks == sorted(peaks)
        assert peaks[0] < peaks[-1]

    def test_peak_respects_gain(self):
        peak = np.abs(_samples(generate_beep("loud"))).max() / 32767
        assert peak <= SOUND_LEVELS["loud"].gain + 1e-3

    def test_fades_out(self):
        samples = np.abs(_samples(generate_beep("medium")).astype(np.int32))
        head = samples[:1000].max()
        tail = samples[-1000:].max()
        assert tail < head * 0.05

    def test_unknown_level_raises(self):
        with pytest.raises(KeyError):
            generate_beep("deafening")


# ═══════════════════════════════════════════════════════════════════════════
#  SOUND MANAGER
# ═══════════════════════════════════════════════════════════════════════════


class TestSoundManager:

    def test_caches_wav_files(self, qapp, tmp_path):
        SoundManager(sounds_dir=tmp_path)
        cached = sorted(p.name for p in tmp_path.iterdir())
        assert cached == ["alert_loud.wav", "alert_medium.wav", "alert_soft.wav"]

    def test_existing_files_not_rewritten(self, qapp, tmp_path):
        SoundManager(sounds_dir=tmp_path)
        path = tmp_path / "alert_soft.wav"
        mtime = path.stat().st_mtime_ns
        SoundManager(sounds_dir=tmp_path)
        assert path.stat().st_mtime_ns == mtime

    def test_levels(self):
        assert SoundManager.levels() == ("off", "soft", "medium", "loud")

    def test_off_plays_nothing(self, qapp, tmp_path):
        assert SoundManager(sounds_dir=tmp_path).play_level("off") is False

    def test_unknown_level_warns(self, qapp, tmp_path, caplog):
        mgr = SoundManager(sounds_dir=tmp_path)
        assert mgr.play_level("deafening") is False
        assert "Unknown sound level" in caplog.text

    def test_play_is_case_insensitive(self, qapp, tmp_path):
        mgr = SoundManager(sounds_dir=tmp_path)
        assert mgr.play_level("MEDIUM") is True

    def test_unwritable_cache_leaves_manager_silent(self, qapp, tmp_path, caplog):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("")
        mgr = SoundManager(sounds_dir=blocker)
        assert mgr.play_level("loud") is False
        assert "Alert sounds unavailable" in caplog.text
