"""Tests for WAV loading and PCM normalisation."""

import numpy as np
import pytest
from scipy.io import wavfile

from src.voxgate.data import io as io_mod
from src.voxgate.data.io import AudioData, load_wav, normalize_pcm
from src.voxgate.errors import AudioFormatError


class TestNormalizePcm:
    """Test integer PCM to float conversion."""

    def test_int16(self):
        out = normalize_pcm(np.array([-32768, 0, 16384], dtype=np.int16))
        assert out.dtype == np.float32
        np.testing.assert_allclose(out, [-1.0, 0.0, 0.5])

    def test_uint8_is_centred(self):
        """8-bit PCM is unsigned with silence at 128."""
        out = normalize_pcm(np.array([0, 128, 192], dtype=np.uint8))
        np.testing.assert_allclose(out, [-1.0, 0.0, 0.5])

    def test_int32(self):
        out = normalize_pcm(np.array([-(2**31), 2**30], dtype=np.int32))
        np.testing.assert_allclose(out, [-1.0, 0.5])

    def test_float_passthrough(self):
        data = np.array([0.25, -0.75], dtype=np.float64)
        out = normalize_pcm(data)
        assert out.dtype == np.float32
        np.testing.assert_allclose(out, data)

    def test_unsupported_dtype(self):
        with pytest.raises(AudioFormatError, match="int64"):
            normalize_pcm(np.zeros(4, dtype=np.int64))


class TestLoadWav:
    """Test reading WAV files from disk."""

    def test_mono_int16(self, tmp_path):
        """16-bit mono file loads as float32 with rate and channel count."""
        path = tmp_path / "mono.wav"
        wavfile.write(path, 16000, np.array([0, 16384, -16384, 0], dtype=np.int16))

        audio = load_wav(path)

        assert isinstance(audio, AudioData)
        assert audio.sample_rate == 16000
        assert audio.num_channels == 1
        assert audio.num_samples == 4
        np.testing.assert_allclose(audio.samples, [0.0, 0.5, -0.5, 0.0])

    def test_float32_file(self, tmp_path):
        path = tmp_path / "float.wav"
        data = np.linspace(-1, 1, 8000, dtype=np.float32)
        wavfile.write(path, 8000, data)

        audio = load_wav(path)

        assert audio.duration_s == pytest.approx(1.0)
        np.testing.assert_allclose(audio.samples, data)

    def test_stereo_kept_unmixed(self, tmp_path):
        """Without a channel choice the channels stay separate."""
        path = tmp_path / "stereo.wav"
        data = np.stack([np.full(100, 1000), np.full(100, -1000)], axis=1).astype(np.int16)
        wavfile.write(path, 16000, data)

        audio = load_wav(path)

        assert audio.num_channels == 2
        assert audio.samples.shape == (100, 2)

    def test_stereo_channel_pick(self, tmp_path):
        path = tmp_path / "stereo.wav"
        data = np.stack([np.full(100, 1000), np.full(100, -1000)], axis=1).astype(np.int16)
        wavfile.write(path, 16000, data)

        audio = load_wav(path, channel=1)

        assert audio.samples.shape == (100,)
        assert audio.num_channels == 2
        np.testing.assert_allclose(audio.samples, -1000 / 32768.0)

    def test_channel_out_of_range(self, tmp_path):
        path = tmp_path / "stereo.wav"
        wavfile.write(path, 16000, np.zeros((10, 2), dtype=np.int16))
        with pytest.raises(AudioFormatError, match="Channel 2"):
            load_wav(path, channel=2)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_wav(tmp_path / "nope.wav")

    def test_undecodable_file(self, tmp_path, monkeypatch):
        """Reader errors surface as AudioFormatError."""
        path = tmp_path / "broken.wav"
        path.write_bytes(b"not a wav")

        def _boom(_path):
            raise ValueError("File format b'not ' not understood")

        monkeypatch.setattr(io_mod, "_read_wav", _boom)
        with pytest.raises(AudioFormatError, match="Cannot decode"):
            load_wav(path)
