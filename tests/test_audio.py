"""Tests for WAV wrapping of synthesized speech."""
import struct

from nutricheck.output.audio import wrap_pcm_as_wav


class TestWrapPcmAsWav:
    """Tests for the RIFF/WAVE header."""

    def test_header_fields(self):
        """Test the 44-byte header for 24 kHz mono 16-bit PCM."""
        pcm = b"\x00\x01" * 1000
        wav = wrap_pcm_as_wav(pcm)

        assert len(wav) == len(pcm) + 44
        assert wav[0:4] == b"RIFF"
        assert struct.unpack("<I", wav[4:8])[0] == 36 + len(pcm)
        assert wav[8:16] == b"WAVEfmt "

        fmt_size, audio_format, channels, sample_rate, byte_rate, block_align, bits = struct.unpack(
            "<IHHIIHH", wav[16:36]
        )
        assert fmt_size == 16
        assert audio_format == 1
        assert channels == 1
        assert sample_rate == 24000
        assert byte_rate == 48000
        assert block_align == 2
        assert bits == 16

        assert wav[36:40] == b"data"
        assert struct.unpack("<I", wav[40:44])[0] == len(pcm)
        assert wav[44:] == pcm

    def test_custom_sample_rate(self):
        wav = wrap_pcm_as_wav(b"\x00\x00" * 10, sample_rate=16000)
        assert struct.unpack("<I", wav[24:28])[0] == 16000
        assert struct.unpack("<I", wav[28:32])[0] == 32000

    def test_empty_pcm(self):
        """Test that empty input still yields a valid header."""
        assert len(wrap_pcm_as_wav(b"")) == 44
