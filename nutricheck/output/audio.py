"""WAV container helpers for synthesized speech."""
import io
import wave

from nutricheck import config


def wrap_pcm_as_wav(
    pcm: bytes,
    sample_rate: int = config.TTS_SAMPLE_RATE,
    channels: int = 1,
    sample_width: int = 2,
) -> bytes:
    """Prefix headerless PCM samples with a 44-byte RIFF/WAVE header.

    Args:
        pcm: Raw little-endian PCM samples
        sample_rate: Samples per second
        channels: Channel count (mono by default)
        sample_width: Bytes per sample (2 = 16-bit)

    Returns:
        A complete WAV file of ``len(pcm) + 44`` bytes.
    """
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav:
        wav.setnchannels(channels)
        wav.setsampwidth(sample_width)
        wav.setframerate(sample_rate)
        wav.writeframes(pcm)
    return buffer.getvalue()
