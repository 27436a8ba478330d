"""Runtime settings read from the environment (and a local .env file)."""
import os

from dotenv import load_dotenv

load_dotenv()

GEMINI_API_KEY_ENV = "GEMINI_API_KEY"

ANALYSIS_MODEL = os.getenv("NUTRICHECK_ANALYSIS_MODEL", "gemini-2.5-flash")
DEEP_ANALYSIS_MODEL = os.getenv("NUTRICHECK_DEEP_ANALYSIS_MODEL", ANALYSIS_MODEL)
QUICK_SCAN_MODEL = os.getenv("NUTRICHECK_QUICK_SCAN_MODEL", "gemini-2.5-flash-lite")
TTS_MODEL = os.getenv("NUTRICHECK_TTS_MODEL", "gemini-2.5-flash-preview-tts")
TTS_VOICE = os.getenv("NUTRICHECK_TTS_VOICE", "Kore")

TEMPERATURE = float(os.getenv("NUTRICHECK_TEMPERATURE", "0.3"))
DEEP_ANALYSIS_MAX_OUTPUT_TOKENS = int(os.getenv("NUTRICHECK_DEEP_MAX_TOKENS", "8192"))

# Seconds; expiry is reported as a provider timeout
REQUEST_TIMEOUT = float(os.getenv("NUTRICHECK_REQUEST_TIMEOUT", "60"))

# The TTS model emits headerless 16-bit mono PCM at this rate
TTS_SAMPLE_RATE = int(os.getenv("NUTRICHECK_TTS_SAMPLE_RATE", "24000"))

HISTORY_CAPACITY = 10

# In-memory HTTP sessions; the oldest is evicted past this count
MAX_SESSIONS = int(os.getenv("NUTRICHECK_MAX_SESSIONS", "1000"))
