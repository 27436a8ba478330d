"""AI nutrition checker: personalised food analysis on top of Gemini."""

__version__ = "0.1.0"
