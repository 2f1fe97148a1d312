"""Voice2Text: speech to text, text to speech and document scanning in the terminal."""

__version__ = "0.1.0"
