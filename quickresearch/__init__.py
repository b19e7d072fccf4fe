"""QuickResearch — ask a question, get one authoritative paragraph back."""

__version__ = "0.1.0"
