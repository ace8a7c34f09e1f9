"""Multiple-choice vocabulary trainer with mistake-driven training sessions."""

__version__ = "0.1.0"
