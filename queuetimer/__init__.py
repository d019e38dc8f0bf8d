"""QueueTimer — run labelled countdowns one after another."""

__version__ = "0.1.0"
