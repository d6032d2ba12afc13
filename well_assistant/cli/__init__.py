"""Command line interface (``python -m well_assistant.cli``)."""
