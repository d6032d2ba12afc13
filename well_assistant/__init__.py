"""Well drilling data assistant.

Spreadsheet upload pipeline (parse, validate, normalise, aggregate) and a
chat assistant that answers with an LLM or an offline rule-based responder.
"""

__version__ = "0.1.0"
