"""Input-layer public API: terminal decoding, key tokens and sequence matching.

Text-mode editing lives in ``lazyfm.input.text_modes`` and is imported
directly by the session.
"""

from .keys import KeyEvent, ParsedKey, key_to_string, normalize, parse_key
from .matcher import DEFAULT_TIMEOUT_MS, Resolution, SequenceMatcher
from .reader import ESC_SEQUENCE_TIMEOUT_MS, read_key

__all__ = [
    "read_key",
    "ESC_SEQUENCE_TIMEOUT_MS",
    "KeyEvent",
    "ParsedKey",
    "parse_key",
    "key_to_string",
    "normalize",
    "DEFAULT_TIMEOUT_MS",
    "Resolution",
    "SequenceMatcher",
]
