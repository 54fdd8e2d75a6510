# src/codectx/utils/tokenizer.py
import logging

import tiktoken

logger = logging.getLogger(__name__)


class Tokenizer:
    _encoding = None
    _unavailable = False

    @classmethod
    def get_encoding(cls):
        if cls._encoding is None:
            try:
                cls._encoding = tiktoken.get_encoding("cl100k_base")
            except Exception:
                # Fallback
                cls._encoding = tiktoken.get_encoding("p50k_base")
        return cls._encoding

    @staticmethod
    def count(text: str) -> int:
        """Estimates token count for a given text."""
        if not Tokenizer._unavailable:
            try:
                encoding = Tokenizer.get_encoding()
                return len(encoding.encode(text, disallowed_special=()))
            except Exception as e:
                # Encodings are downloaded on first use, which can fail offline
                logger.debug("tiktoken encoding unavailable (%s), estimating tokens", e)
                Tokenizer._unavailable = True
        return len(text) // 4
