# src/treemerge/utils/tokenizer.py
import threading

import tiktoken

ENCODINGS = ("cl100k_base", "p50k_base")


class TokenEstimator:
    """
    Token counts for raw file content, used only in the run summary.

    tiktoken fetches encodings on first use. If none can be loaded the
    estimator remembers that and falls back to a chars / 4 guess for the
    rest of the run.
    """

    def __init__(self, encodings=ENCODINGS):
        self.encodings = encodings
        self._encoding = None
        self._unavailable = False
        self._lock = threading.Lock()

    def _load(self):
        with self._lock:
            if self._encoding is None and not self._unavailable:
                for name in self.encodings:
                    try:
                        self._encoding = tiktoken.get_encoding(name)
                        break
                    except Exception:
                        continue
                else:
                    self._unavailable = True
            return self._encoding

    def count(self, data: bytes) -> int:
        text = data.decode("utf-8", errors="replace")
        encoding = self._load()
        if encoding is None:
            return len(text) // 4
        return len(encoding.encode(text, disallowed_special=()))


_default = TokenEstimator()


def count_tokens(data: bytes) -> int:
    return _default.count(data)
