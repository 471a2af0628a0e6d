"""Output tokenizer that classifies raw model text into stream chunks.

Walks a complete response string once, left to right, recognising three
kinds of embedded block:

- ``<thinking>``, ``<task>`` and ``<environment_details>`` tag pairs, emitted
  as ReasoningChunk with the inner content trimmed;
- ``tool_code`` fenced blocks, emitted verbatim as TextChunk;
- ``tool_result`` fenced blocks, emitted verbatim as TextChunk.

Prose between blocks is emitted untouched as TextChunk. Delimiters are
consumed exactly once by the match that recognised them.
"""

from __future__ import annotations

import re
from collections import deque

from modelstream.schemas.streaming import ReasoningChunk, TextChunk

REASONING_TAGS = ("task", "environment_details", "thinking")

# Positions where any block could start
_CANDIDATE_RE = re.compile(r"<|tool_code|tool_result")

# <tag>...</tag> with matching close tag, shortest body
_TAG_RE = re.compile(
    r"<(" + "|".join(REASONING_TAGS) + r")>"
    r"(.*?)"
    r"</\1>",
    re.DOTALL,
)


def _fence_pattern(marker: str) -> re.Pattern[str]:
    return re.compile(
        re.escape(marker)
        + r"\s*```"              # marker, then opening fence
        r"(?:[A-Za-z0-9_]+)?"    # optional language tag (ignored)
        r"\s*\n"
        r"(.*?)"                 # body (non-greedy)
        r"\s*```",               # closing fence
        re.DOTALL,
    )


_TOOL_CODE_RE = _fence_pattern("tool_code")
_TOOL_RESULT_RE = _fence_pattern("tool_result")


class OutputTokenizer:
    """Single-pass, non-restartable iterator over classified chunks.

    ``last_index`` is the scan cursor: everything before it has already been
    emitted (or queued for emission).
    """

    def __init__(self, text: str) -> None:
        self._text = text
        self.last_index = 0
        self._pending: deque[TextChunk | ReasoningChunk] = deque()
        self._exhausted = False

    def __iter__(self) -> OutputTokenizer:
        return self

    def __next__(self) -> TextChunk | ReasoningChunk:
        if not self._pending:
            self._advance()
        if not self._pending:
            raise StopIteration
        return self._pending.popleft()

    def _advance(self) -> None:
        """Queue the chunks for the next recognised block, or the tail."""
        if self._exhausted:
            return

        found = self._find_block(self.last_index)
        if found is None:
            if self.last_index < len(self._text):
                self._pending.append(TextChunk(text=self._text[self.last_index:]))
                self.last_index = len(self._text)
            self._exhausted = True
            return

        match, chunk = found
        if match.start() > self.last_index:
            self._pending.append(
                TextChunk(text=self._text[self.last_index:match.start()])
            )
        self._pending.append(chunk)
        self.last_index = match.end()

    def _find_block(
        self, pos: int
    ) -> tuple[re.Match[str], TextChunk | ReasoningChunk] | None:
        """Find the leftmost block at or after pos.

        At each candidate position the tag matcher is tried first, then the
        tool_code fence, then the tool_result fence.
        """
        text = self._text
        while True:
            candidate = _CANDIDATE_RE.search(text, pos)
            if candidate is None:
                return None
            start = candidate.start()

            match = _TAG_RE.match(text, start)
            if match is not None:
                return match, ReasoningChunk(text=match.group(2).strip())

            for pattern in (_TOOL_CODE_RE, _TOOL_RESULT_RE):
                match = pattern.match(text, start)
                if match is not None:
                    # Structured tool calls are not part of the chunk model;
                    # the whole block passes through as text.
                    return match, TextChunk(text=match.group(0))

            pos = start + 1


def parse_output(text: str) -> OutputTokenizer:
    """Return a fresh tokenizer over a complete response string."""
    return OutputTokenizer(text)
