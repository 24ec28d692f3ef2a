"""Detection of a model narrating tool use instead of calling a tool.

Some models answer "I will use read_file to..." without emitting a
structured tool call. The agent loop treats such a turn as unfinished and
asks the model to act. Detection is a plain predicate over the finished
assistant text so it can be tuned or replaced without touching the loop.
"""

from typing import Callable, Iterable

NarrationPolicy = Callable[[str], bool]

DEFAULT_NARRATION_PHRASES: tuple[str, ...] = (
    "read_file",
    "write_file",
    "list_files",
    "run_command",
    "will use",
    "i'll use",
    "i would like to",
    "i'd like to",
    "my first step",
    "let me use",
)


class PhraseNarrationPolicy:
    """Matches lower-cased assistant text against a fixed phrase set."""

    def __init__(self, phrases: Iterable[str] = DEFAULT_NARRATION_PHRASES):
        self.phrases = tuple(p.lower() for p in phrases)

    def __call__(self, content: str) -> bool:
        lowered = content.lower()
        return any(phrase in lowered for phrase in self.phrases)
