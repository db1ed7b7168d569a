"""Constants for the ranker module."""

# Per-item ceiling on binary-search probes. A consistent search needs at most
# ceil(log2(N)) + 1 probes, so reaching this means the bounds are corrupt.
MAX_PROBE_ITERATIONS: int = 20

# Answer spellings used by older stored drafts and clients
LEGACY_ANSWER_ALIASES: dict[str, str] = {
    "dont_know": "unknown",
    "don't know": "unknown",
    "havent_heard": "unknown",
    "skip": "unknown",
}
