"""
Line Sorter - Team line queue, deduplication and claim service

Team members submit text lines into a shared, team-scoped queue.
Submissions are deduplicated against the live queue and the claim
history, and members claim bounded batches of queued lines into an
append-only history ledger under a per-user cooldown.

Service Truths:
- A line is never simultaneously claimable and already claimed
- Teams never see each other's lines, history or settings
- Invalid requests fail loud with a distinct, addressable error
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
