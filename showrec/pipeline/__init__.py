"""Change-driven orchestration: debounced recomputation and deferred training."""
