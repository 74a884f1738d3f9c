"""Multi-file code playground backend: project store, composition and sandboxed preview."""
