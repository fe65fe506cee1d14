"""SigCheck - reconcile a submission manifest against a directory tree."""

__version__ = "0.1.0"
