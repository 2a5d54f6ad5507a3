"""Run summaries and plots."""
