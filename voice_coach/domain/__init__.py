"""Domain models and pure speech-analysis logic."""
