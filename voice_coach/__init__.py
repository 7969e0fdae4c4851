"""Voice coaching backend: audio analysis, scoring and coaching tips."""
