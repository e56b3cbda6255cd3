"""Preview pages artifact collector."""
