"""Application infrastructure: paths, configuration, theme, signals."""
