"""Section rendering, composition, and PDF output."""
