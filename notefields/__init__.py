"""notefields: derived per-note field tables for a Markdown knowledge vault."""

__version__ = "0.1.0"
