"""Interactive scaffolder for fullstack JavaScript/TypeScript projects."""

__version__ = "1.0.0"
