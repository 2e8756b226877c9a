"""Hook event translation and target hook manifest management."""
