"""Digest generators."""

from resurface.adapters.digest.markdown_generator import MarkdownDigestGenerator

__all__ = ["MarkdownDigestGenerator"]
