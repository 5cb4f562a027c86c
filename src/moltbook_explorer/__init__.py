"""
Moltbook Explorer - analytical indexing and query engine for a static
social-platform corpus.

The package builds an immutable in-memory index over posts, communities,
tags, class notes and two 2-D projections, and answers filter, ranking,
similarity, spatial and graph queries over it.
"""

__version__ = "1.0.0"
__author__ = "Development Team"
__email__ = "dev@example.com"
