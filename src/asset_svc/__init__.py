"""
Asset Service - read-only content asset access layer

A thin gateway in front of a content repository providing:
- Uniform single and batch reads with projection and result mapping
- Alias resolution (external URL or delegation to a web-referenceable target)
- Site ownership lookup for assets
"""

__version__ = "0.1.0"
