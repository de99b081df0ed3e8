"""Search-result email harvester with a stoppable page-by-page crawl loop."""

__version__ = "1.0.0"
