from .orchestrator import RunContext, ScrapeOrchestrator, build_page_url

__all__ = ["RunContext", "ScrapeOrchestrator", "build_page_url"]
