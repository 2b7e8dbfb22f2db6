"""FastAPI dependencies for orchestrator access."""

from utils.logger import get_logger

logger = get_logger(__name__)


def get_orchestrator():
    """Dependency to get orchestrator instance (singleton pattern)."""
    from config.config import Config
    from orchestrator.core import SearchOrchestrator

    if not hasattr(get_orchestrator, "_instance"):
        config = Config()
        if not config.validate():
            logger.warning("Search configuration has problems; continuing with defaults")
        logger.info(f"Creating search orchestrator: {config.get_model_info()}")
        get_orchestrator._instance = SearchOrchestrator.from_config(config.to_search_config())
    return get_orchestrator._instance


async def close_orchestrator() -> None:
    instance = getattr(get_orchestrator, "_instance", None)
    if instance is not None:
        await instance.aclose()
        del get_orchestrator._instance
