"""Central dependency providers (FastAPI + realtime).

These helpers keep clients and the realtime hub/scheduler process-scoped and
reusable, and let tests clear the caches or override them on the app.
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from algoz.connectors.codeforces_connector import CodeforcesClient
    from algoz.services.ai_analysis import AIAnalysisService
    from algoz.services.llm_service import LLMService
    from algoz.services.realtime_hub import ConnectionHub


@lru_cache(maxsize=1)
def get_llm_service() -> LLMService:
    from algoz.services.llm_service import LLMService

    return LLMService()


@lru_cache(maxsize=1)
def get_ai_analysis_service() -> AIAnalysisService:
    from algoz.services.ai_analysis import AIAnalysisService

    return AIAnalysisService(get_llm_service())


@lru_cache(maxsize=1)
def get_codeforces_client() -> CodeforcesClient:
    from algoz.connectors.codeforces_connector import CodeforcesClient

    return CodeforcesClient()


@lru_cache(maxsize=1)
def get_realtime_hub() -> ConnectionHub:
    """Hub and profile scheduler are built together; each needs the other."""
    from algoz.services.codeforces_profiles import SqlProfileStore
    from algoz.services.profile_scheduler import ProfileUpdateScheduler
    from algoz.services.realtime_hub import ConnectionHub

    hub = ConnectionHub(analysis=get_ai_analysis_service())
    hub.attach_scheduler(
        ProfileUpdateScheduler(
            source=get_codeforces_client(),
            store=SqlProfileStore(),
            broadcaster=hub,
        )
    )
    return hub


def clear_dependency_caches() -> None:
    for provider in (
        get_llm_service,
        get_ai_analysis_service,
        get_codeforces_client,
        get_realtime_hub,
    ):
        provider.cache_clear()
