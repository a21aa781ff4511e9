"""API router registration helpers.

Routers are imported inside `register_routes` rather than at module import
time so importing `algoz.api` stays free of client construction.
"""

from fastapi import FastAPI


def register_routes(app: FastAPI) -> None:
    """Attach all API routers (lazy imports)."""
    from algoz.api.ai import router as ai_router
    from algoz.api.auth import router as auth_router
    from algoz.api.codeforces import router as codeforces_router
    from algoz.api.realtime import router as realtime_router
    from algoz.api.recommendations import router as recommendations_router
    from algoz.api.study import router as study_router
    from algoz.api.system import router as system_router

    routers = [
        system_router,
        realtime_router,
        auth_router,
        ai_router,
        codeforces_router,
        recommendations_router,
        study_router,
    ]
    for router in routers:
        app.include_router(router)
