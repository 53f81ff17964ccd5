"""Smoke test to verify the test infrastructure works."""


def test_imports():
    """Verify core dependencies can be imported."""
    import aiosqlite
    import fastapi
    import httpx
    import pydantic
    import pydantic_settings
    import sqlalchemy

    assert fastapi.__version__
    assert sqlalchemy.__version__
    assert httpx.__version__
    assert pydantic.__version__
    assert pydantic_settings.__version__
    assert aiosqlite.__version__


def test_app_routes_registered():
    """The application exposes every router under /api."""
    from src.main import app

    paths = set(app.openapi()["paths"])
    for expected in (
        "/api/health",
        "/api/auth/permissions",
        "/api/schools",
        "/api/schools/{school_id}/maturity/trend",
        "/api/schools/{school_id}/maturity/benchmarks",
        "/api/districts",
        "/api/reports",
        "/api/compare",
        "/api/dashboard/summary",
        "/api/map/markers",
    ):
        assert expected in paths
