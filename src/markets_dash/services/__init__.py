"""Service layer entry points."""

from .dashboard_service import (
    BatchReport,
    DashboardService,
    RefreshCoordinator,
    fetch_batch,
    fetch_ticker_performance,
)

__all__ = ["BatchReport", "DashboardService", "RefreshCoordinator", "fetch_batch", "fetch_ticker_performance"]
