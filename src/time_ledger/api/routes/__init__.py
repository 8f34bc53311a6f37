"""API routes."""

from time_ledger.api.routes.comp_time import router as comp_time_router
from time_ledger.api.routes.health import router as health_router
from time_ledger.api.routes.leave import router as leave_router
from time_ledger.api.routes.overtime import router as overtime_router
from time_ledger.api.routes.policies import router as policies_router
from time_ledger.api.routes.timesheets import router as timesheets_router
from time_ledger.api.routes.workdays import router as workdays_router

__all__ = [
    "comp_time_router",
    "health_router",
    "leave_router",
    "overtime_router",
    "policies_router",
    "timesheets_router",
    "workdays_router",
]
