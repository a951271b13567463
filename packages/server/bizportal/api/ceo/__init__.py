"""
CEO router. Every endpoint below requires the ``ceo`` role.
"""

from fastapi import APIRouter

from . import clients, employees, projects, timesheets

router = APIRouter()

router.include_router(employees.router, prefix="/employees", tags=["Employees"])
router.include_router(clients.router, prefix="/clients", tags=["Clients"])
router.include_router(projects.router, prefix="/projects", tags=["Projects"])
router.include_router(timesheets.router, prefix="/timesheets", tags=["Timesheets"])
