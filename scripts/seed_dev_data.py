#!/usr/bin/env python3
"""Seed a development database with a client, two employees, a project and a timesheet.

Usage:
    python scripts/seed_dev_data.py

Uses PORTAL_DATABASE_URL (or the default from settings). Safe to re-run:
accounts that already exist are left alone.
"""

import asyncio
from datetime import date

from bizportal.core.config import get_settings
from bizportal.core.database import engine, get_session_context, init_db
from bizportal.core.errors import Conflict
from bizportal.services import projects as project_service
from bizportal.services import timesheets as timesheet_service
from bizportal.services import users as user_service
from bizportal_shared.schemas.common import Role
from bizportal_shared.schemas.projects import AssignmentInput, ProjectCreate
from bizportal_shared.schemas.timesheets import TimesheetCreate, WeekHours
from bizportal_shared.schemas.users import ClientCreate, CompanyDetails, EmployeeCreate

DEV_PASSWORD = "Password@123"

CLIENT = ClientCreate(
    name="Acme Robotics",
    email="contact@acme-robotics.com",
    password=DEV_PASSWORD,
    company_details=CompanyDetails(
        name="Acme Robotics Ltd", address="1 Foundry Lane", phone="+1-555-0100"
    ),
)

EMPLOYEES = [
    EmployeeCreate(
        name="Alice Park",
        email="alice@company.com",
        password=DEV_PASSWORD,
        department="Engineering",
        position="Tech Lead",
        skills=["python", "postgres"],
    ),
    EmployeeCreate(
        name="Bob Reyes",
        email="bob@company.com",
        password=DEV_PASSWORD,
        department="Design",
        position="Product Designer",
        skills=["figma"],
    ),
]


async def _get_or_create(session, role, req):
    existing = await user_service.get_user_by_email(session, req.email)
    if existing:
        return existing.id
    try:
        created = await user_service.create_user(session, role, req)
    except Conflict:
        existing = await user_service.get_user_by_email(session, req.email)
        return existing.id
    return created.id


async def seed():
    settings = get_settings()
    await init_db()

    async with get_session_context() as session:
        await user_service.ensure_ceo(session, settings)

        client_id = await _get_or_create(session, Role.CLIENT, CLIENT)
        alice_id, bob_id = [
            await _get_or_create(session, Role.EMPLOYEE, req) for req in EMPLOYEES
        ]

        project = await project_service.create_project(
            session,
            ProjectCreate(
                name="Warehouse Automation",
                description="Pick-and-place controller rollout",
                client_id=client_id,
                start_date=date(2024, 1, 1),
                end_date=date(2024, 6, 30),
                budget=120000,
                priority="high",
                assigned_employees=[
                    AssignmentInput(employee=str(alice_id), role="lead"),
                    AssignmentInput(employee=str(bob_id), role="designer"),
                ],
            ),
        )

        await timesheet_service.submit_timesheet(
            session,
            alice_id,
            TimesheetCreate(
                project_id=project.id,
                week=date(2024, 1, 1),
                hours=WeekHours(monday=8, tuesday=8, wednesday=6),
            ),
        )

    await engine.dispose()
    print(f"Seeded project '{project.name}' with 1 client, 2 employees, 1 timesheet.")


if __name__ == "__main__":
    asyncio.run(seed())
