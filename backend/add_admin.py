#!/usr/bin/env python3
"""
Script to seed the default roles and grant the admin role to a volunteer.
Run this from the backend directory with the APP_* environment available.

Usage: python add_admin.py volunteer@college.edu
"""
import asyncio
import sys

from sqlalchemy import select

from app.api.roles.models import RoleDefinitions, UserRoles
from app.api.roles.service import seed_default_roles
from app.api.volunteers.models import Volunteers
from app.db.core import AsyncSessionLocal


async def add_admin(email: str):
    async with AsyncSessionLocal() as session:
        seeded = await seed_default_roles(session)
        if seeded["created"]:
            print(f"Seeded roles: {', '.join(seeded['created'])}")

        volunteer = await session.scalar(
            select(Volunteers).where(Volunteers.email == email)
        )
        if volunteer is None:
            print(f"No volunteer profile found for {email}")
            return

        admin_role = await session.scalar(
            select(RoleDefinitions).where(RoleDefinitions.role_name == "admin")
        )
        assignment = await session.scalar(
            select(UserRoles).where(
                UserRoles.volunteer_id == volunteer.id,
                UserRoles.role_definition_id == admin_role.id,
            )
        )
        if assignment and assignment.is_active:
            print(f"{email} is already an admin")
            return

        if assignment:
            assignment.reactivate()
            assignment.expires_at = None
        else:
            session.add(
                UserRoles(volunteer_id=volunteer.id, role_definition_id=admin_role.id)
            )
        await session.commit()

        print(f"Granted admin to {volunteer.full_name} ({email})")


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print(__doc__)
        sys.exit(1)
    asyncio.run(add_admin(sys.argv[1]))
