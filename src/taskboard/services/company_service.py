"""Company actions."""

from collections.abc import Mapping
from typing import Any

from src.taskboard.authz import Action, require
from src.taskboard.core.exceptions import DependencyError, NotFoundError, PayloadValidationError
from src.taskboard.gateway import Table, from_row, to_row
from src.taskboard.models import Company, Role, new_id
from src.taskboard.schemas import CompanyCreate, CompanyUpdate
from src.taskboard.services.base import ActionResult, BaseService, parse_payload


class CompanyService(BaseService):
    """Create, update and delete companies."""

    def _get(self, company_id: str) -> Company:
        company = self.snapshot.companies.get(company_id)
        if company is None:
            raise NotFoundError(f"Company {company_id} not found")
        return company

    def _check_admin(self, admin_id: str | None) -> None:
        """``admin_id`` must point at an ADMIN or MASTER known to the snapshot."""
        if admin_id is None:
            return
        admin = self.snapshot.users.get(admin_id)
        if admin is None:
            raise PayloadValidationError("Selected admin does not exist", fields=["admin_id"])
        if admin.role not in (Role.ADMIN, Role.MASTER):
            raise PayloadValidationError(
                "Company admin must have the ADMIN or MASTER role", fields=["admin_id"]
            )

    def dependents(self, company_id: str) -> tuple[int, int]:
        """(projects, users) still referencing the company."""
        projects = sum(1 for p in self.snapshot.projects.values() if p.company_id == company_id)
        users = sum(1 for u in self.snapshot.users.values() if u.company_id == company_id)
        return projects, users

    async def create_company(
        self, data: CompanyCreate | Mapping[str, Any]
    ) -> ActionResult[Company]:
        async def operation(actor) -> Company:
            payload = parse_payload(CompanyCreate, data)
            draft = Company(id=new_id(), **payload.model_dump())
            require(actor, draft, Action.CREATE)
            self._check_admin(payload.admin_id)

            row = await self.gateway.insert(
                Table.COMPANIES, to_row(Company, payload.model_dump())
            )
            company = from_row(Company, row)
            self.snapshot.upsert(company)
            return company

        return await self._execute("create_company", operation, success="Company created")

    async def update_company(
        self, company_id: str, data: CompanyUpdate | Mapping[str, Any]
    ) -> ActionResult[Company]:
        async def operation(actor) -> Company:
            company = self._get(company_id)
            require(actor, company, Action.EDIT)
            payload = parse_payload(CompanyUpdate, data)
            changes = payload.model_dump(exclude_unset=True)
            if "admin_id" in changes:
                self._check_admin(changes["admin_id"])
            if not changes:
                return company

            row = await self.gateway.update(Table.COMPANIES, company_id, to_row(Company, changes))
            updated = from_row(Company, row) if row else company.model_copy(update=changes)
            self.snapshot.upsert(updated)
            return updated

        return await self._execute(
            "update_company", operation, success="Company updated", company_id=company_id
        )

    async def delete_company(self, company_id: str) -> ActionResult[None]:
        async def operation(actor) -> None:
            company = self._get(company_id)
            require(actor, company, Action.DELETE)
            projects, users = self.dependents(company_id)
            if projects or users:
                raise DependencyError(
                    f"Company '{company.name}' still has {projects} project(s) and "
                    f"{users} user(s); move or remove them first"
                )

            await self.gateway.delete(Table.COMPANIES, company_id)
            self.snapshot.remove(Company, company_id)

        return await self._execute(
            "delete_company", operation, success="Company deleted", company_id=company_id
        )
