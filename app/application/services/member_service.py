"""Member application service: create, list and read cooperative members."""

from __future__ import annotations

from app.application.dtos.member import MemberResult
from app.application.interfaces.repositories import IMemberRepository
from app.domain.enums import MemberStatus
from app.domain.exceptions import ResourceNotFoundException, ValidationException
from app.domain.value_objects import PhoneNumber


class MemberService:
    """Member records used as SMS audiences."""

    def __init__(self, member_repo: IMemberRepository, country_code: str = "255") -> None:
        self._repo = member_repo
        self._country_code = country_code

    async def create_member(
        self,
        *,
        member_number: str,
        full_name: str,
        phone_number: str | None = None,
        email: str | None = None,
        status: str = MemberStatus.ACTIVE.value,
    ) -> MemberResult:
        """Phone numbers are stored normalized; a number without digits is rejected."""
        if status not in MemberStatus.values():
            raise ValidationException(f"Unknown member status: {status}", "status")
        if await self._repo.get_by_member_number(member_number):
            raise ValidationException(
                f"Member number '{member_number}' already exists", "member_number"
            )
        phone = None
        if phone_number:
            normalized = PhoneNumber.normalize(phone_number, self._country_code)
            if normalized is None:
                raise ValidationException("Invalid phone number", "phone_number")
            phone = normalized.value
        return await self._repo.create_member(
            member_number=member_number,
            full_name=full_name,
            phone_number=phone,
            email=email,
            status=status,
        )

    async def get_member(self, member_id: str) -> MemberResult:
        member = await self._repo.get_member(member_id)
        if member is None:
            raise ResourceNotFoundException("member", member_id)
        return member

    async def list_members(
        self, *, status: str | None = None, page: int = 1, limit: int = 50
    ) -> tuple[list[MemberResult], int]:
        if status is not None and status not in MemberStatus.values():
            raise ValidationException(f"Unknown member status: {status}", "status")
        return await self._repo.list_members(
            status=status, skip=(max(page, 1) - 1) * limit, limit=limit
        )
