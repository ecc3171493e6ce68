"""Permission application service: create with name validation, guarded delete."""

from __future__ import annotations

from app.application.dtos.permission import PermissionResult
from app.application.interfaces.repositories import IPermissionRepository
from app.domain.exceptions import (
    ResourceInUseException,
    ResourceNotFoundException,
    ValidationException,
)
from app.domain.value_objects import PermissionName


class PermissionService:
    """Create, read and delete permission definitions."""

    def __init__(self, permission_repo: IPermissionRepository) -> None:
        self._repo = permission_repo

    async def list_permissions(self, module: str | None = None) -> list[PermissionResult]:
        return await self._repo.list_permissions(module)

    async def get_permission(self, permission_id: str) -> PermissionResult:
        perm = await self._repo.get_permission(permission_id)
        if perm is None:
            raise ResourceNotFoundException("permission", permission_id)
        return perm

    async def create_permission(
        self,
        *,
        name: str,
        display_name: str,
        module: str | None = None,
        resource: str | None = None,
        action: str | None = None,
        description: str | None = None,
    ) -> PermissionResult:
        """Create a permission. module/resource/action default to the name's parts.

        Raises:
            ValidationException: Bad name format, parts that disagree with the
                name, or a name that already exists.
        """
        try:
            parsed = PermissionName(name)
        except ValueError as e:
            raise ValidationException(str(e), "name") from e
        for label, given, expected in (
            ("module", module, parsed.module),
            ("resource", resource, parsed.resource),
            ("action", action, parsed.action),
        ):
            if given is not None and given != expected:
                raise ValidationException(
                    f"Permission {label} '{given}' does not match name '{name}'", label
                )
        if await self._repo.get_by_name(parsed.value):
            raise ValidationException(f"Permission '{name}' already exists", "name")
        return await self._repo.create_permission(
            name=parsed.value,
            display_name=display_name,
            module=parsed.module,
            resource=parsed.resource,
            action=parsed.action,
            description=description,
        )

    async def delete_permission(self, permission_id: str) -> None:
        """Refused for system permissions and permissions granted to any role."""
        perm = await self.get_permission(permission_id)
        if perm.is_system:
            raise ResourceInUseException(
                "permission", permission_id, "Cannot delete system permission"
            )
        references = await self._repo.count_role_references(permission_id)
        if references:
            raise ResourceInUseException(
                "permission",
                permission_id,
                f"Cannot delete permission used by {references} role(s)",
            )
        await self._repo.delete_permission(permission_id)
