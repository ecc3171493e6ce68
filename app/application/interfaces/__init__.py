"""Application interfaces (ports): repository and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from app.infrastructure or app.api.
"""

from app.application.interfaces.repositories import (
    ICampaignRepository,
    IContactGroupRepository,
    IMemberRepository,
    IMessageRepository,
    IPermissionRepository,
    IPermissionStore,
    IRecipientDirectory,
    IRolePermissionRepository,
    IRoleRepository,
    IUnitOfWork,
    IUserRepository,
    IUserRoleRepository,
)
from app.application.interfaces.services import (
    IDispatchLauncher,
    IPacer,
    IPasswordHasher,
    ISmsTransport,
)

__all__ = [
    "ICampaignRepository",
    "IContactGroupRepository",
    "IDispatchLauncher",
    "IMemberRepository",
    "IMessageRepository",
    "IPacer",
    "IPasswordHasher",
    "IPermissionRepository",
    "IPermissionStore",
    "IRecipientDirectory",
    "IRolePermissionRepository",
    "IRoleRepository",
    "ISmsTransport",
    "IUnitOfWork",
    "IUserRepository",
    "IUserRoleRepository",
]
