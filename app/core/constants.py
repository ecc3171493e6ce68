"""Core constants: permission names guarding API routes and shared literals.

Permission names follow module.resource.action and must exist in the
permission table (see scripts/seed_rbac.py) to be grantable.
"""

# Communications
PERM_CAMPAIGN_READ = "communications.campaigns.read"
PERM_CAMPAIGN_CREATE = "communications.campaigns.create"
PERM_CAMPAIGN_UPDATE = "communications.campaigns.update"
PERM_CAMPAIGN_APPROVE = "communications.campaigns.approve"
PERM_CAMPAIGN_SEND = "communications.campaigns.send"
PERM_CAMPAIGN_CANCEL = "communications.campaigns.cancel"
PERM_GROUP_READ = "communications.groups.read"
PERM_GROUP_MANAGE = "communications.groups.manage"
PERM_SMS_READ = "communications.sms.read"
PERM_SMS_SEND = "communications.sms.send"

# Members
PERM_MEMBER_READ = "members.members.read"
PERM_MEMBER_CREATE = "members.members.create"

# System (users, roles, permissions)
PERM_USER_READ = "system.users.read"
PERM_USER_MANAGE = "system.users.manage"
PERM_ROLE_READ = "system.roles.read"
PERM_ROLE_MANAGE = "system.roles.manage"
PERM_ROLE_ASSIGN = "system.roles.assign"
PERM_PERMISSION_READ = "system.permissions.read"
PERM_PERMISSION_MANAGE = "system.permissions.manage"

# Number of most recent messages returned with campaign details.
CAMPAIGN_RECENT_MESSAGES = 10

DEFAULT_GROUP_COLOR = "#3B82F6"
