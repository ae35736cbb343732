"""
Permissions and Roles Configuration
This config defines the permission matrix for every module and which of the
three roles (admin / leader / musician) hold each permission.
All authorization decisions go through evaluate_policy().
"""

from typing import Dict, Iterable, List, Set

ADMIN = "admin"
LEADER = "leader"
MUSICIAN = "musician"

ROLES = (ADMIN, LEADER, MUSICIAN)

# Define modules and their actions
MODULES = {
    "songs": {
        "resource": "songs",
        "actions": ["create", "read", "update", "delete"],
        "description": "Song library management"
    },
    "song_versions": {
        "resource": "song_versions",
        "actions": ["create", "read", "update", "delete"],
        "description": "Song arrangement management"
    },
    "service_types": {
        "resource": "service_types",
        "actions": ["create", "read", "update", "delete"],
        "description": "Service type management"
    },
    "services": {
        "resource": "services",
        "actions": ["create", "read", "update", "delete"],
        "description": "Service scheduling"
    },
    "worship_sets": {
        "resource": "worship_sets",
        "actions": ["create", "read", "update", "delete", "assign_leader"],
        "description": "Worship set management"
    },
    "set_songs": {
        "resource": "set_songs",
        "actions": ["create", "read", "update", "delete"],
        "description": "Worship set song list management"
    },
    "suggestion_slots": {
        "resource": "suggestion_slots",
        "actions": ["create", "read", "update", "delete", "assign"],
        "description": "Suggestion slot management"
    },
    "suggestions": {
        "resource": "suggestions",
        "actions": ["submit", "read", "update", "delete", "approve", "reject"],
        "description": "Song suggestion workflow"
    },
    "instruments": {
        "resource": "instruments",
        "actions": ["create", "read", "update", "delete"],
        "description": "Instrument management"
    },
    "assignments": {
        "resource": "assignments",
        "actions": ["create", "read", "read_all", "delete", "respond"],
        "description": "Instrument assignment management"
    },
    "default_assignments": {
        "resource": "default_assignments",
        "actions": ["create", "read", "update", "delete"],
        "description": "Default instrument assignments per service type"
    },
    "leader_rotations": {
        "resource": "leader_rotations",
        "actions": ["create", "read", "update", "delete"],
        "description": "Worship leader rotation management"
    },
    "notifications": {
        "resource": "notifications",
        "actions": ["create", "read"],
        "description": "Notification log"
    },
    "users": {
        "resource": "users",
        "actions": ["read", "update"],
        "description": "User and role management"
    },
    "user_instruments": {
        "resource": "user_instruments",
        "actions": ["read", "update"],
        "description": "Instruments each user plays"
    },
}

# Actions held per resource by the non-admin roles. Admin holds every action.
ROLE_GRANTS: Dict[str, Dict[str, List[str]]] = {
    LEADER: {
        "songs": ["read", "create", "update"],
        "song_versions": ["read", "create", "update"],
        "service_types": ["read"],
        "services": ["read", "create", "update"],
        "worship_sets": ["read"],
        "set_songs": ["read", "create", "update", "delete"],
        "suggestion_slots": ["read", "create", "update", "delete", "assign"],
        "suggestions": ["read", "delete", "approve", "reject"],
        "instruments": ["read"],
        "assignments": ["read", "read_all"],
        "default_assignments": ["read"],
        "leader_rotations": ["read"],
        "notifications": ["read", "create"],
        "users": ["read"],
        "user_instruments": ["read"],
    },
    MUSICIAN: {
        "songs": ["read"],
        "song_versions": ["read"],
        "service_types": ["read"],
        "services": ["read"],
        "worship_sets": ["read"],
        "set_songs": ["read"],
        "suggestion_slots": ["read"],
        "instruments": ["read"],
        "assignments": ["read"],
        "default_assignments": ["read"],
        "leader_rotations": ["read"],
    },
}

# Granted to whoever owns the resource (assigned slot user, set leader,
# notification recipient, the user themself), whatever their roles.
OWNER_GRANTED: Set[str] = {
    "suggestions:read",
    "suggestions:update",
    "suggestions:delete",
    "suggestions:approve",
    "suggestions:reject",
    "worship_sets:update",
    "assignments:create",
    "assignments:delete",
    "notifications:read",
    "users:read",
    "user_instruments:read",
    "user_instruments:update",
}

# Only the owner may act; roles grant nothing here, admin included.
OWNER_ONLY: Set[str] = {
    "suggestions:submit",
    "assignments:respond",
}


def all_permissions() -> List[str]:
    return [
        f"{config['resource']}:{action}"
        for config in MODULES.values()
        for action in config["actions"]
    ]


def permissions_for_role(role: str) -> List[str]:
    if role == ADMIN:
        return sorted(p for p in all_permissions() if p not in OWNER_ONLY)
    grants = ROLE_GRANTS.get(role, {})
    return sorted(
        f"{resource}:{action}"
        for resource, actions in grants.items()
        for action in actions
    )


def permissions_for_roles(roles: Iterable[str]) -> List[str]:
    names: Set[str] = set()
    for role in roles:
        names.update(permissions_for_role(role))
    return sorted(names)


def evaluate_policy(roles: Iterable[str], permission: str, is_owner: bool = False) -> bool:
    """
    Decide whether a subject may perform `permission` ("resource:action").

    OWNER_ONLY permissions depend on ownership alone. OWNER_GRANTED
    permissions are allowed to the owner, and otherwise fall back to the
    role grants like every other permission.
    """
    if permission in OWNER_ONLY:
        return is_owner
    if is_owner and permission in OWNER_GRANTED:
        return True
    return any(permission in permissions_for_role(role) for role in (roles or []))


def get_permission_matrix():
    """
    Returns the permission list and the role -> permissions mapping.
    Format: {
        "permissions": [{"name": "songs:create", "resource": "songs", "action": "create", "description": "..."}, ...],
        "roles": [{"name": "admin", "permissions": [...]}, ...]
    }
    """
    permissions = []
    for module_config in MODULES.values():
        resource = module_config["resource"]
        for action in module_config["actions"]:
            permissions.append({
                "name": f"{resource}:{action}",
                "resource": resource,
                "action": action,
                "description": f"{action.replace('_', ' ').capitalize()} {resource.replace('_', ' ')}"
            })
    roles = [{"name": role, "permissions": permissions_for_role(role)} for role in ROLES]
    return {
        "permissions": permissions,
        "roles": roles
    }


PERMISSION_MATRIX = get_permission_matrix()
