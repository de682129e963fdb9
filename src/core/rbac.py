"""
Role-based access control.

Flat mapping of user roles to permissions. Roles do not inherit from each other.
"""

USER_ROLES = ("admin", "hr_manager", "recruiter", "employee", "user")

# Dashboard
VIEW_DASHBOARD = "view_dashboard"
VIEW_ANALYTICS = "view_analytics"
# Clients
VIEW_CLIENTS = "view_clients"
CREATE_CLIENTS = "create_clients"
EDIT_CLIENTS = "edit_clients"
DELETE_CLIENTS = "delete_clients"
VIEW_CLIENT_FINANCIALS = "view_client_financials"
# Projects / opportunities
VIEW_PROJECTS = "view_projects"
CREATE_PROJECTS = "create_projects"
EDIT_PROJECTS = "edit_projects"
DELETE_PROJECTS = "delete_projects"
VIEW_PROJECT_FINANCIALS = "view_project_financials"
ASSIGN_PROJECT_MEMBERS = "assign_project_members"
# Candidates
VIEW_CANDIDATES = "view_candidates"
CREATE_CANDIDATES = "create_candidates"
EDIT_CANDIDATES = "edit_candidates"
DELETE_CANDIDATES = "delete_candidates"
VIEW_CANDIDATE_SALARY = "view_candidate_salary"
SCHEDULE_INTERVIEWS = "schedule_interviews"
# Employees
VIEW_EMPLOYEES = "view_employees"
CREATE_EMPLOYEES = "create_employees"
EDIT_EMPLOYEES = "edit_employees"
DELETE_EMPLOYEES = "delete_employees"
VIEW_EMPLOYEE_SALARY = "view_employee_salary"
VIEW_EMPLOYEE_PERFORMANCE = "view_employee_performance"
MANAGE_EMPLOYEE_ROLES = "manage_employee_roles"
# Account
VIEW_ACCOUNT = "view_account"
EDIT_ACCOUNT = "edit_account"
MANAGE_USERS = "manage_users"
VIEW_SYSTEM_SETTINGS = "view_system_settings"
EDIT_SYSTEM_SETTINGS = "edit_system_settings"

ALL_PERMISSIONS = (
    VIEW_DASHBOARD, VIEW_ANALYTICS,
    VIEW_CLIENTS, CREATE_CLIENTS, EDIT_CLIENTS, DELETE_CLIENTS, VIEW_CLIENT_FINANCIALS,
    VIEW_PROJECTS, CREATE_PROJECTS, EDIT_PROJECTS, DELETE_PROJECTS,
    VIEW_PROJECT_FINANCIALS, ASSIGN_PROJECT_MEMBERS,
    VIEW_CANDIDATES, CREATE_CANDIDATES, EDIT_CANDIDATES, DELETE_CANDIDATES,
    VIEW_CANDIDATE_SALARY, SCHEDULE_INTERVIEWS,
    VIEW_EMPLOYEES, CREATE_EMPLOYEES, EDIT_EMPLOYEES, DELETE_EMPLOYEES,
    VIEW_EMPLOYEE_SALARY, VIEW_EMPLOYEE_PERFORMANCE, MANAGE_EMPLOYEE_ROLES,
    VIEW_ACCOUNT, EDIT_ACCOUNT, MANAGE_USERS, VIEW_SYSTEM_SETTINGS, EDIT_SYSTEM_SETTINGS,
)

ROLE_PERMISSIONS: dict[str, frozenset[str]] = {
    "admin": frozenset(ALL_PERMISSIONS),
    # HR management without financial access
    "hr_manager": frozenset({
        VIEW_DASHBOARD, VIEW_ANALYTICS,
        VIEW_CLIENTS,
        VIEW_PROJECTS, EDIT_PROJECTS, ASSIGN_PROJECT_MEMBERS,
        VIEW_CANDIDATES, CREATE_CANDIDATES, EDIT_CANDIDATES, DELETE_CANDIDATES,
        VIEW_CANDIDATE_SALARY, SCHEDULE_INTERVIEWS,
        VIEW_EMPLOYEES, CREATE_EMPLOYEES, EDIT_EMPLOYEES, VIEW_EMPLOYEE_SALARY,
        VIEW_EMPLOYEE_PERFORMANCE, MANAGE_EMPLOYEE_ROLES,
        VIEW_ACCOUNT, EDIT_ACCOUNT,
    }),
    "recruiter": frozenset({
        VIEW_DASHBOARD,
        VIEW_PROJECTS,  # read-only
        VIEW_CANDIDATES, CREATE_CANDIDATES, EDIT_CANDIDATES, SCHEDULE_INTERVIEWS,
        VIEW_EMPLOYEES,
        VIEW_ACCOUNT, EDIT_ACCOUNT,
    }),
    "employee": frozenset({
        VIEW_DASHBOARD, VIEW_PROJECTS, VIEW_EMPLOYEES, VIEW_ACCOUNT, EDIT_ACCOUNT,
    }),
    "user": frozenset({VIEW_DASHBOARD, VIEW_ACCOUNT, EDIT_ACCOUNT}),
}

ROLE_DISPLAY_INFO = {
    "admin": {
        "name": "Administrator",
        "description": "Full system access with financial and management permissions",
        "color": "red",
    },
    "hr_manager": {
        "name": "HR Manager",
        "description": "Human resources management without financial access",
        "color": "blue",
    },
    "recruiter": {
        "name": "Recruiter",
        "description": "Focused on candidate recruitment and management",
        "color": "yellow",
    },
    "employee": {
        "name": "Employee",
        "description": "Basic access to projects and employee directory",
        "color": "purple",
    },
    "user": {
        "name": "User",
        "description": "Limited access for external or temporary users",
        "color": "gray",
    },
}

NAVIGATION_ITEMS = [
    {"title": "Dashboard", "url": "/dashboard", "permission": VIEW_DASHBOARD},
    {"title": "Analytics", "url": "/dashboard/analytics", "permission": VIEW_ANALYTICS},
    {"title": "Clients", "url": "/dashboard/clients", "permission": VIEW_CLIENTS},
    {"title": "Projects", "url": "/dashboard/projects", "permission": VIEW_PROJECTS},
    {"title": "Candidates", "url": "/dashboard/candidates", "permission": VIEW_CANDIDATES},
    {"title": "Employees", "url": "/dashboard/employees", "permission": VIEW_EMPLOYEES},
    {"title": "Account", "url": "/dashboard/account", "permission": VIEW_ACCOUNT},
    {"title": "Settings", "url": "/dashboard/settings", "permission": VIEW_SYSTEM_SETTINGS},
]


def has_permission(user_role: str | None, permission: str) -> bool:
    """Check if a user role grants a permission. Unknown roles grant nothing."""
    if not user_role:
        return False
    return permission in ROLE_PERMISSIONS.get(user_role, frozenset())


def has_any_permission(user_role: str | None, permissions: list[str]) -> bool:
    return any(has_permission(user_role, p) for p in permissions)


def get_role_permissions(user_role: str | None) -> list[str]:
    """Permissions of a role, in declaration order."""
    granted = ROLE_PERMISSIONS.get(user_role or "", frozenset())
    return [p for p in ALL_PERMISSIONS if p in granted]


def filter_navigation(user_role: str | None, items: list[dict] = NAVIGATION_ITEMS) -> list[dict]:
    """Keep navigation items whose 'permission' the role holds."""
    return [item for item in items if has_permission(user_role, item["permission"])]
