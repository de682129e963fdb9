"""
SQLite persistence for opportunities, roles and employees.
"""

import sqlite3
from pathlib import Path

from core.config import DB_PATH
from models.entities import Employee, Opportunity, Role

OPPORTUNITY_COLUMNS = (
    "client_name", "opportunity_name", "open_date", "expected_start_date",
    "expected_end_date", "probability", "status", "is_active", "activated_at",
    "created_at", "comments",
)
ROLE_COLUMNS = ("role_name", "required_grade", "allocation", "status", "needs_hire", "comments")

SCHEMA = """
    CREATE TABLE IF NOT EXISTS employees (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        grade TEXT,
        email TEXT
    );

    CREATE TABLE IF NOT EXISTS opportunities (
        id TEXT PRIMARY KEY,
        client_name TEXT NOT NULL,
        opportunity_name TEXT NOT NULL DEFAULT '',
        open_date TEXT,
        expected_start_date TEXT NOT NULL,
        expected_end_date TEXT,
        probability INTEGER NOT NULL DEFAULT 0 CHECK(probability BETWEEN 0 AND 100),
        status TEXT NOT NULL CHECK(status IN ('In Progress', 'On Hold', 'Done')),
        is_active INTEGER NOT NULL DEFAULT 0,
        activated_at TEXT,
        created_at TEXT,
        comments TEXT NOT NULL DEFAULT ''
    );

    CREATE TABLE IF NOT EXISTS roles (
        id TEXT PRIMARY KEY,
        opportunity_id TEXT NOT NULL,
        position INTEGER NOT NULL DEFAULT 0,
        role_name TEXT NOT NULL,
        required_grade TEXT,
        allocation REAL NOT NULL DEFAULT 100,
        status TEXT NOT NULL CHECK(status IN ('Open', 'Staffed', 'Won', 'Lost')),
        needs_hire INTEGER NOT NULL DEFAULT 0,
        comments TEXT NOT NULL DEFAULT '',
        FOREIGN KEY (opportunity_id) REFERENCES opportunities(id) ON DELETE CASCADE
    );

    CREATE TABLE IF NOT EXISTS role_assignments (
        role_id TEXT NOT NULL,
        employee_id TEXT NOT NULL,
        position INTEGER NOT NULL DEFAULT 0,
        PRIMARY KEY (role_id, employee_id),
        FOREIGN KEY (role_id) REFERENCES roles(id) ON DELETE CASCADE
    );

    CREATE TABLE IF NOT EXISTS api_requests (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        request_id TEXT UNIQUE NOT NULL,
        timestamp TEXT NOT NULL,
        endpoint TEXT NOT NULL,
        method TEXT NOT NULL,
        client_ip TEXT,
        user_role TEXT,
        status_code INTEGER NOT NULL,
        error_code TEXT,
        error_message TEXT,
        processing_time_ms INTEGER NOT NULL,
        employees_checked INTEGER,
        opportunities_scanned INTEGER
    );

    CREATE TABLE IF NOT EXISTS api_request_details (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        request_id TEXT NOT NULL,
        detail_type TEXT NOT NULL CHECK(detail_type IN ('validation_error', 'allocation_warning', 'warning')),
        message TEXT NOT NULL,
        FOREIGN KEY (request_id) REFERENCES api_requests(request_id)
    );

    CREATE INDEX IF NOT EXISTS idx_roles_opportunity ON roles(opportunity_id);
    CREATE INDEX IF NOT EXISTS idx_role_assignments_employee ON role_assignments(employee_id);
    CREATE INDEX IF NOT EXISTS idx_api_requests_timestamp ON api_requests(timestamp);
    CREATE INDEX IF NOT EXISTS idx_api_requests_status ON api_requests(status_code);
    CREATE INDEX IF NOT EXISTS idx_api_request_details_request ON api_request_details(request_id);
"""


def get_connection(db_path: Path = DB_PATH) -> sqlite3.Connection:
    """
    Get a database connection.

    Connections may be handed between FastAPI's threadpool and the event loop,
    so same-thread checking is disabled.
    """
    conn = sqlite3.connect(db_path, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def create_schema(conn: sqlite3.Connection) -> None:
    """Create all tables and indexes if they don't exist."""
    conn.executescript(SCHEMA)
    conn.commit()


# =============================================================================
# ROW MAPPING
# =============================================================================


def _role_from_row(row: sqlite3.Row, member_ids: list[str]) -> Role:
    return {
        "id": row["id"],
        "role_name": row["role_name"],
        "required_grade": row["required_grade"],
        "allocation": row["allocation"],
        "status": row["status"],
        "needs_hire": bool(row["needs_hire"]),
        "comments": row["comments"] or "",
        "assigned_member_ids": member_ids,
    }


def _opportunity_from_row(row: sqlite3.Row, roles: list[Role]) -> Opportunity:
    return {
        "id": row["id"],
        "client_name": row["client_name"],
        "opportunity_name": row["opportunity_name"],
        "open_date": row["open_date"],
        "expected_start_date": row["expected_start_date"],
        "expected_end_date": row["expected_end_date"],
        "probability": row["probability"],
        "status": row["status"],
        "is_active": bool(row["is_active"]),
        "activated_at": row["activated_at"],
        "created_at": row["created_at"],
        "comments": row["comments"] or "",
        "roles": roles,
    }


def _load_roles(conn: sqlite3.Connection, opportunity_ids: list[str]) -> dict[str, list[Role]]:
    """Fetch roles (with assigned members) grouped by opportunity id."""
    if not opportunity_ids:
        return {}

    placeholders = ", ".join("?" for _ in opportunity_ids)
    role_rows = conn.execute(
        f"SELECT * FROM roles WHERE opportunity_id IN ({placeholders}) "
        "ORDER BY opportunity_id, position, rowid",
        opportunity_ids,
    ).fetchall()

    members: dict[str, list[str]] = {}
    if role_rows:
        role_ids = [r["id"] for r in role_rows]
        role_placeholders = ", ".join("?" for _ in role_ids)
        for row in conn.execute(
            f"SELECT role_id, employee_id FROM role_assignments "
            f"WHERE role_id IN ({role_placeholders}) ORDER BY role_id, position",
            role_ids,
        ):
            members.setdefault(row["role_id"], []).append(row["employee_id"])

    roles_by_opportunity: dict[str, list[Role]] = {}
    for row in role_rows:
        roles_by_opportunity.setdefault(row["opportunity_id"], []).append(
            _role_from_row(row, members.get(row["id"], []))
        )
    return roles_by_opportunity


# =============================================================================
# OPPORTUNITIES
# =============================================================================


def list_opportunities(conn: sqlite3.Connection, status: str | None = None) -> list[Opportunity]:
    """List opportunities (optionally by status) with their roles, oldest first."""
    if status:
        rows = conn.execute(
            "SELECT * FROM opportunities WHERE status = ? ORDER BY rowid", (status,)
        ).fetchall()
    else:
        rows = conn.execute("SELECT * FROM opportunities ORDER BY rowid").fetchall()

    roles = _load_roles(conn, [row["id"] for row in rows])
    return [_opportunity_from_row(row, roles.get(row["id"], [])) for row in rows]


def get_opportunity(conn: sqlite3.Connection, opportunity_id: str) -> Opportunity | None:
    row = conn.execute(
        "SELECT * FROM opportunities WHERE id = ?", (opportunity_id,)
    ).fetchone()
    if row is None:
        return None
    roles = _load_roles(conn, [opportunity_id])
    return _opportunity_from_row(row, roles.get(opportunity_id, []))


def insert_opportunity(conn: sqlite3.Connection, opportunity: Opportunity) -> None:
    """Insert an opportunity together with any roles it carries."""
    columns = ("id",) + OPPORTUNITY_COLUMNS
    conn.execute(
        f"INSERT INTO opportunities ({', '.join(columns)}) "
        f"VALUES ({', '.join('?' for _ in columns)})",
        [opportunity["id"]] + [_to_db(opportunity.get(c)) for c in OPPORTUNITY_COLUMNS],
    )
    for role in opportunity.get("roles", []):
        _insert_role_row(conn, opportunity["id"], role)
    conn.commit()


def update_opportunity(conn: sqlite3.Connection, opportunity_id: str, fields: dict) -> None:
    """Update opportunity columns. Unknown keys (including 'roles') are ignored."""
    updates = {k: v for k, v in fields.items() if k in OPPORTUNITY_COLUMNS}
    if not updates:
        return
    assignments = ", ".join(f"{column} = ?" for column in updates)
    conn.execute(
        f"UPDATE opportunities SET {assignments} WHERE id = ?",
        [_to_db(v) for v in updates.values()] + [opportunity_id],
    )
    conn.commit()


# =============================================================================
# ROLES
# =============================================================================


def _insert_role_row(conn: sqlite3.Connection, opportunity_id: str, role: Role) -> None:
    position = conn.execute(
        "SELECT COUNT(*) FROM roles WHERE opportunity_id = ?", (opportunity_id,)
    ).fetchone()[0]
    columns = ("id", "opportunity_id", "position") + ROLE_COLUMNS
    conn.execute(
        f"INSERT INTO roles ({', '.join(columns)}) VALUES ({', '.join('?' for _ in columns)})",
        [role["id"], opportunity_id, position] + [_to_db(role.get(c)) for c in ROLE_COLUMNS],
    )
    _write_assignments(conn, role["id"], role.get("assigned_member_ids", []))


def insert_role(conn: sqlite3.Connection, opportunity_id: str, role: Role) -> None:
    _insert_role_row(conn, opportunity_id, role)
    conn.commit()


def update_role(conn: sqlite3.Connection, role_id: str, fields: dict) -> None:
    """Update role columns and, when given, replace its assigned members."""
    updates = {k: v for k, v in fields.items() if k in ROLE_COLUMNS}
    if updates:
        assignments = ", ".join(f"{column} = ?" for column in updates)
        conn.execute(
            f"UPDATE roles SET {assignments} WHERE id = ?",
            [_to_db(v) for v in updates.values()] + [role_id],
        )
    if fields.get("assigned_member_ids") is not None:
        conn.execute("DELETE FROM role_assignments WHERE role_id = ?", (role_id,))
        _write_assignments(conn, role_id, fields["assigned_member_ids"])
    conn.commit()


def _write_assignments(conn: sqlite3.Connection, role_id: str, member_ids: list[str]) -> None:
    # Duplicates dropped, first-seen order kept
    for position, employee_id in enumerate(dict.fromkeys(member_ids)):
        conn.execute(
            "INSERT INTO role_assignments (role_id, employee_id, position) VALUES (?, ?, ?)",
            (role_id, employee_id, position),
        )


# =============================================================================
# EMPLOYEES
# =============================================================================


def _employee_from_row(row: sqlite3.Row) -> Employee:
    return {"id": row["id"], "name": row["name"], "grade": row["grade"], "email": row["email"]}


def list_employees(conn: sqlite3.Connection) -> list[Employee]:
    rows = conn.execute("SELECT * FROM employees ORDER BY name, id").fetchall()
    return [_employee_from_row(row) for row in rows]


# =============================================================================
# MOCK DATA
# =============================================================================


def load_mock_data(conn: sqlite3.Connection, data: dict) -> tuple[int, int]:
    """
    Replace all opportunities and employees with a mock dataset.

    The dataset uses the API's camelCase shape:
    {"employees": [...], "opportunities": [{..., "roles": [...]}]}

    Returns:
        Tuple of (employee_count, opportunity_count)
    """
    conn.execute("DELETE FROM role_assignments")
    conn.execute("DELETE FROM roles")
    conn.execute("DELETE FROM opportunities")
    conn.execute("DELETE FROM employees")

    employees = data.get("employees", [])
    for employee in employees:
        conn.execute(
            "INSERT INTO employees (id, name, grade, email) VALUES (?, ?, ?, ?)",
            (str(employee["id"]), employee["name"], employee.get("grade"), employee.get("email")),
        )

    opportunities = data.get("opportunities", [])
    for opp in opportunities:
        columns = ("id",) + OPPORTUNITY_COLUMNS
        values = [
            str(opp["id"]),
            opp["clientName"],
            opp.get("opportunityName", ""),
            opp.get("openDate"),
            opp["expectedStartDate"],
            opp.get("expectedEndDate"),
            opp.get("probability", 0),
            opp.get("status", "In Progress"),
            int(bool(opp.get("isActive", False))),
            opp.get("activatedAt"),
            opp.get("createdAt", opp.get("openDate")),
            opp.get("comments", ""),
        ]
        conn.execute(
            f"INSERT INTO opportunities ({', '.join(columns)}) "
            f"VALUES ({', '.join('?' for _ in columns)})",
            values,
        )
        for role in opp.get("roles", []):
            _insert_role_row(
                conn,
                str(opp["id"]),
                {
                    "id": str(role["id"]),
                    "role_name": role["roleName"],
                    "required_grade": role.get("requiredGrade"),
                    "allocation": role.get("allocation", 100),
                    "status": role.get("status", "Open"),
                    "needs_hire": bool(role.get("needsHire", False)),
                    "comments": role.get("comments", ""),
                    "assigned_member_ids": [str(m) for m in role.get("assignedMemberIds", [])],
                },
            )

    conn.commit()
    return len(employees), len(opportunities)


def _to_db(value):
    """Convert Python values to SQLite-friendly values."""
    if isinstance(value, bool):
        return int(value)
    return value
