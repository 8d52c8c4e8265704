"""Shared constants for the planner."""

ROLE_ADMIN = "Admin"
ROLE_ENGINEER = "Engineer"

PROJECT_STATUSES = ("Active", "Closed")

# Engineer bar colours, assigned by index when a member is added
ENGINEER_PALETTE = (
    "#ef4444", "#f97316", "#f59e0b", "#84cc16", "#10b981", "#06b6d4",
    "#3b82f6", "#6366f1", "#8b5cf6", "#d946ef", "#f43f5e",
)
UNASSIGNED_COLOR = "#94a3b8"

# Share of budget hours above which a project is flagged
BUDGET_ALERT_THRESHOLD = 0.8
