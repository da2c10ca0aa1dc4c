from fastapi import APIRouter
from agency_hr.routers import (
    attendance, leave_balances, leave_policies, leave_requests, leave_types, slack, team
)

# Routers are aggregated here; main.py only imports this hub.
api_router = APIRouter()

api_router.include_router(team.router, tags=["Team"])
api_router.include_router(leave_types.router, tags=["Leave Types"])
api_router.include_router(leave_policies.router, tags=["Leave Policies"])
api_router.include_router(leave_requests.router, tags=["Leave Requests"])
api_router.include_router(leave_balances.router, tags=["Leave Balances"])
api_router.include_router(attendance.router, tags=["Attendance"])
api_router.include_router(slack.router, tags=["Slack"])
