from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase, fetch_one
from app.modules.assignments.schemas import AssignmentCreate, AssignmentRespond, AssignmentResponse
from app.modules.assignments.service import AssignmentService
from app.core.dependencies import require_permission, get_current_user, authorize, has_permission, is_worship_set_leader
from app.core.exceptions import NotFoundError
from app.core.schemas import DataResponse, MessageResponse, UuidPath
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/assignments", tags=["assignments"])

SET_LEADER_MESSAGE = "Only the worship set leader or an admin can manage assignments"


def get_assignment_service(supabase: Client = Depends(get_supabase)) -> AssignmentService:
    return AssignmentService(supabase)


def _authorize_set_leader(supabase: Client, user_data: Dict, set_id: str, permission: str) -> None:
    worship_set = fetch_one(supabase, "worship_sets", set_id, "id, leader_user_id")
    if not worship_set:
        raise NotFoundError("Worship set not found")
    is_leader = is_worship_set_leader(supabase, set_id, user_data["id"], worship_set)
    authorize(user_data, permission, is_owner=is_leader, message=SET_LEADER_MESSAGE)


@router.get("", response_model=DataResponse[List[AssignmentResponse]])
async def list_assignments(
    user_data: Dict = Depends(require_permission("assignments:read")),
    service: AssignmentService = Depends(get_assignment_service)
):
    """All assignments for admin/leader, otherwise the caller's own"""
    user_filter = None if has_permission(user_data, "assignments:read_all") else user_data["id"]
    return {"data": service.list_assignments(user_filter)}


@router.get("/set/{set_id}", response_model=DataResponse[List[AssignmentResponse]])
async def list_assignments_for_set(
    set_id: UuidPath,
    user_data: Dict = Depends(require_permission("assignments:read")),
    service: AssignmentService = Depends(get_assignment_service)
):
    return {"data": service.list_for_set(set_id)}


@router.get("/{assignment_id}", response_model=DataResponse[AssignmentResponse])
async def get_assignment(
    assignment_id: UuidPath,
    user_data: Dict = Depends(require_permission("assignments:read")),
    service: AssignmentService = Depends(get_assignment_service)
):
    return {"data": service.get_assignment(assignment_id)}


@router.post("", response_model=DataResponse[AssignmentResponse], status_code=201)
async def create_assignment(
    data: AssignmentCreate,
    user_data: Dict = Depends(get_current_user),
    service: AssignmentService = Depends(get_assignment_service),
    supabase: Client = Depends(get_supabase)
):
    """Invite a user to an instrument (admin or the set's leader)"""
    _authorize_set_leader(supabase, user_data, data.set_id, "assignments:create")
    return {"data": service.create_assignment(data)}


@router.put("/{assignment_id}", response_model=DataResponse[AssignmentResponse])
async def respond_to_assignment(
    assignment_id: UuidPath,
    data: AssignmentRespond,
    user_data: Dict = Depends(get_current_user),
    service: AssignmentService = Depends(get_assignment_service)
):
    """Accept or decline an invitation (assigned user only)"""
    assignment = service.get_assignment(assignment_id)
    authorize(
        user_data, "assignments:respond", is_owner=assignment.user_id == user_data["id"],
        message="Only the assigned user can respond to this assignment"
    )
    return {"data": service.respond(assignment_id, data.status)}


@router.delete("/{assignment_id}", response_model=DataResponse[MessageResponse])
async def delete_assignment(
    assignment_id: UuidPath,
    user_data: Dict = Depends(get_current_user),
    service: AssignmentService = Depends(get_assignment_service),
    supabase: Client = Depends(get_supabase)
):
    """Remove an assignment (admin or the set's leader)"""
    assignment = fetch_one(supabase, "assignments", assignment_id, "id, set_id")
    if not assignment:
        raise NotFoundError("Assignment not found")
    _authorize_set_leader(supabase, user_data, assignment["set_id"], "assignments:delete")
    service.delete_assignment(assignment_id)
    return {"data": {"message": "Assignment deleted"}}
