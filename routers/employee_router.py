# routers/employee_router.py
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from services.employee_service import (
    list_employees,
    get_employee,
    create_employee,
    update_employee,
    delete_employee,
    toggle_employee_active,
)
from utils.security import require_auth
from typing import List, Optional
import config

router = APIRouter(prefix="/employees", tags=["employees"], dependencies=[Depends(require_auth)])

@router.put("/{employee_id}/active")
async def api_toggle_active(employee_id: str):
    return await toggle_employee_active(employee_id)

@router.get("")
async def api_list_employees(
    page: int = 1,
    limit: int = config.DEFAULT_PAGE_LIMIT,
    search: str = "",
    sort_field: str = Query("createDate", alias="sortField"),
    sort_order: str = Query("asc", alias="sortOrder"),
):
    return await list_employees(page, limit, search, sort_field, sort_order)

@router.post("", status_code=201)
async def api_create_employee(
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    mobile: Optional[str] = Form(None),
    designation: Optional[str] = Form(None),
    gender: Optional[str] = Form(None),
    course: Optional[List[str]] = Form(None),
    image: Optional[UploadFile] = File(None),
):
    # Required-field checks live in the service so they come back as 400s
    fields = {
        "name": name,
        "email": email,
        "mobile": mobile,
        "designation": designation,
        "gender": gender,
        "course": course,
    }
    return await create_employee(fields, image)

@router.get("/{employee_id}")
async def api_get_employee(employee_id: str):
    return await get_employee(employee_id)

@router.put("/{employee_id}")
async def api_update_employee(
    employee_id: str,
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    mobile: Optional[str] = Form(None),
    designation: Optional[str] = Form(None),
    gender: Optional[str] = Form(None),
    course: Optional[List[str]] = Form(None),
    image: Optional[UploadFile] = File(None),
):
    fields = {
        "name": name,
        "email": email,
        "mobile": mobile,
        "designation": designation,
        "gender": gender,
        "course": course,
    }
    return await update_employee(employee_id, fields, image)

@router.delete("/{employee_id}")
async def api_delete_employee(employee_id: str):
    return await delete_employee(employee_id)
