# services/employee_service.py

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from bson.errors import InvalidId
from bson.objectid import ObjectId
from fastapi import UploadFile
from pydantic import ValidationError
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError
from database import get_employee_collection
from models.employee import EmployeeCreate, EmployeeUpdate, describe_validation_error
from utils.errors import EmployeeNotFound, EmployeeValidationError
from utils.query_utils import (
    build_active_filter,
    build_search_filter,
    build_sort,
    clamp_pagination,
    page_offset,
)
from utils.upload_utils import delete_upload, has_file, save_upload

logger = logging.getLogger(__name__)

def serialize_employee(employee: Dict[str, Any]) -> Dict[str, Any]:
    employee["_id"] = str(employee["_id"])
    return employee

def parse_employee_id(employee_id: str) -> ObjectId:
    """An id that is not a valid ObjectId cannot resolve to a record: 404."""
    try:
        return ObjectId(employee_id)
    except (InvalidId, TypeError):
        raise EmployeeNotFound()

def _now() -> datetime:
    # Mongo keeps millisecond precision; trim so the create response matches reads
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)

def _validate(model, fields: Dict[str, Any]):
    present = {k: v for k, v in fields.items() if v is not None}
    try:
        return model(**present)
    except ValidationError as e:
        raise EmployeeValidationError(describe_validation_error(e))

async def _ensure_email_free(email: str, exclude_id: Optional[ObjectId] = None):
    query: Dict[str, Any] = {"email": email}
    if exclude_id is not None:
        query["_id"] = {"$ne": exclude_id}
    if await get_employee_collection().find_one(query, {"_id": 1}):
        raise EmployeeValidationError(f"Email already exists: {email}")

async def list_employees(
    page: int = 1,
    limit: int = 10,
    search: str = "",
    sort_field: str = "createDate",
    sort_order: str = "asc",
):
    page, limit = clamp_pagination(page, limit)
    field, direction = build_sort(sort_field, sort_order)
    query = build_search_filter(search)

    collection = get_employee_collection()
    total_employees = await collection.count_documents(query)
    total_active = await collection.count_documents(build_active_filter(query))

    cursor = (
        collection.find(query)
        .sort(field, direction)
        .skip(page_offset(page, limit))
        .limit(limit)
    )
    employees = await cursor.to_list(length=limit)

    return {
        "employees": [serialize_employee(e) for e in employees],
        "totalEmployees": total_employees,
        "totalActiveEmployees": total_active,
    }

async def get_employee(employee_id: str):
    employee = await get_employee_collection().find_one({"_id": parse_employee_id(employee_id)})
    if not employee:
        logger.info("Employee not found: %s", employee_id)
        raise EmployeeNotFound()
    return serialize_employee(employee)

async def create_employee(fields: Dict[str, Any], image: Optional[UploadFile] = None):
    employee_data: EmployeeCreate = _validate(EmployeeCreate, fields)
    await _ensure_email_free(employee_data.email)

    # Only touch the disk once the record is known to be acceptable
    image_path = await save_upload(image) if has_file(image) else None

    employee_doc = employee_data.model_dump()
    employee_doc.update({
        "image": image_path,
        "createDate": _now(),
        "active": True,
    })

    try:
        result = await get_employee_collection().insert_one(employee_doc)
    except DuplicateKeyError:
        delete_upload(image_path)
        raise EmployeeValidationError(f"Email already exists: {employee_data.email}")
    except PyMongoError:
        delete_upload(image_path)
        raise

    employee_doc["_id"] = result.inserted_id
    logger.info("Employee created: %s <%s>", result.inserted_id, employee_data.email)
    return {
        "message": "Employee added successfully",
        "employee": serialize_employee(employee_doc),
    }

async def update_employee(employee_id: str, fields: Dict[str, Any], image: Optional[UploadFile] = None):
    oid = parse_employee_id(employee_id)
    changes = _validate(EmployeeUpdate, fields).changes()

    collection = get_employee_collection()
    existing = await collection.find_one({"_id": oid})
    if not existing:
        logger.info("Employee not found for update: %s", employee_id)
        raise EmployeeNotFound()

    if "email" in changes and changes["email"] != existing.get("email"):
        await _ensure_email_free(changes["email"], exclude_id=oid)

    if has_file(image):
        changes["image"] = await save_upload(image)

    if not changes:
        return serialize_employee(existing)

    try:
        updated = await collection.find_one_and_update(
            {"_id": oid},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
    except DuplicateKeyError:
        delete_upload(changes.get("image"))
        raise EmployeeValidationError(f"Email already exists: {changes.get('email')}")
    except PyMongoError:
        delete_upload(changes.get("image"))
        raise

    if not updated:
        # Deleted between the lookup and the write
        delete_upload(changes.get("image"))
        raise EmployeeNotFound()

    old_image = existing.get("image")
    if "image" in changes and old_image and old_image != changes["image"]:
        delete_upload(old_image)

    logger.info("Employee updated: %s fields=%s", employee_id, sorted(changes))
    return serialize_employee(updated)

async def delete_employee(employee_id: str):
    deleted = await get_employee_collection().find_one_and_delete({"_id": parse_employee_id(employee_id)})
    if not deleted:
        logger.info("Employee not found for delete: %s", employee_id)
        raise EmployeeNotFound()

    if deleted.get("image"):
        delete_upload(deleted["image"])

    logger.info("Employee deleted: %s", employee_id)
    return {"message": "Employee deleted successfully"}

async def toggle_employee_active(employee_id: str):
    oid = parse_employee_id(employee_id)
    collection = get_employee_collection()

    employee = await collection.find_one({"_id": oid}, {"active": 1})
    if not employee:
        logger.info("Employee not found for status toggle: %s", employee_id)
        raise EmployeeNotFound()

    active = not employee.get("active", True)
    result = await collection.update_one({"_id": oid}, {"$set": {"active": active}})
    if result.matched_count == 0:
        raise EmployeeNotFound()

    logger.info("Employee %s active=%s", employee_id, active)
    return {"message": "Employee status updated", "active": active}
