"""
client.api_client

Python client for the employee management API.  Instead of keeping the
session token in some ambient store, logging in returns an
`AuthenticatedClient` that owns the token and attaches it to every call,
so call sites receive their credentials explicitly.

The transport is a `requests.Session` unless another object with the same
`get/post/put/delete` interface is supplied (the test-suite passes
FastAPI's `TestClient`).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional, Tuple, Union

import requests

logger = logging.getLogger(__name__)

# (filename, bytes or file object, content type)
ImageFile = Tuple[str, Any, str]


class ApiError(Exception):
    """Non-2xx response; `message` is the server's message, safe to show inline."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


def _message_from(response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        return str(body.get("message") or body.get("detail") or body)
    return str(body)


def _check(response) -> Any:
    if response.status_code >= 400:
        message = _message_from(response)
        logger.debug("API error %s: %s", response.status_code, message)
        raise ApiError(response.status_code, message)
    return response.json()


def _form_fields(fields: Dict[str, Any]) -> Dict[str, Union[str, list]]:
    """Drop unset fields; `course` may be given as a single code or any iterable."""
    data: Dict[str, Union[str, list]] = {}
    for key, value in fields.items():
        if value is None:
            continue
        if key == "course" and not isinstance(value, str):
            data[key] = list(value)
        else:
            data[key] = str(value)
    return data


class _BaseClient:
    def __init__(self, base_url: str = "", session=None):
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else requests.Session()

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"


class AuthClient(_BaseClient):
    """Unauthenticated entry point: registration and login."""

    def register(self, username: str, password: str) -> Dict[str, Any]:
        response = self.session.post(
            self._url("/auth/register"), json={"username": username, "password": password}
        )
        return _check(response)

    def login(self, username: str, password: str) -> "AuthenticatedClient":
        response = self.session.post(
            self._url("/auth/login"), json={"username": username, "password": password}
        )
        token = _check(response)["token"]
        return AuthenticatedClient(token, base_url=self.base_url, session=self.session)


class AuthenticatedClient(_BaseClient):
    """Employee operations, each sent with the bearer token this object holds."""

    def __init__(self, token: str, base_url: str = "", session=None):
        super().__init__(base_url, session)
        self.token = token

    @property
    def headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}

    def list_employees(
        self,
        page: int = 1,
        limit: int = 10,
        search: str = "",
        sort_field: str = "createDate",
        sort_order: str = "asc",
    ) -> Dict[str, Any]:
        params = {
            "page": page,
            "limit": limit,
            "search": search,
            "sortField": sort_field,
            "sortOrder": sort_order,
        }
        return _check(self.session.get(self._url("/employees"), params=params, headers=self.headers))

    def get_employee(self, employee_id: str) -> Dict[str, Any]:
        return _check(self.session.get(self._url(f"/employees/{employee_id}"), headers=self.headers))

    def create_employee(self, fields: Dict[str, Any], image: Optional[ImageFile] = None) -> Dict[str, Any]:
        files = {"image": image} if image else None
        response = self.session.post(
            self._url("/employees"), data=_form_fields(fields), files=files, headers=self.headers
        )
        return _check(response)

    def update_employee(
        self, employee_id: str, fields: Dict[str, Any], image: Optional[ImageFile] = None
    ) -> Dict[str, Any]:
        files = {"image": image} if image else None
        response = self.session.put(
            self._url(f"/employees/{employee_id}"),
            data=_form_fields(fields),
            files=files,
            headers=self.headers,
        )
        return _check(response)

    def delete_employee(self, employee_id: str) -> Dict[str, Any]:
        return _check(self.session.delete(self._url(f"/employees/{employee_id}"), headers=self.headers))

    def toggle_active(self, employee_id: str) -> bool:
        response = self.session.put(self._url(f"/employees/{employee_id}/active"), headers=self.headers)
        return _check(response)["active"]

    def iter_employees(self, search: str = "", page_size: int = 10, **kwargs) -> Iterable[Dict[str, Any]]:
        """Walk every page of a search."""
        page = 1
        while True:
            result = self.list_employees(page=page, limit=page_size, search=search, **kwargs)
            yield from result["employees"]
            if page * page_size >= result["totalEmployees"] or not result["employees"]:
                return
            page += 1
