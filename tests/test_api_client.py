import pytest

from client.api_client import ApiError, AuthClient, AuthenticatedClient, _form_fields
from conftest import employee_form


@pytest.fixture
def api(client):
    auth = AuthClient(session=client)
    auth.register("clerk", "pa55word")
    return auth.login("clerk", "pa55word")


def test_login_returns_client_holding_token(api):
    assert isinstance(api, AuthenticatedClient)
    assert api.headers == {"Authorization": f"Bearer {api.token}"}


def test_bad_login_raises_api_error(client):
    with pytest.raises(ApiError) as exc:
        AuthClient(session=client).login("nobody", "nope")

    assert exc.value.status_code == 401
    assert exc.value.message == "Invalid username or password"


def test_client_without_valid_token_is_refused(client):
    anonymous = AuthenticatedClient("garbage", session=client)

    with pytest.raises(ApiError) as exc:
        anonymous.list_employees()

    assert exc.value.status_code == 401


def test_full_employee_lifecycle(api):
    created = api.create_employee(
        employee_form(name="Kiran Shah", course=("BCA", "BCA")),
        image=("kiran.png", b"\x89PNG....", "image/png"),
    )["employee"]
    assert created["course"] == ["BCA"]
    assert created["image"].endswith("-kiran.png")

    listed = api.list_employees(search="kiran")
    assert listed["totalEmployees"] == 1

    updated = api.update_employee(created["_id"], {"designation": "HR"})
    assert updated["designation"] == "HR"
    assert updated["image"] == created["image"]

    assert api.toggle_active(created["_id"]) is False
    assert api.get_employee(created["_id"])["active"] is False

    assert api.delete_employee(created["_id"])["message"] == "Employee deleted successfully"
    with pytest.raises(ApiError) as exc:
        api.get_employee(created["_id"])
    assert exc.value.status_code == 404


def test_validation_message_is_surfaced(api):
    api.create_employee(employee_form(email="taken@example.com"))

    with pytest.raises(ApiError) as exc:
        api.create_employee(employee_form(email="taken@example.com"))

    assert exc.value.status_code == 400
    assert exc.value.message == "Email already exists: taken@example.com"


def test_iter_employees_walks_all_pages(api):
    for i in range(7):
        api.create_employee(employee_form(name=f"Pager {i}"))

    names = [e["name"] for e in api.iter_employees(search="pager", page_size=3, sort_field="name")]

    assert names == [f"Pager {i}" for i in range(7)]


def test_form_fields_drops_unset_values():
    assert _form_fields({"name": "A", "email": None, "course": ("BCA", "MCA")}) == {
        "name": "A",
        "course": ["BCA", "MCA"],
    }
    assert _form_fields({"course": "BSC"}) == {"course": "BSC"}
