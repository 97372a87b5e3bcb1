import pytest
from httpx import AsyncClient

from app.auth import is_admin
from app.services.user_service import user_service
from conftest import STUDENT_PASSWORD, fake, make_student, token_for


def registration_payload(**overrides) -> dict:
    data = {
        "email": fake.unique.email(),
        "password": "Secret12345",
        "confirm_password": "Secret12345",
        "first_name": "Sara",
        "last_name": "Ali",
        "university_id": str(fake.unique.random_number(digits=8, fix_len=True)),
        "department": "Computer Science",
    }
    data.update(overrides)
    return data


async def test_register_sends_verification_code(client: AsyncClient, sent_codes):
    """Registration creates an unconfirmed student and emails a code"""
    payload = registration_payload(email="Sara.Ali@Example.com")
    response = await client.post("/auth/register", json=payload)

    assert response.status_code == 201
    assert response.json()["verification_token"]
    assert sent_codes[0]["purpose"] == "email_verify"

    user = await user_service.find_by_email("sara.ali@example.com")
    assert user is not None
    assert user["user_type"] == "Student"
    assert not user["email_confirmed"]
    assert user["total_volunteer_hours"] == 0


async def test_register_duplicate_email(client: AsyncClient, sent_codes):
    payload = registration_payload()
    await client.post("/auth/register", json=payload)

    response = await client.post(
        "/auth/register",
        json=registration_payload(email=payload["email"].upper())
    )

    assert response.status_code == 409


async def test_register_duplicate_university_id(client: AsyncClient, sent_codes):
    payload = registration_payload()
    await client.post("/auth/register", json=payload)

    response = await client.post(
        "/auth/register",
        json=registration_payload(university_id=payload["university_id"])
    )

    assert response.status_code == 409


async def test_register_password_mismatch(client: AsyncClient, sent_codes):
    response = await client.post(
        "/auth/register",
        json=registration_payload(confirm_password="Different123")
    )

    assert response.status_code == 400
    assert sent_codes == []


async def test_verify_email_then_login(client: AsyncClient, sent_codes):
    payload = registration_payload()
    token = (await client.post("/auth/register", json=payload)).json()["verification_token"]

    response = await client.post(
        "/auth/verify-email",
        json={"verification_token": token, "code": sent_codes[-1]["code"]}
    )
    assert response.status_code == 200
    assert response.json()["access_token"]

    response = await client.post(
        "/auth/login",
        json={"login": payload["email"], "password": payload["password"]}
    )
    data = response.json()
    assert response.status_code == 200
    assert data["status"] == "success"
    assert data["user_type"] == "Student"


async def test_verify_email_wrong_code(client: AsyncClient, sent_codes):
    token = (await client.post("/auth/register", json=registration_payload())).json()["verification_token"]
    wrong = "000000" if sent_codes[-1]["code"] != "000000" else "111111"

    response = await client.post("/auth/verify-email", json={"verification_token": token, "code": wrong})

    assert response.status_code == 400


async def test_login_unconfirmed_email_requires_verification(client: AsyncClient, sent_codes):
    payload = registration_payload()
    await client.post("/auth/register", json=payload)

    response = await client.post(
        "/auth/login",
        json={"login": payload["university_id"], "password": payload["password"]}
    )
    data = response.json()

    assert response.status_code == 200
    assert data["status"] == "email_verification_required"
    assert data["access_token"] is None
    assert data["verification_token"]


async def test_login_wrong_password(client: AsyncClient, test_user):
    response = await client.post(
        "/auth/login",
        json={"login": test_user["email"], "password": "not-the-password"}
    )

    assert response.status_code == 401


async def test_login_deactivated_account(client: AsyncClient):
    user = await make_student(is_active=False)
    response = await client.post(
        "/auth/login",
        json={"login": user["email"], "password": STUDENT_PASSWORD}
    )

    assert response.status_code == 403


async def test_two_factor_login(client: AsyncClient, test_user, auth_headers, sent_codes):
    response = await client.post("/auth/2fa/enable", headers=auth_headers)
    assert response.status_code == 200

    response = await client.post(
        "/auth/login",
        json={"login": test_user["email"], "password": STUDENT_PASSWORD}
    )
    data = response.json()
    assert data["status"] == "two_factor_required"
    assert sent_codes[-1]["purpose"] == "two_factor"

    response = await client.post(
        "/auth/verify-2fa",
        json={"verification_token": data["verification_token"], "code": sent_codes[-1]["code"]}
    )
    assert response.status_code == 200
    assert response.json()["status"] == "success"


async def test_verification_token_cannot_be_used_for_another_step(client: AsyncClient, sent_codes):
    token = (await client.post("/auth/register", json=registration_payload())).json()["verification_token"]

    response = await client.post(
        "/auth/verify-2fa",
        json={"verification_token": token, "code": sent_codes[-1]["code"]}
    )

    assert response.status_code == 401


async def test_verification_token_is_not_an_access_token(client: AsyncClient, sent_codes):
    token = (await client.post("/auth/register", json=registration_payload())).json()["verification_token"]

    response = await client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


async def test_forgot_password_same_response_for_unknown_email(client: AsyncClient, test_user, sent_codes):
    known = await client.post("/auth/forgot-password", json={"email": test_user["email"]})
    unknown = await client.post("/auth/forgot-password", json={"email": "nobody@example.com"})

    assert known.status_code == unknown.status_code == 200
    assert known.json()["message"] == unknown.json()["message"]
    assert unknown.json()["verification_token"]
    assert len(sent_codes) == 1


async def test_reset_password(client: AsyncClient, test_user, sent_codes):
    token = (await client.post("/auth/forgot-password", json={"email": test_user["email"]})).json()["verification_token"]

    response = await client.post(
        "/auth/reset-password",
        json={
            "verification_token": token,
            "code": sent_codes[-1]["code"],
            "new_password": "BrandNew123",
            "confirm_password": "BrandNew123"
        }
    )
    assert response.status_code == 200

    response = await client.post(
        "/auth/login",
        json={"login": test_user["email"], "password": "BrandNew123"}
    )
    assert response.json()["status"] == "success"


async def test_password_change_requires_code(client: AsyncClient, test_user, auth_headers, sent_codes):
    response = await client.post(
        "/auth/change-password",
        headers=auth_headers,
        json={
            "current_password": STUDENT_PASSWORD,
            "new_password": "Changed12345",
            "confirm_password": "Changed12345"
        }
    )
    assert response.status_code == 200

    # Old password still works until the code is confirmed
    response = await client.post(
        "/auth/login",
        json={"login": test_user["email"], "password": STUDENT_PASSWORD}
    )
    assert response.json()["status"] == "success"

    response = await client.post(
        "/auth/change-password/verify",
        headers=auth_headers,
        json={"code": sent_codes[-1]["code"]}
    )
    assert response.status_code == 200

    response = await client.post(
        "/auth/login",
        json={"login": test_user["email"], "password": "Changed12345"}
    )
    assert response.json()["status"] == "success"


async def test_password_change_wrong_current_password(client: AsyncClient, auth_headers, sent_codes):
    response = await client.post(
        "/auth/change-password",
        headers=auth_headers,
        json={
            "current_password": "wrong-password",
            "new_password": "Changed12345",
            "confirm_password": "Changed12345"
        }
    )

    assert response.status_code == 400
    assert sent_codes == []


async def test_me_and_profile_update(client: AsyncClient, test_user, auth_headers):
    response = await client.get("/auth/me", headers=auth_headers)
    data = response.json()
    assert response.status_code == 200
    assert data["email"] == test_user["email"]
    assert "password_hash" not in data
    assert data["registration_count"] == 0

    response = await client.put(
        "/auth/me",
        headers=auth_headers,
        json={"department": "Physics"}
    )
    assert response.status_code == 200
    assert response.json()["department"] == "Physics"


async def test_unauthorized_access(client: AsyncClient):
    response = await client.get("/auth/me")

    assert response.status_code in (401, 403)


async def test_student_cannot_reach_admin_routes(client: AsyncClient, auth_headers):
    response = await client.get("/admin/dashboard", headers=auth_headers)

    assert response.status_code == 403


@pytest.mark.parametrize("login_field", ["email", "university_id"])
async def test_login_by_email_or_university_id(client: AsyncClient, test_user, login_field):
    response = await client.post(
        "/auth/login",
        json={"login": test_user[login_field], "password": STUDENT_PASSWORD}
    )

    assert response.status_code == 200
    assert response.json()["user_id"] == str(test_user["id"])


@pytest.mark.parametrize("user,expected", [
    ({"user_type": "Admin"}, True),
    ({"user_type": "Student"}, False),
    (None, False),
])
def test_is_admin(user, expected):
    assert is_admin(user) is expected
