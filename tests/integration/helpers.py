OWNER = {
    "business_name": "Mensah Provisions",
    "owner_name": "Ama Mensah",
    "email": "owner@shop.example",
    "password": "owner-pass",
}


async def add_staff(
    client, email, role, password="staff-pass", name="Staff Member", approval_pin=None
):
    payload = {"name": name, "email": email, "password": password, "role": role}
    if approval_pin is not None:
        payload["approval_pin"] = approval_pin
    response = await client.post("/api/users", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


async def login(client, email, password, otp=None):
    payload = {"email": email, "password": password}
    if otp is not None:
        payload["otp"] = otp
    return await client.post("/api/auth/login", json=payload)


async def logout(client):
    return await client.post("/api/auth/logout")
