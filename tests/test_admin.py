from conftest import auth_header, create_post


def test_root(client):
    assert client.get("/").json() == {"message": "Memories API is running!"}


def test_stats_requires_admin(client, alice):
    token, _ = alice
    assert client.get("/admin/stats").status_code == 401
    response = client.get("/admin/stats", headers=auth_header(token))
    assert response.status_code == 403
    assert response.json() == {"message": "Access denied. Admin role required."}


def test_stats_counts(client, alice, admin):
    token, _ = alice
    admin_token, _ = admin
    post = create_post(client, token)
    client.post(f"/posts/{post['id']}/comments", json={"text": "one"}, headers=auth_header(token))
    client.post(f"/posts/{post['id']}/comments", json={"text": "two"}, headers=auth_header(admin_token))

    response = client.get("/admin/stats", headers=auth_header(admin_token))
    assert response.status_code == 200
    assert response.json() == {"totalUsers": 2, "totalPosts": 1, "totalComments": 2}


def test_list_users(client, alice, admin):
    admin_token, _ = admin
    users = client.get("/admin/users", headers=auth_header(admin_token)).json()
    assert [u["email"] for u in users] == ["a@x.com", "admin@x.com"]
    assert all("password" not in u for u in users)


def test_unknown_route_uses_message_body(client):
    response = client.get("/nowhere")
    assert response.status_code == 404
    assert "message" in response.json()
