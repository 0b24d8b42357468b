from conftest import auth_header, create_post, register


def test_create_post_takes_creator_from_token(client, alice, bob):
    token, user = alice
    _, other = bob
    response = client.post(
        "/posts",
        json={
            "title": "  Trip  ",
            "message": "Lake day",
            "tags": "trip, summer, ,",
            "selectedFile": "https://img.example.com/lake.png",
            "creator": other["id"],
        },
        headers=auth_header(token),
    )
    assert response.status_code == 201
    post = response.json()
    assert post["title"] == "Trip"
    assert post["tags"] == ["trip", "summer"]
    assert post["creator"] == {"id": user["id"], "name": "Alice", "avatar": None}
    assert post["creatorName"] == "Alice"
    assert post["selectedFile"] == "https://img.example.com/lake.png"
    assert post["likeCount"] == 0
    assert post["likes"] == []
    assert post["comments"] == []


def test_create_post_requires_auth(client):
    response = client.post("/posts", json={"title": "t", "message": "m"})
    assert response.status_code == 401


def test_create_post_requires_title_and_message(client, alice):
    token, _ = alice
    response = client.post("/posts", json={"title": "   ", "message": "m"}, headers=auth_header(token))
    assert response.status_code == 400
    assert "title" in response.json()["message"]


def test_get_post(client, alice):
    token, _ = alice
    post = create_post(client, token, tags=["trip"])
    response = client.get(f"/posts/{post['id']}")
    assert response.status_code == 200
    assert response.json()["id"] == post["id"]


def test_get_post_missing_or_malformed_id(client):
    assert client.get("/posts/12345").status_code == 404
    response = client.get("/posts/not-an-id")
    assert response.status_code == 404
    assert response.json() == {"message": "No post with id: not-an-id"}


def test_list_posts_is_paginated_newest_first(client, alice):
    token, _ = alice
    ids = [create_post(client, token, title=f"Post {i}")["id"] for i in range(5)]

    first = client.get("/posts", params={"page": 1, "limit": 2}).json()
    assert first["totalPages"] == 3
    assert first["currentPage"] == 1
    assert [p["id"] for p in first["posts"]] == [ids[4], ids[3]]

    last = client.get("/posts", params={"page": 3, "limit": 2}).json()
    assert [p["id"] for p in last["posts"]] == [ids[0]]


def test_list_posts_default_page_size(client, alice):
    token, _ = alice
    for i in range(9):
        create_post(client, token, title=f"Post {i}")
    body = client.get("/posts").json()
    assert len(body["posts"]) == 8
    assert body["totalPages"] == 2


def test_list_posts_filters_by_tag_and_search(client, alice):
    token, _ = alice
    trip = create_post(client, token, title="Road trip", message="Driving", tags=["trip"])
    create_post(client, token, title="Dinner", message="Pasta night", tags=["food"])

    by_tag = client.get("/posts", params={"tag": "trip"}).json()
    assert [p["id"] for p in by_tag["posts"]] == [trip["id"]]

    by_search = client.get("/posts", params={"search": "PASTA"}).json()
    assert [p["title"] for p in by_search["posts"]] == ["Dinner"]

    # the list search only covers title and message
    assert client.get("/posts", params={"search": "food"}).json()["posts"] == []


def test_search_matches_title_message_and_tags(client, alice):
    token, _ = alice
    tagged = create_post(client, token, title="Weekend", message="Nothing special", tags=["Mountains"])
    create_post(client, token, title="Mountain hike", message="Steep", tags=["hike"])

    only_tag = client.get("/posts/search", params={"q": "ountains"}).json()
    assert [p["id"] for p in only_tag] == [tagged["id"]]

    assert len(client.get("/posts/search", params={"q": "mountain"}).json()) == 2
    assert client.get("/posts/search", params={"q": "zzz-absent"}).json() == []


def test_search_treats_wildcards_literally(client, alice):
    token, _ = alice
    create_post(client, token, title="Plain", message="nothing here")
    assert client.get("/posts/search", params={"q": "%"}).json() == []


def test_search_combines_query_and_tag(client, alice):
    token, _ = alice
    create_post(client, token, title="Beach", message="Sun", tags=["trip"])
    create_post(client, token, title="Beach cleanup", message="Volunteering", tags=["community"])

    results = client.get("/posts/search", params={"q": "beach", "tag": "trip"}).json()
    assert [p["title"] for p in results] == ["Beach"]


def test_update_by_owner(client, alice):
    token, _ = alice
    post = create_post(client, token, tags=["trip"])
    response = client.patch(
        f"/posts/{post['id']}",
        json={"title": "Updated", "tags": ["a", "b"]},
        headers=auth_header(token),
    )
    assert response.status_code == 200
    body = response.json()
    assert body["title"] == "Updated"
    assert body["message"] == post["message"]
    assert body["tags"] == ["a", "b"]


def test_update_and_delete_forbidden_for_non_owner(client, alice, bob):
    token, _ = alice
    other_token, _ = bob
    post = create_post(client, token)

    patch = client.patch(f"/posts/{post['id']}", json={"title": "Mine now"}, headers=auth_header(other_token))
    assert patch.status_code == 403
    delete = client.delete(f"/posts/{post['id']}", headers=auth_header(other_token))
    assert delete.status_code == 403
    assert client.get(f"/posts/{post['id']}").json()["title"] == post["title"]


def test_admin_can_update_and_delete_any_post(client, alice, admin):
    token, _ = alice
    admin_token, _ = admin
    post = create_post(client, token)

    patch = client.patch(f"/posts/{post['id']}", json={"message": "Moderated"}, headers=auth_header(admin_token))
    assert patch.status_code == 200
    assert patch.json()["message"] == "Moderated"

    delete = client.delete(f"/posts/{post['id']}", headers=auth_header(admin_token))
    assert delete.status_code == 200


def test_owner_gate_checks_auth_before_lookup(client):
    assert client.delete("/posts/999").status_code == 401


def test_owner_gate_missing_post(client, alice):
    token, _ = alice
    assert client.patch("/posts/999", json={"title": "x"}, headers=auth_header(token)).status_code == 404
    assert client.delete("/posts/bogus", headers=auth_header(token)).status_code == 404


def test_delete_removes_post_everywhere(client, alice, bob):
    token, _ = alice
    other_token, _ = bob
    post = create_post(client, token, title="Gone soon", tags=["trip"])
    client.patch(f"/posts/{post['id']}/likePost", headers=auth_header(other_token))
    client.post(f"/posts/{post['id']}/comments", json={"text": "nice"}, headers=auth_header(other_token))

    response = client.delete(f"/posts/{post['id']}", headers=auth_header(token))
    assert response.status_code == 200
    assert response.json() == {"message": "Post deleted successfully."}

    assert client.get(f"/posts/{post['id']}").status_code == 404
    assert client.get("/posts").json()["posts"] == []
    assert client.get("/posts/search", params={"q": "gone"}).json() == []


def test_delete_scenario_between_two_users(client):
    register(client, "A", "a@x.com")
    register(client, "B", "b@x.com")

    token_a = client.post("/auth/login", json={"email": "a@x.com", "password": "secret123"}).json()["token"]
    p1 = create_post(client, token_a, title="P1", tags=["trip"])

    token_b = client.post("/auth/login", json={"email": "b@x.com", "password": "secret123"}).json()["token"]
    assert client.delete(f"/posts/{p1['id']}", headers=auth_header(token_b)).status_code == 403

    token_a = client.post("/auth/login", json={"email": "a@x.com", "password": "secret123"}).json()["token"]
    assert client.delete(f"/posts/{p1['id']}", headers=auth_header(token_a)).status_code == 200
    assert client.get(f"/posts/{p1['id']}").status_code == 404


def test_create_post_rejects_scalar_tags(client, alice):
    token, _ = alice
    for tags in (5, True, {"a": 1}):
        response = client.post("/posts", json={"title": "t", "message": "m", "tags": tags}, headers=auth_header(token))
        assert response.status_code == 400
        assert "tags" in response.json()["message"]


def test_tag_lists_drop_nulls_and_reject_non_strings(client, alice):
    token, _ = alice
    post = create_post(client, token, tags=[None, "a", " "])
    assert post["tags"] == ["a"]

    response = client.post("/posts", json={"title": "t", "message": "m", "tags": ["a", 3]}, headers=auth_header(token))
    assert response.status_code == 400


def test_list_posts_page_bounds(client, alice):
    token, _ = alice
    create_post(client, token)

    past_end = client.get("/posts", params={"page": 50}).json()
    assert past_end["posts"] == []
    assert past_end["totalPages"] == 1
    assert past_end["currentPage"] == 50

    huge = client.get("/posts", params={"page": 10000000000000000000})
    assert huge.status_code == 400
    assert "page" in huge.json()["message"]
