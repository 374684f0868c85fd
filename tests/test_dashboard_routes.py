def test_dashboard_shows_live_counts(client, make_student, make_teacher, make_class, make_announcement):
    make_student("R-1", name="Asha Verma")
    make_teacher("EMP-1", name="Anita Rao")
    make_class("6A", capacity=30, enrolled=12)
    make_announcement("Sports Day", type_="Event")

    response = client.get("/")

    body = response.get_data(as_text=True)
    assert response.status_code == 200
    assert "School Management System" in body
    assert "Asha Verma" in body
    assert "Anita Rao" in body
    assert "12/30" in body
    assert "Sports Day" in body


def test_dashboard_with_empty_database(client):
    response = client.get("/")

    assert response.status_code == 200
    assert "No announcements yet." in response.get_data(as_text=True)
