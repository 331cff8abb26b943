from datetime import date, datetime

import pytest

from citapro.domain.chat.schemas import MAX_MESSAGE_LENGTH
from citapro.models import Notification
from conftest import make_appointment, make_professional, make_profile


def make_notification(db, user, title="Aviso", created_at=None, is_read=False):
    notification = Notification(
        user_id=user.id,
        type="pago_realizado",
        title=title,
        message="Mensaje",
        is_read=is_read,
    )
    if created_at is not None:
        notification.created_at = created_at
    db.add(notification)
    db.commit()
    db.refresh(notification)
    return notification


@pytest.fixture
def user(db, login):
    profile = make_profile(db)
    login(profile)
    return profile


class TestNotifications:
    def test_newest_first(self, client, db, user):
        make_notification(db, user, "Primera", created_at=datetime(2025, 3, 1, 9, 0))
        make_notification(db, user, "Segunda", created_at=datetime(2025, 3, 2, 9, 0))

        titles = [n["title"] for n in client.get("/notifications").json()]
        assert titles == ["Segunda", "Primera"]

    def test_since_returns_only_newer(self, client, db, user):
        make_notification(db, user, "Vieja", created_at=datetime(2025, 3, 1, 9, 0))
        make_notification(db, user, "Nueva", created_at=datetime(2025, 3, 2, 9, 0))

        resp = client.get("/notifications", params={"since": "2025-03-01T12:00:00"})
        assert [n["title"] for n in resp.json()] == ["Nueva"]

    def test_only_own_notifications(self, client, db, user):
        other = make_profile(db, name="Otro", email="otro@example.com")
        make_notification(db, other, "Ajena")
        assert client.get("/notifications").json() == []

    def test_unread_count_and_mark_read(self, client, db, user):
        first = make_notification(db, user)
        make_notification(db, user)
        make_notification(db, user, is_read=True)

        assert client.get("/notifications/unread-count").json() == {"unread": 2}

        resp = client.post(f"/notifications/{first.id}/read")
        assert resp.status_code == 200
        assert resp.json()["is_read"] is True
        assert client.get("/notifications/unread-count").json() == {"unread": 1}

        assert client.post("/notifications/read-all").json() == {"updated": 1}
        assert client.get("/notifications/unread-count").json() == {"unread": 0}

    def test_cannot_mark_someone_elses(self, client, db, user):
        other = make_profile(db, name="Otro", email="otro@example.com")
        foreign = make_notification(db, other)
        assert client.post(f"/notifications/{foreign.id}/read").status_code == 404


@pytest.fixture
def conversation(db):
    professional = make_professional(db)
    client_profile = make_profile(db)
    appointment = make_appointment(db, client_profile, professional, date(2025, 3, 4))
    return appointment, client_profile, professional.user


class TestChat:
    def test_both_parties_see_the_thread(self, client, login, conversation):
        appointment, client_profile, professional_user = conversation

        login(client_profile)
        resp = client.post(f"/chat/{appointment.id}/messages", json={"message": "Hola, ¿confirmamos?"})
        assert resp.status_code == 201
        assert resp.json()["is_mine"] is True
        assert resp.json()["sender_name"] == "Ana Cliente"

        login(professional_user)
        client.post(f"/chat/{appointment.id}/messages", json={"message": "Sí, nos vemos."})

        thread = client.get(f"/chat/{appointment.id}/messages").json()
        assert [m["message"] for m in thread] == ["Hola, ¿confirmamos?", "Sí, nos vemos."]
        assert [m["is_mine"] for m in thread] == [False, True]

    def test_outsiders_are_refused(self, client, db, login, conversation):
        appointment, _, _ = conversation
        login(make_profile(db, name="Otro", email="otro@example.com"))

        assert client.get(f"/chat/{appointment.id}/messages").status_code == 403
        assert client.post(f"/chat/{appointment.id}/messages", json={"message": "hola"}).status_code == 403

    def test_markup_is_escaped(self, client, login, conversation):
        appointment, client_profile, _ = conversation
        login(client_profile)
        resp = client.post(f"/chat/{appointment.id}/messages", json={"message": "<b>hola</b>"})
        assert resp.json()["message"] == "&lt;b&gt;hola&lt;/b&gt;"

    @pytest.mark.parametrize("text", ["", "   ", "x" * (MAX_MESSAGE_LENGTH + 1)])
    def test_blank_or_oversized_messages(self, client, login, conversation, text):
        appointment, client_profile, _ = conversation
        login(client_profile)
        resp = client.post(f"/chat/{appointment.id}/messages", json={"message": text})
        assert resp.status_code == 400
        assert client.get(f"/chat/{appointment.id}/messages").json() == []
