from datetime import datetime, timezone

import pytest

from clientdesk.domain.clients.repository import ClientRepository
from clientdesk.domain.clients.schemas import ClientCreate, ClientUpdate
from clientdesk.domain.clients.service import ClientService
from clientdesk.domain.teams.service import TeamService
from clientdesk.exceptions import ClientNotFound, ClientUnavailable

NEW_CLIENT = {
    "name": "Maria Garcia",
    "email": "Maria@Example.com",
    "phone": "+34 600 000 000",
    "appointmentDateTime": "2030-05-04T10:30",
    "interests": ["services", "learning"],
}


def create(service, user_id, **overrides):
    return service.create_client(ClientCreate(**{**NEW_CLIENT, **overrides}), user_id)


class TestClientSchemas:
    def test_valid_client_is_normalized(self):
        data = ClientCreate(**{**NEW_CLIENT, "name": "  Maria  ", "address": "  ", "interests": ["services", "services"]})

        assert data.name == "Maria"
        assert data.email == "maria@example.com"
        assert data.address is None
        assert [i.value for i in data.interests] == ["services"]

    @pytest.mark.parametrize(
        "field,value",
        [
            ("name", "M"),
            ("email", "maria"),
            ("dateOfBirth", "1990-02-30"),
            ("dateOfBirth", "02/03/1990"),
            ("appointmentDateTime", "2030-05-04 10:30"),
            ("interests", ["gardening"]),
        ],
    )
    def test_invalid_values_are_rejected(self, field, value):
        with pytest.raises(ValueError):
            ClientCreate(**{**NEW_CLIENT, field: value})


class TestClientRepository:
    def test_add_client_stamps_owner_team_status_and_time(self, db):
        client_id = ClientRepository.add_client(db, "u1", "team-1", name="Ana", email="ana@example.com", phone=None)

        stored = db.data("clients", client_id)
        assert stored["userId"] == "u1"
        assert stored["teamId"] == "team-1"
        assert stored["status"] == "Active"
        assert isinstance(stored["createdAt"], datetime)
        assert "phone" not in stored

    def test_get_clients_is_newest_first(self, db):
        first = ClientRepository.add_client(db, "u1", None, name="First", email="a@example.com")
        second = ClientRepository.add_client(db, "u1", None, name="Second", email="b@example.com")

        assert [c.id for c in ClientRepository.get_clients(db, "u1", None)] == [second, first]

    def test_missing_created_at_sorts_last(self, db):
        db.seed("clients", "legacy", userId="u1", name="Legacy", email="l@example.com", createdAt="garbage")
        newer = ClientRepository.add_client(db, "u1", None, name="New", email="n@example.com")

        clients = ClientRepository.get_clients(db, "u1", None)

        assert [c.id for c in clients] == [newer, "legacy"]
        assert clients[1].createdAt is None

    def test_update_never_changes_ownership_fields(self, db):
        client_id = ClientRepository.add_client(db, "u1", "team-1", name="Ana", email="ana@example.com")
        created_at = db.data("clients", client_id)["createdAt"]

        ClientRepository.update_client(
            db,
            client_id,
            {"name": "Ana B", "userId": "intruder", "teamId": "other", "createdAt": "now", "id": "x"},
        )

        stored = db.data("clients", client_id)
        assert stored["name"] == "Ana B"
        assert stored["userId"] == "u1"
        assert stored["teamId"] == "team-1"
        assert stored["createdAt"] == created_at

    def test_update_removes_fields_set_to_none(self, db):
        client_id = ClientRepository.add_client(db, "u1", None, name="Ana", email="ana@example.com", phone="123")

        ClientRepository.update_client(db, client_id, {"phone": None})

        assert "phone" not in db.data("clients", client_id)

    def test_update_missing_client(self, db):
        with pytest.raises(ClientNotFound):
            ClientRepository.update_client(db, "nope", {"name": "X"})

    def test_delete_client_removes_its_notes(self, db):
        client_id = ClientRepository.add_client(db, "u1", None, name="Ana", email="ana@example.com")
        ClientRepository.add_note(db, client_id, "one", "u1")
        ClientRepository.add_note(db, client_id, "two", "u1")

        assert ClientRepository.delete_client(db, client_id) == 2

        assert db.data("clients", client_id) is None
        assert db.children("clients", client_id, "notes") == {}

    def test_delete_client_with_more_notes_than_one_batch_holds(self, db):
        client_id = ClientRepository.add_client(db, "u1", None, name="Ana", email="ana@example.com")
        for i in range(501):
            db.seed("clients", client_id, "notes", f"n{i}", text=f"note {i}", userId="u1")

        assert ClientRepository.delete_client(db, client_id) == 501

        assert db.data("clients", client_id) is None
        assert db.children("clients", client_id, "notes") == {}

    def test_notes_are_newest_first(self, db):
        client_id = ClientRepository.add_client(db, "u1", None, name="Ana", email="ana@example.com")
        ClientRepository.add_note(db, client_id, "older", "u1")
        ClientRepository.add_note(db, client_id, "newer", "u1")

        assert [n.text for n in ClientRepository.get_notes(db, client_id)] == ["newer", "older"]

    def test_store_failure_raises_client_unavailable(self, db):
        db.unavailable = True

        with pytest.raises(ClientUnavailable):
            ClientRepository.get_clients(db, "u1", None)
        with pytest.raises(ClientUnavailable):
            ClientRepository.add_note(db, "c1", "text", "u1")


class TestClientVisibility:
    def test_solo_user_sees_only_own_clients(self, db, make_user):
        make_user("u1", "u1@example.com", "One")
        make_user("u2", "u2@example.com", "Two")
        service = ClientService(db)
        mine = create(service, "u1")
        create(service, "u2")

        assert [c.id for c in service.get_clients("u1")] == [mine]

    def test_team_sees_clients_stamped_with_team(self, db, make_user):
        make_user("owner", "o@example.com", "Owner", teamId="team-1")
        make_user("member", "m@example.com", "Member", teamId="team-1")
        make_user("outsider", "x@example.com", "Outsider")
        service = ClientService(db)
        by_owner = create(service, "owner")
        by_member = create(service, "member")
        create(service, "outsider")

        visible = {c.id for c in service.get_clients("member")}

        assert visible == {by_owner, by_member}

    def test_new_member_sees_clients_created_by_owner(self, db, make_user):
        owner = make_user("owner", "o@example.com", "Owner")
        make_user("member", "m@example.com", "Member")
        TeamService(db).invite_member(owner, "m@example.com")
        service = ClientService(db)
        owner_clients = {create(service, "owner"), create(service, "owner", name="Second Client")}

        assert {c.id for c in service.get_clients("member")} == owner_clients

    def test_team_id_is_captured_at_creation(self, db, make_user):
        make_user("u1", "u1@example.com", "One")
        service = ClientService(db)
        solo_client = create(service, "u1")

        db.docs[("userSettings", "u1")]["teamId"] = "team-1"
        team_client = create(service, "u1")

        assert db.data("clients", solo_client)["teamId"] is None
        assert db.data("clients", team_client)["teamId"] == "team-1"
        # Clients created before joining stay out of the team view
        assert [c.id for c in service.get_clients("u1")] == [team_client]

    def test_invisible_client_reads_as_not_found(self, db, make_user):
        make_user("u1", "u1@example.com", "One")
        make_user("u2", "u2@example.com", "Two")
        service = ClientService(db)
        client_id = create(service, "u1")

        with pytest.raises(ClientNotFound):
            service.get_client(client_id, "u2")
        with pytest.raises(ClientNotFound):
            service.delete_client(client_id, "u2")
        assert db.data("clients", client_id) is not None

    def test_update_returns_replaced_record(self, db, make_user):
        make_user("u1", "u1@example.com", "One")
        service = ClientService(db)
        client_id = create(service, "u1")

        update = ClientUpdate(**{**NEW_CLIENT, "phone": "", "status": "Inactive"})
        updated = service.update_client(client_id, update, "u1")

        assert updated.status == "Inactive"
        assert updated.phone is None
        assert "phone" not in db.data("clients", client_id)
        assert db.data("clients", client_id)["status"] == "Inactive"

    def test_settings_failure_surfaces_as_client_unavailable(self, db):
        db.unavailable = True

        with pytest.raises(ClientUnavailable):
            ClientService(db).get_clients("u1")


class TestClientRoutes:
    def test_create_then_list(self, api, make_user):
        make_user("owner-uid", "owner@example.com", "Olivia Owner")

        response = api.post("/clients", json=NEW_CLIENT)

        assert response.status_code == 201
        client_id = response.json()["id"]

        listed = api.get("/clients").json()
        assert [c["id"] for c in listed] == [client_id]
        assert listed[0]["email"] == "maria@example.com"
        assert listed[0]["status"] == "Active"
        assert listed[0]["interests"] == ["services", "learning"]

    def test_invalid_client_is_422(self, api):
        response = api.post("/clients", json={**NEW_CLIENT, "email": "nope"})

        assert response.status_code == 422

    def test_get_update_delete(self, api, db):
        client_id = api.post("/clients", json=NEW_CLIENT).json()["id"]

        assert api.get(f"/clients/{client_id}").json()["name"] == "Maria Garcia"

        response = api.put(f"/clients/{client_id}", json={**NEW_CLIENT, "name": "Maria G", "status": "Inactive"})
        assert response.status_code == 200
        assert response.json()["name"] == "Maria G"
        assert response.json()["userId"] == "owner-uid"

        assert api.delete(f"/clients/{client_id}").status_code == 200
        assert api.get(f"/clients/{client_id}").status_code == 404

    def test_unknown_client_is_404(self, api):
        assert api.get("/clients/missing").status_code == 404
        assert api.put("/clients/missing", json=NEW_CLIENT).status_code == 404
        assert api.get("/clients/missing/notes").status_code == 404

    def test_notes_lifecycle(self, api, db):
        client_id = api.post("/clients", json=NEW_CLIENT).json()["id"]

        note_id = api.post(f"/clients/{client_id}/notes", json={"text": "Called, left message"}).json()["id"]
        api.post(f"/clients/{client_id}/notes", json={"text": "Booked follow-up"})

        notes = api.get(f"/clients/{client_id}/notes").json()
        assert [n["text"] for n in notes] == ["Booked follow-up", "Called, left message"]
        assert notes[0]["userId"] == "owner-uid"

        assert api.delete(f"/clients/{client_id}/notes/{note_id}").status_code == 200
        assert len(api.get(f"/clients/{client_id}/notes").json()) == 1

    @pytest.mark.parametrize("text", ["", "   ", "x" * 501])
    def test_invalid_note_is_422(self, api, text):
        client_id = api.post("/clients", json=NEW_CLIENT).json()["id"]

        assert api.post(f"/clients/{client_id}/notes", json={"text": text}).status_code == 422

    def test_contact_queues_mail_to_client(self, api, db, make_user):
        make_user("owner-uid", "owner@example.com", "Olivia Owner", companyName="Acme Studio")
        client_id = api.post("/clients", json=NEW_CLIENT).json()["id"]

        response = api.post(
            f"/clients/{client_id}/contact",
            json={"subject": "Your appointment", "message": "See you <soon>!"},
        )

        assert response.status_code == 202
        (mail,) = db.children("mail").values()
        assert mail["to"] == "maria@example.com"
        assert mail["message"]["subject"] == "Your appointment"
        assert "See you &lt;soon&gt;!" in mail["message"]["html"]
        assert "Acme Studio" in mail["message"]["html"]

    def test_store_outage_is_503(self, api, db):
        db.unavailable = True

        response = api.get("/clients")

        assert response.status_code == 503
        assert response.json() == {"detail": "Could not access clients. Please try again."}

    def test_created_at_is_utc_aware(self, api, db):
        client_id = api.post("/clients", json=NEW_CLIENT).json()["id"]

        created_at = db.data("clients", client_id)["createdAt"]

        assert created_at.tzinfo is not None
        assert created_at <= datetime.now(timezone.utc)
