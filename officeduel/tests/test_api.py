"""
Tests for API layer.

Tests:
- Service methods
- Per-seat views
- Request validation
- Error handling
"""

import pytest
from pydantic import ValidationError

from ..api.schemas import (
    CardCatalogResponse,
    CreateMatchRequest,
    ErrorCode,
    ErrorResponse,
    MatchPhase,
    MatchStateResponse,
    MatchStatusValue,
    PickRequest,
    ReplayResponse,
    SubmitCardsRequest,
)
from ..api.service import MatchService
from ..session import MatchManager


@pytest.fixture
def service(test_definitions):
    """A service over the small test card set."""
    return MatchService(manager=MatchManager(definitions=test_definitions))


@pytest.fixture
def match_id(service):
    """A match where side A holds PUSH1 and NOOP."""
    response = service.create_match(CreateMatchRequest(seed=5))
    session = service.manager.get_match(response.match_id)
    session.state.player_a.hand = ["PUSH1", "NOOP"]
    return response.match_id


def _offer(service, match_id):
    return service.submit_cards(
        match_id, SubmitCardsRequest(face_up_id="PUSH1", face_down_id="NOOP"), viewer_seat=0,
    )


class TestCreateAndView:
    """Tests for creating matches and reading views."""

    def test_create_match(self, service):
        response = service.create_match(CreateMatchRequest(seed=5))
        assert isinstance(response, MatchStateResponse)
        assert response.status == MatchStatusValue.ACTIVE
        assert response.phase == MatchPhase.PLAY_TWO_CARDS
        assert response.momentum == 0
        assert response.win_threshold == 5
        assert len(response.players) == 2

    def test_spectator_sees_no_hands(self, service):
        response = service.create_match(CreateMatchRequest(seed=5))
        assert all(p.hand is None for p in response.players)
        assert all(p.hand_count == 4 for p in response.players)
        assert response.self_momentum is None

    def test_viewer_sees_own_hand_only(self, service, match_id):
        response = service.get_state(match_id, viewer_seat=0)
        assert response.players[0].hand == ["PUSH1", "NOOP"]
        assert response.players[1].hand is None
        assert response.can_submit
        assert not response.can_pick

    def test_player_names(self, service):
        response = service.create_match(
            CreateMatchRequest(seed=1, player_a_name="Alice", player_b_name="Bob"),
        )
        assert [p.name for p in response.players] == ["Alice", "Bob"]

    def test_unknown_match(self, service):
        response = service.get_state("missing")
        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.MATCH_NOT_FOUND
        assert response.details == {"match_id": "missing"}


class TestSubmitAndPick:
    """Tests for offers and picks through the service."""

    def test_offer_hides_face_down_from_picker(self, service, match_id):
        response = _offer(service, match_id)
        assert response.phase == MatchPhase.OPPONENT_PICK
        assert response.face_down_id == "NOOP"

        picker = service.get_state(match_id, viewer_seat=1)
        assert picker.face_up_id == "PUSH1"
        assert picker.face_down_id is None
        assert picker.can_pick

        spectator = service.get_state(match_id)
        assert spectator.face_down_id is None

    def test_pick_resolves_turn(self, service, match_id):
        _offer(service, match_id)
        response = service.pick(match_id, PickRequest(choose_face_up=False), viewer_seat=1)
        assert response.phase == MatchPhase.PLAY_TWO_CARDS
        assert response.active_index == 1
        assert response.momentum == 1
        assert response.self_momentum == -1
        assert response.players[0].tableau == ["PUSH1"]
        assert response.players[1].recently_added == ["NOOP"]
        assert len(response.feedback) == 2

    def test_same_card_twice_rejected(self, service, match_id):
        response = service.submit_cards(
            match_id, SubmitCardsRequest(face_up_id="PUSH1", face_down_id="PUSH1"),
        )
        assert response.error_code == ErrorCode.INVALID_REQUEST

    def test_card_not_in_hand_rejected(self, service, match_id):
        response = service.submit_cards(
            match_id, SubmitCardsRequest(face_up_id="PUSH1", face_down_id="HIT"),
        )
        assert response.error_code == ErrorCode.INVALID_REQUEST
        assert response.details == {"missing": ["HIT"]}

    def test_wrong_seat_cannot_offer(self, service, match_id):
        response = service.submit_cards(
            match_id, SubmitCardsRequest(face_up_id="PUSH1", face_down_id="NOOP"), viewer_seat=1,
        )
        assert response.error_code == ErrorCode.INVALID_REQUEST

    def test_offering_seat_cannot_pick(self, service, match_id):
        _offer(service, match_id)
        response = service.pick(match_id, PickRequest(choose_face_up=True), viewer_seat=0)
        assert response.error_code == ErrorCode.INVALID_REQUEST

    def test_pick_before_offer(self, service, match_id):
        response = service.pick(match_id, PickRequest(choose_face_up=True))
        assert response.error_code == ErrorCode.INVALID_PHASE
        assert response.details == {"expected": "opponent_pick", "actual": "play_two_cards"}

    def test_unknown_card_reported(self, service, match_id):
        session = service.manager.get_match(match_id)
        session.state.player_a.hand = ["ZZZ", "NOOP"]
        service.submit_cards(match_id, SubmitCardsRequest(face_up_id="ZZZ", face_down_id="NOOP"))
        response = service.pick(match_id, PickRequest(choose_face_up=False))
        assert response.error_code == ErrorCode.INVALID_REQUEST
        assert response.details == {"card_id": "ZZZ"}

    def test_random_turn(self, service, match_id):
        offered = service.submit_random(match_id)
        assert offered.phase == MatchPhase.OPPONENT_PICK
        resolved = service.pick_random(match_id)
        assert resolved.phase == MatchPhase.PLAY_TWO_CARDS
        assert resolved.active_index == 1

    def test_winning_turn_finishes_match(self, service, match_id):
        session = service.manager.get_match(match_id)
        session.state.player_a.hand = ["BIG", "NOOP"]
        service.submit_cards(match_id, SubmitCardsRequest(face_up_id="BIG", face_down_id="NOOP"))
        response = service.pick(match_id, PickRequest(choose_face_up=False))
        assert response.status == MatchStatusValue.FINISHED
        assert response.winner_index == 0


class TestReplayAndCatalog:
    """Tests for replays, ending matches and the card catalog."""

    def test_get_replay(self, service, match_id):
        _offer(service, match_id)
        service.pick(match_id, PickRequest(choose_face_up=False))
        replay = service.get_replay(match_id)
        assert isinstance(replay, ReplayResponse)
        assert replay.seed == 5
        assert len(replay.deck_a) == 50
        assert replay.final_momentum == 1
        assert replay.winner_index is None
        assert replay.history

    def test_end_match(self, service, match_id):
        replay = service.end_match(match_id)
        assert isinstance(replay, ReplayResponse)
        assert service.get_state(match_id).error_code == ErrorCode.MATCH_NOT_FOUND
        assert service.end_match(match_id).error_code == ErrorCode.MATCH_NOT_FOUND

    def test_catalog(self, service):
        response = service.get_catalog()
        assert isinstance(response, CardCatalogResponse)
        assert response.schema_version == 1
        assert [c.id for c in response.cards][:2] == ["NOOP", "PUSH1"]
        assert response.cards[1].tiers == [
            {"actions": [{"type": "push", "target": "self", "amount": 1}]},
        ]

    def test_builtin_catalog(self):
        response = MatchService().get_catalog()
        assert len(response.cards) == 24


class TestSchemas:
    """Request model validation."""

    def test_empty_card_id_rejected(self):
        with pytest.raises(ValidationError):
            SubmitCardsRequest(face_up_id="", face_down_id="NOOP")

    def test_create_request_defaults(self):
        request = CreateMatchRequest()
        assert request.seed is None
        assert request.player_a_name is None


class TestHTTPApp:
    """Tests for the FastAPI adapter."""

    @pytest.fixture
    def client(self, service):
        from fastapi.testclient import TestClient
        from ..api.app import create_app
        return TestClient(create_app(service))

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_match_lifecycle(self, client, service):
        created = client.post("/api/v1/matches", json={"seed": 5}).json()
        match_id = created["match_id"]
        service.manager.get_match(match_id).state.player_a.hand = ["PUSH1", "NOOP"]

        offered = client.post(
            f"/api/v1/matches/{match_id}/offer?seat=0",
            json={"face_up_id": "PUSH1", "face_down_id": "NOOP"},
        )
        assert offered.status_code == 200
        assert offered.json()["phase"] == "opponent_pick"

        view = client.get(f"/api/v1/matches/{match_id}?seat=1").json()
        assert view["face_down_id"] is None

        picked = client.post(
            f"/api/v1/matches/{match_id}/pick?seat=1", json={"choose_face_up": False},
        )
        assert picked.json()["momentum"] == 1

        listed = client.get("/api/v1/matches").json()
        assert listed["matches"] == [match_id]

        ended = client.delete(f"/api/v1/matches/{match_id}")
        assert ended.json()["seed"] == 5

    def test_error_status_codes(self, client):
        assert client.get("/api/v1/matches/missing").status_code == 404
        match_id = client.post("/api/v1/matches", json={"seed": 5}).json()["match_id"]
        response = client.post(f"/api/v1/matches/{match_id}/pick", json={"choose_face_up": True})
        assert response.status_code == 409
        assert response.json()["error_code"] == "INVALID_PHASE"

    def test_invalid_seat_rejected(self, client):
        assert client.get("/api/v1/matches/any?seat=2").status_code == 422

    def test_cards(self, client):
        response = client.get("/api/v1/cards")
        assert response.status_code == 200
        assert len(response.json()["cards"]) == 7
