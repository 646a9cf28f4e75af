from unittest.mock import MagicMock

from mxhub.app import app
from mxhub.routes.lap_times import get_timers
from mxhub.services.lap_timer import TimerStateError

from .conftest import OTHER_USER_ID, USER_ID


def _laps(*times):
    laps, split = [], 0
    for number, time in enumerate(times, start=1):
        split += time
        laps.append({"number": number, "time": time, "split_time": split})
    return laps


def _add_track(client, name="Glen Helen"):
    response = client.post("/lap-times/tracks", json={"name": name})
    assert response.status_code == 201
    return response.json()


def test_add_track_is_favorited_and_listed(client, fake_db):
    track = _add_track(client)

    assert track["sessions"] == []
    assert track["fastest_lap"] is None
    favorites = fake_db.tables["user_favorites"]
    assert [(f["user_id"], f["track_id"]) for f in favorites] == [(USER_ID, track["id"])]
    assert [t["name"] for t in client.get("/lap-times").json()] == ["Glen Helen"]


def test_duplicate_track_name_is_409(client):
    _add_track(client)

    response = client.post("/lap-times/tracks", json={"name": "Glen Helen"})

    assert response.status_code == 409
    assert response.json()["detail"] == "A track with this name already exists"


def test_blank_track_name_is_rejected(client):
    assert client.post("/lap-times/tracks", json={"name": "   "}).status_code == 422


def test_save_session_and_fastest_lap(client):
    track = _add_track(client)
    client.post("/lap-times/sessions", json={"track_id": track["id"], "total_time": 185_000, "laps": _laps(62_000, 61_000, 62_000)})
    client.post("/lap-times/sessions", json={"track_id": track["id"], "total_time": 120_000, "laps": _laps(59_000, 61_000)})

    overview = client.get("/lap-times").json()

    assert len(overview) == 1
    assert overview[0]["fastest_lap"] == 59_000
    sessions = overview[0]["sessions"]
    assert [s["total_time"] for s in sessions] == [120_000, 185_000]
    assert sessions[0]["best_lap_number"] == 1
    assert sessions[1]["best_lap_number"] == 2
    assert sessions[1]["total_time_display"] == "03:05.00"


def test_session_rejects_inconsistent_splits(client):
    track = _add_track(client)
    laps = [{"number": 1, "time": 60_000, "split_time": 60_000}, {"number": 2, "time": 50_000, "split_time": 100_000}]

    response = client.post("/lap-times/sessions", json={"track_id": track["id"], "total_time": 110_000, "laps": laps})

    assert response.status_code == 422


def test_session_rejects_total_shorter_than_laps(client):
    track = _add_track(client)

    response = client.post("/lap-times/sessions", json={"track_id": track["id"], "total_time": 1_000, "laps": _laps(60_000)})

    assert response.status_code == 422


def test_session_for_unknown_track_is_404(client):
    response = client.post("/lap-times/sessions", json={"track_id": "missing", "total_time": 0, "laps": []})
    assert response.status_code == 404


def test_delete_session_is_scoped_to_user(client, fake_db):
    track = _add_track(client)
    mine = client.post("/lap-times/sessions", json={"track_id": track["id"], "total_time": 60_000, "laps": _laps(60_000)}).json()
    theirs = fake_db.seed("lap_sessions", user_id=OTHER_USER_ID, track_id=track["id"], date="2024-01-01", total_time=1, laps=[])

    assert client.delete(f"/lap-times/sessions/{theirs['id']}").status_code == 404
    assert client.delete(f"/lap-times/sessions/{mine['id']}").status_code == 204
    assert [s["id"] for s in fake_db.tables["lap_sessions"]] == [theirs["id"]]


def test_timer_flow_saves_session(client, clock, registry):
    track = _add_track(client)

    started = client.post("/lap-times/timer/start", json={"track_id": track["id"]})
    assert started.status_code == 200
    assert started.json()["running"] is True

    clock.advance(61_230)
    lap = client.post("/lap-times/timer/lap").json()
    assert lap == {"number": 1, "time": 61_230, "split_time": 61_230}

    clock.advance(59_000)
    state = client.get("/lap-times/timer").json()
    assert state["elapsed"] == 120_230
    assert state["elapsed_display"] == "02:00.23"

    response = client.post("/lap-times/timer/stop")

    assert response.status_code == 201
    session = response.json()
    assert session["total_time"] == 120_230
    assert [l["time"] for l in session["laps"]] == [61_230, 59_000]
    assert session["best_lap_number"] == 2
    assert registry.get(USER_ID) is None


def test_timer_rejects_double_start_and_idle_lap(client):
    track = _add_track(client)

    assert client.post("/lap-times/timer/lap").status_code == 409
    assert client.post("/lap-times/timer/stop").status_code == 409

    client.post("/lap-times/timer/start", json={"track_id": track["id"]})
    assert client.post("/lap-times/timer/start", json={"track_id": track["id"]}).status_code == 409


def test_timer_reset(client, registry):
    track = _add_track(client)
    client.post("/lap-times/timer/start", json={"track_id": track["id"]})

    assert client.post("/lap-times/timer/reset").status_code == 204
    assert client.get("/lap-times/timer").json()["running"] is False
    assert registry.get(USER_ID) is None


def test_timer_needs_existing_track(client):
    assert client.post("/lap-times/timer/start", json={"track_id": "unknown"}).status_code == 404


def test_stop_retries_save_after_backend_failure(client, clock, fake_db, registry):
    track = _add_track(client)
    client.post("/lap-times/timer/start", json={"track_id": track["id"]})
    clock.advance(30_000)

    fake_db.fail_on = ("lap_sessions", "insert")
    assert client.post("/lap-times/timer/stop").status_code == 500
    assert client.get("/lap-times/timer").json()["elapsed"] == 30_000

    fake_db.fail_on = None
    clock.advance(10_000)
    response = client.post("/lap-times/timer/stop")

    assert response.status_code == 201
    assert response.json()["total_time"] == 30_000
    assert response.json()["laps"] == [{"number": 1, "time": 30_000, "split_time": 30_000}]
    assert registry.get(USER_ID) is None
    assert client.post("/lap-times/timer/stop").status_code == 409


def test_start_race_reports_conflict(client):
    track = _add_track(client)
    timer = MagicMock(running=False, track_id=None)
    timer.start.side_effect = TimerStateError("Timer is already running")
    registry = MagicMock()
    registry.get_or_create.return_value = timer
    app.dependency_overrides[get_timers] = lambda: registry

    response = client.post("/lap-times/timer/start", json={"track_id": track["id"]})

    assert response.status_code == 409
    assert response.json()["detail"] == "Timer is already running"
