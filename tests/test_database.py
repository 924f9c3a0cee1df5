import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

from database.converters import (
    course_from_rows,
    hole_score_to_row,
    leaderboard_to_rows,
    round_from_rows,
    round_to_row,
    to_uuid,
    tournament_from_rows,
)
from database.exceptions import IntegrityError, NotFoundError
from database.repositories.course_repo import CourseRepositoryDB
from database.repositories.round_repo import RoundRepositoryDB
from database.repositories.tournament_repo import TournamentRepositoryDB
from database.repositories.user_repo import UserRepositoryDB
from models import (
    Course,
    Hole,
    HoleScore,
    LeaderboardEntry,
    Round,
    RoundStatus,
    TournamentDetails,
    TournamentStatus,
)
from scoring import ConflictError, LeaderboardMode


START = datetime(2026, 7, 1, 8, 0, tzinfo=timezone.utc)


# ================================================================
# Fixtures
# ================================================================

@pytest.fixture
def mock_pool():
    pool = MagicMock()
    conn = AsyncMock()
    pool.acquire.return_value.__aenter__.return_value = conn
    conn.transaction = MagicMock()
    conn.transaction.return_value.__aenter__.return_value = AsyncMock()
    return pool, conn


def _user_row(user_id, **stats):
    """Helper: users.users row dict."""
    row = {
        "id": user_id,
        "email": "player@club.com",
        "name": "Player",
        "password_hash": "x",
        "handicap": 12.4,
        "role": "user",
        "status": "active",
        "stats_total_rounds": 0,
        "stats_average_score": 0,
        "stats_best_round": None,
        "stats_total_birdies": 0,
        "stats_total_eagles": 0,
        "preferences": '{"units": "metric", "notifications": false}',
        "created_at": None,
    }
    row.update({f"stats_{k}": v for k, v in stats.items()})
    return row


def _course_row(course_id, name="Links"):
    return {
        "id": course_id, "name": name, "address": None, "city": "St Andrews",
        "state": None, "country": "UK", "slope_rating": 131, "course_rating": 72.1,
        "created_at": None,
    }


def _round_row(round_id, *, tournament_id=None, status="submitted"):
    """Helper: users.rounds row joined with display names."""
    return {
        "id": round_id,
        "user_id": uuid4(),
        "course_id": uuid4(),
        "tournament_id": tournament_id,
        "round_date": START,
        "tee": "blue",
        "total_score": 9,
        "total_par": 8,
        "weather": '{"temperature": 18.5, "conditions": "windy", "wind_speed": 20}',
        "notes": None,
        "status": status,
        "confirmed_by": None,
        "confirmed_at": None,
        "created_at": None,
        "course_name": "Links",
        "tournament_name": None,
        "player_name": "Player",
    }


def _hole_score_row(*, hole_number=1, par=4, strokes=5):
    return {
        "hole_number": hole_number, "par": par, "strokes": strokes,
        "strokes_over_par": strokes - par, "putts": 2, "club": None,
    }


def _tournament_row(tournament_id, *, status="upcoming", max_participants=10):
    return {
        "id": tournament_id,
        "name": "Club Championship",
        "description": None,
        "course_id": uuid4(),
        "organizer_id": uuid4(),
        "start_date": START,
        "end_date": START + timedelta(days=1),
        "format": "stroke-play",
        "max_participants": max_participants,
        "entry_fee": 25,
        "prizes": {"first": "Trophy"},
        "status": status,
        "created_at": None,
        "course_name": "Links",
        "organizer_name": "Admin",
    }


def _entry_row(user_id, total_score, round_ids=()):
    return {"user_id": user_id, "total_score": total_score,
            "round_ids": list(round_ids), "player_name": None}


def _participant_row(user_id):
    return {"user_id": user_id, "registration_date": START, "paid": False}


# ================================================================
# converters.py
# ================================================================

def test_to_uuid_rejects_malformed_ids():
    with pytest.raises(NotFoundError):
        to_uuid("not-a-uuid")


def test_course_converter_parses_jsonb_yardages():
    cid = uuid4()
    holes = [
        {"hole_number": 2, "par": 3, "handicap": 17, "yardages": '{"white": 150}'},
        {"hole_number": 1, "par": 5, "handicap": 1, "yardages": {"blue": 510}},
    ]
    c = course_from_rows(_course_row(cid), holes)

    assert c.id == str(cid)
    assert c.location.city == "St Andrews"
    assert [h.number for h in c.holes] == [1, 2]
    assert c.get_hole(2).get_yardage("white") == 150
    assert c.get_par() == 8


def test_round_converter_recomputes_over_par():
    rid = uuid4()
    r = round_from_rows(_round_row(rid), [
        _hole_score_row(hole_number=2, par=4, strokes=4),
        _hole_score_row(hole_number=1, par=4, strokes=5),
    ])

    assert r.id == str(rid)
    assert r.tee == "blue"
    assert r.weather.conditions == "windy"
    assert r.course_name == "Links"
    assert [hs.hole_number for hs in r.hole_scores] == [1, 2]
    assert r.hole_scores[0].strokes_over_par == 1
    assert r.total_score == 9


def test_hole_score_to_row_stores_over_par():
    rid = uuid4()
    row = hole_score_to_row(HoleScore(hole_number=7, par=3, strokes=5, putts=3), rid)
    assert row == (rid, 7, 3, 5, 2, 3, None)


def test_round_to_row_carries_totals_and_status():
    r = Round(
        user_id=str(uuid4()), course_id=str(uuid4()), date=START,
        hole_scores=[HoleScore(hole_number=1, par=4, strokes=6)],
        status=RoundStatus.REJECTED,
    )
    data = round_to_row(r)
    assert data["total_score"] == 6
    assert data["total_par"] == 4
    assert data["status"] == "rejected"
    assert data["tournament_id"] is None
    assert data["weather"] is None


def test_tournament_converter_orders_and_names():
    tid, a, b = uuid4(), uuid4(), uuid4()
    t = tournament_from_rows(
        _tournament_row(tid),
        [_participant_row(a)],
        [_entry_row(b, 68), _entry_row(a, 70, [uuid4()])],
    )
    assert t.id == str(tid)
    assert t.prizes.first == "Trophy"
    assert t.is_registered(str(a))
    assert [e.user_id for e in t.leaderboard] == [str(b), str(a)]
    assert len(t.leaderboard[1].round_ids) == 1


def test_leaderboard_to_rows_positions():
    tid = uuid4()
    a, b, r = str(uuid4()), str(uuid4()), str(uuid4())
    rows = leaderboard_to_rows(
        [LeaderboardEntry(user_id=a, total_score=68, round_ids=[r]),
         LeaderboardEntry(user_id=b, total_score=70)],
        tid,
    )
    assert [(row[2], row[3]) for row in rows] == [(68, 0), (70, 1)]
    assert rows[0][4] == [to_uuid(r)]


# ================================================================
# UserRepositoryDB
# ================================================================

@pytest.mark.asyncio
async def test_user_repo_get_user(mock_pool):
    pool, conn = mock_pool
    repo = UserRepositoryDB(pool)

    uid = uuid4()
    conn.fetchrow.return_value = _user_row(uid)
    u = await repo.get_user(str(uid))

    assert u.id == str(uid)
    assert u.preferences.units == "metric"
    assert u.stats.best_round is None


@pytest.mark.asyncio
async def test_user_repo_record_round_stats(mock_pool):
    pool, conn = mock_pool
    repo = UserRepositoryDB(pool)

    uid = uuid4()
    conn.fetchrow.return_value = _user_row(uid, total_rounds=2, average_score=90, best_round=88)
    r = Round(
        user_id=str(uid), course_id=str(uuid4()), date=START,
        hole_scores=[HoleScore(hole_number=n, par=4, strokes=17) for n in range(1, 6)],
    )
    stats = await repo.record_round_stats(str(uid), r)

    assert (stats.total_rounds, stats.average_score, stats.best_round) == (3, 88, 85)
    sql = conn.fetchrow.call_args[0][0]
    assert "FOR UPDATE" in sql
    args = conn.execute.call_args[0]
    assert args[1:] == (uid, 3, 88, 85, 0, 0)


@pytest.mark.asyncio
async def test_user_repo_record_round_stats_missing_user(mock_pool):
    pool, conn = mock_pool
    repo = UserRepositoryDB(pool)
    conn.fetchrow.return_value = None

    r = Round(user_id="x", course_id="y", date=START)
    with pytest.raises(NotFoundError):
        await repo.record_round_stats(str(uuid4()), r)
    conn.execute.assert_not_called()


# ================================================================
# CourseRepositoryDB
# ================================================================

@pytest.mark.asyncio
async def test_course_repo_get_course_not_found(mock_pool):
    pool, conn = mock_pool
    repo = CourseRepositoryDB(pool)
    conn.fetchrow.return_value = None

    assert await repo.get_course(str(uuid4())) is None


@pytest.mark.asyncio
async def test_course_repo_create_course(mock_pool):
    pool, conn = mock_pool
    repo = CourseRepositoryDB(pool)

    cid = uuid4()
    conn.fetchrow.return_value = _course_row(cid, name="New Course")
    conn.fetch.return_value = [{"hole_number": 1, "par": 4, "handicap": None, "yardages": "{}"}]

    saved = await repo.create_course(Course(name="New Course", holes=[Hole(number=1, par=4)]))

    assert saved.name == "New Course"
    sql, tuples = conn.executemany.call_args[0]
    assert "courses.holes" in sql
    assert tuples == [(cid, 1, 4, None, "{}")]


@pytest.mark.asyncio
async def test_course_repo_update_holes(mock_pool):
    pool, conn = mock_pool
    repo = CourseRepositoryDB(pool)

    cid = uuid4()
    conn.fetchrow.return_value = _course_row(cid)
    conn.fetch.return_value = [
        {"hole_number": n, "par": 5 if n == 5 else 4, "handicap": None, "yardages": "{}"}
        for n in range(1, 19)
    ]

    holes = [Hole(number=n, par=5 if n == 5 else 4) for n in range(1, 19)]
    course = await repo.update_holes(str(cid), holes)

    assert course.get_hole(5).par == 5
    assert "FOR UPDATE" in conn.fetchrow.call_args[0][0]
    delete_sql, delete_id = conn.execute.call_args[0]
    assert delete_sql.startswith("DELETE FROM courses.holes")
    assert delete_id == cid
    _, tuples = conn.executemany.call_args[0]
    assert tuples[4] == (cid, 5, 5, None, "{}")
    assert len(tuples) == 18


@pytest.mark.asyncio
async def test_course_repo_update_holes_missing_course(mock_pool):
    pool, conn = mock_pool
    repo = CourseRepositoryDB(pool)
    conn.fetchrow.return_value = None

    with pytest.raises(NotFoundError):
        await repo.update_holes(str(uuid4()), [Hole(number=1, par=4)])
    conn.execute.assert_not_called()
    conn.executemany.assert_not_called()


@pytest.mark.asyncio
async def test_course_repo_delete_in_use(mock_pool):
    pool, conn = mock_pool
    repo = CourseRepositoryDB(pool)
    conn.fetchval.return_value = 2

    with pytest.raises(IntegrityError, match="used in 2 tournament"):
        await repo.delete_course(str(uuid4()))
    conn.execute.assert_not_called()


@pytest.mark.asyncio
async def test_course_repo_delete(mock_pool):
    pool, conn = mock_pool
    repo = CourseRepositoryDB(pool)
    conn.fetchval.return_value = 0

    conn.execute.return_value = "DELETE 1"
    assert await repo.delete_course(str(uuid4())) is True

    conn.execute.return_value = "DELETE 0"
    assert await repo.delete_course(str(uuid4())) is False


# ================================================================
# RoundRepositoryDB
# ================================================================

@pytest.mark.asyncio
async def test_round_repo_get_round_not_found(mock_pool):
    pool, conn = mock_pool
    repo = RoundRepositoryDB(pool)
    conn.fetchrow.return_value = None

    assert await repo.get_round(str(uuid4())) is None


@pytest.mark.asyncio
async def test_round_repo_create_round(mock_pool):
    pool, conn = mock_pool
    repo = RoundRepositoryDB(pool)

    rid = uuid4()
    conn.fetchrow.side_effect = [{"id": rid}, _round_row(rid)]
    conn.fetch.return_value = [_hole_score_row(hole_number=1, par=4, strokes=5)]

    r = Round(
        user_id=str(uuid4()), course_id=str(uuid4()), date=START,
        hole_scores=[HoleScore(hole_number=1, par=4, strokes=5)],
    )
    saved = await repo.create_round(r)

    assert saved.id == str(rid)
    sql, tuples = conn.executemany.call_args[0]
    assert "strokes_over_par" in sql
    assert tuples == [(rid, 1, 4, 5, 1, None, None)]


@pytest.mark.asyncio
async def test_round_repo_save_round_missing(mock_pool):
    pool, conn = mock_pool
    repo = RoundRepositoryDB(pool)
    conn.execute.return_value = "UPDATE 0"

    r = Round(id=str(uuid4()), user_id=str(uuid4()), course_id=str(uuid4()), date=START)
    with pytest.raises(NotFoundError):
        await repo.save_round(r)
    conn.executemany.assert_not_called()


# ================================================================
# TournamentRepositoryDB
# ================================================================

@pytest.mark.asyncio
async def test_tournament_repo_record_score_rewrites_board(mock_pool):
    pool, conn = mock_pool
    repo = TournamentRepositoryDB(pool)

    tid, a, b = uuid4(), uuid4(), uuid4()
    conn.fetchrow.return_value = _tournament_row(tid, status="active")
    conn.fetch.side_effect = [
        [],                                   # participants
        [_entry_row(b, 70), _entry_row(a, 72)],   # leaderboard
    ]

    rid = str(uuid4())
    board = await repo.record_score(str(tid), str(a), 68, LeaderboardMode.CREATE, round_id=rid)

    assert [(e.user_id, e.total_score) for e in board] == [(str(a), 68), (str(b), 70)]
    assert "FOR UPDATE" in conn.fetchrow.call_args[0][0]
    conn.execute.assert_awaited_once()
    sql, rows = conn.executemany.call_args[0]
    assert "leaderboard_entries" in sql
    assert [(row[1], row[2], row[3]) for row in rows] == [(a, 68, 0), (b, 70, 1)]
    assert rows[0][4] == [to_uuid(rid)]


@pytest.mark.asyncio
async def test_tournament_repo_record_score_missing_tournament(mock_pool):
    pool, conn = mock_pool
    repo = TournamentRepositoryDB(pool)
    conn.fetchrow.return_value = None

    with pytest.raises(NotFoundError):
        await repo.record_score(str(uuid4()), str(uuid4()), 70, LeaderboardMode.CREATE)
    conn.executemany.assert_not_called()


@pytest.mark.asyncio
async def test_tournament_repo_register_full(mock_pool):
    pool, conn = mock_pool
    repo = TournamentRepositoryDB(pool)

    tid = uuid4()
    conn.fetchrow.return_value = _tournament_row(tid, max_participants=1)
    conn.fetch.side_effect = [[_participant_row(uuid4())], []]

    with pytest.raises(ConflictError, match="full"):
        await repo.register(str(tid), str(uuid4()))
    conn.execute.assert_not_called()


@pytest.mark.asyncio
async def test_tournament_repo_register(mock_pool):
    pool, conn = mock_pool
    repo = TournamentRepositoryDB(pool)

    tid, uid = uuid4(), uuid4()
    conn.fetchrow.return_value = _tournament_row(tid)
    conn.fetch.side_effect = [[], []]

    participant = await repo.register(str(tid), str(uid), now=START)

    assert participant.user_id == str(uid)
    assert participant.paid is False
    args = conn.execute.call_args[0]
    assert "INSERT INTO tournaments.participants" in args[0]
    assert args[1:3] == (tid, uid)


@pytest.mark.asyncio
async def test_tournament_repo_close(mock_pool):
    pool, conn = mock_pool
    repo = TournamentRepositoryDB(pool)

    tid, a, b = uuid4(), uuid4(), uuid4()
    conn.fetchrow.return_value = _tournament_row(tid, status="active")
    conn.fetch.side_effect = [[], [_entry_row(a, 68), _entry_row(b, 70)]]

    closed, winners = await repo.close(str(tid))

    assert closed.status == TournamentStatus.COMPLETED
    assert winners.first.user_id == str(a)
    assert winners.second.user_id == str(b)
    assert winners.third is None
    args = conn.execute.call_args[0]
    assert args[1:] == (tid, "completed")


@pytest.mark.asyncio
async def test_tournament_repo_close_twice(mock_pool):
    pool, conn = mock_pool
    repo = TournamentRepositoryDB(pool)

    tid = uuid4()
    conn.fetchrow.return_value = _tournament_row(tid, status="completed")
    conn.fetch.side_effect = [[], []]

    with pytest.raises(ConflictError, match="already completed"):
        await repo.close(str(tid))
    conn.execute.assert_not_called()


@pytest.mark.asyncio
async def test_tournament_repo_unregister_when_not_registered(mock_pool):
    pool, conn = mock_pool
    repo = TournamentRepositoryDB(pool)

    tid, uid = uuid4(), uuid4()
    conn.fetchrow.return_value = _tournament_row(tid)
    conn.fetch.side_effect = [[], []]
    conn.execute.return_value = "DELETE 0"

    assert await repo.unregister(str(tid), str(uid)) is None

    assert "FOR UPDATE" in conn.fetchrow.call_args[0][0]
    sql, *args = conn.execute.call_args[0]
    assert "DELETE FROM tournaments.participants" in sql
    assert args == [tid, uid]


@pytest.mark.asyncio
async def test_tournament_repo_unregister_missing_tournament(mock_pool):
    pool, conn = mock_pool
    repo = TournamentRepositoryDB(pool)
    conn.fetchrow.return_value = None

    with pytest.raises(NotFoundError):
        await repo.unregister(str(uuid4()), str(uuid4()))
    conn.execute.assert_not_called()


@pytest.mark.asyncio
async def test_tournament_repo_activate(mock_pool):
    pool, conn = mock_pool
    repo = TournamentRepositoryDB(pool)

    tid = uuid4()
    conn.fetchrow.return_value = _tournament_row(tid)
    conn.fetch.side_effect = [[], []]

    active = await repo.activate(str(tid))

    assert active.status == TournamentStatus.ACTIVE
    args = conn.execute.call_args[0]
    assert args[1:] == (tid, "active")


@pytest.mark.asyncio
async def test_tournament_repo_activate_not_upcoming(mock_pool):
    pool, conn = mock_pool
    repo = TournamentRepositoryDB(pool)

    tid = uuid4()
    conn.fetchrow.return_value = _tournament_row(tid, status="active")
    conn.fetch.side_effect = [[], []]

    with pytest.raises(ConflictError):
        await repo.activate(str(tid))
    conn.execute.assert_not_called()


@pytest.mark.asyncio
async def test_tournament_repo_update_details(mock_pool):
    pool, conn = mock_pool
    repo = TournamentRepositoryDB(pool)

    tid, course_id = uuid4(), uuid4()
    renamed = dict(_tournament_row(tid), name="Spring Open", course_id=course_id)
    conn.fetchrow.side_effect = [_tournament_row(tid), renamed]
    conn.fetch.side_effect = [[], [], [], []]

    details = TournamentDetails(
        name="Spring Open",
        course_id=str(course_id),
        start_date=START - timedelta(days=30),   # editing does not require a future start
        end_date=START,
        format="scramble",
        max_participants=40,
    )
    updated = await repo.update_details(str(tid), details)

    assert updated.name == "Spring Open"
    sql, *args = conn.execute.call_args[0]
    assert "UPDATE tournaments.tournaments" in sql
    assert args[:4] == [tid, "Spring Open", None, course_id]
    assert args[6:8] == ["scramble", 40]
