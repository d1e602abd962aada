#!/usr/bin/env python3
"""HTTP API for playing Golf from a browser.

Each browser gets its own game through a session cookie. All game actions go
through the engine; a rejected action answers 409 with the rejection reason
as the detail, malformed payloads answer 422.

Run:
    python playground/web_server.py
    GOLF_HOST=127.0.0.1 GOLF_PORT=9000 python playground/web_server.py
"""

import logging
import os
import threading
import time
import uuid
from typing import Optional

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel, Field

from golf_cards.engine import (
    ActionResult,
    DEFAULT_ROUNDS,
    DrawSource,
    GameConfig,
    GameEngine,
    GamePhase,
)
from golf_cards.moves import (
    apply_action,
    build_observation,
    describe_action,
    get_action_mask,
    legal_actions,
)
from golf_cards.agents import HeuristicAgent


logger = logging.getLogger(__name__)

SESSION_COOKIE = "golf_session"
SESSION_TTL_SECONDS = int(os.getenv("GOLF_SESSION_TTL", "3600"))
SESSION_CLEANUP_INTERVAL = 60
COOKIE_SECURE = os.getenv("GOLF_COOKIE_SECURE", "0") == "1"

app = FastAPI(title="Golf")


class GameSession:
    """One browser's game plus the agent used for /api/agent_move."""

    def __init__(self, config: Optional[GameConfig] = None):
        self.lock = threading.Lock()
        self.engine = GameEngine(config)
        self.agent = HeuristicAgent(seed=None if config is None else config.seed)
        self.last_access = time.time()

    def touch(self) -> None:
        self.last_access = time.time()

    def get_frontend_state(self) -> dict:
        state = self.engine.snapshot()
        state["legal_actions"] = legal_actions(self.engine)
        return state


sessions: dict[str, GameSession] = {}
sessions_lock = threading.Lock()
_last_cleanup = 0.0


def _prune_sessions(now: float, keep_sid: Optional[str] = None) -> None:
    global _last_cleanup
    if SESSION_TTL_SECONDS <= 0:
        return
    if now - _last_cleanup < SESSION_CLEANUP_INTERVAL:
        return
    _last_cleanup = now
    expired = [
        sid
        for sid, sess in sessions.items()
        if sid != keep_sid and now - sess.last_access > SESSION_TTL_SECONDS
    ]
    for sid in expired:
        del sessions[sid]
    if expired:
        logger.info("Pruned %d idle sessions", len(expired))


def _get_session(request: Request) -> GameSession:
    sid = request.state.session_id
    with sessions_lock:
        return sessions[sid]


def _check(result: ActionResult) -> None:
    """Turn an engine rejection into a 409 response."""
    if not result:
        raise HTTPException(status_code=409, detail=result.reason.value)


@app.middleware("http")
async def session_middleware(request: Request, call_next):
    sid = request.cookies.get(SESSION_COOKIE)
    new = False
    now = time.time()
    with sessions_lock:
        if not sid or sid not in sessions:
            sid = uuid.uuid4().hex
            sessions[sid] = GameSession()
            new = True
        sessions[sid].touch()
        _prune_sessions(now, keep_sid=sid)
    request.state.session_id = sid
    response = await call_next(request)
    if new:
        max_age = SESSION_TTL_SECONDS if SESSION_TTL_SECONDS > 0 else None
        response.set_cookie(
            SESSION_COOKIE,
            sid,
            httponly=True,
            samesite="lax",
            secure=COOKIE_SECURE,
            max_age=max_age,
        )
    return response


class StartRequest(BaseModel):
    name1: str = ""
    name2: str = ""
    rounds: int = Field(DEFAULT_ROUNDS, ge=1)
    include_jokers: bool = True
    seed: Optional[int] = None


class SlotRequest(BaseModel):
    player: int = Field(..., ge=1, le=2)
    slot: int = Field(..., ge=0, le=5)


class DrawRequest(BaseModel):
    source: DrawSource


@app.get("/api/state")
def api_state(request: Request):
    session = _get_session(request)
    with session.lock:
        return session.get_frontend_state()


@app.post("/api/start")
def api_start(req: StartRequest, request: Request):
    config = GameConfig(rounds=req.rounds, include_jokers=req.include_jokers, seed=req.seed)
    session = GameSession(config)
    session.engine.start_game(req.name1, req.name2)
    with sessions_lock:
        sessions[request.state.session_id] = session
    with session.lock:
        return session.get_frontend_state()


@app.post("/api/flip")
def api_flip(req: SlotRequest, request: Request):
    session = _get_session(request)
    with session.lock:
        engine = session.engine
        if engine.phase == GamePhase.SETUP_FLIPS:
            _check(engine.flip_during_setup(req.player, req.slot))
        else:
            _check(engine.flip_during_turn(req.player, req.slot))
        return session.get_frontend_state()


@app.post("/api/draw")
def api_draw(req: DrawRequest, request: Request):
    session = _get_session(request)
    with session.lock:
        _check(session.engine.draw(req.source))
        return session.get_frontend_state()


@app.post("/api/replace")
def api_replace(req: SlotRequest, request: Request):
    session = _get_session(request)
    with session.lock:
        _check(session.engine.replace(req.player, req.slot))
        return session.get_frontend_state()


@app.post("/api/discard")
def api_discard(request: Request):
    session = _get_session(request)
    with session.lock:
        _check(session.engine.discard_held())
        return session.get_frontend_state()


@app.post("/api/finish-round")
def api_finish_round(request: Request):
    session = _get_session(request)
    with session.lock:
        _check(session.engine.finish_round())
        return session.get_frontend_state()


@app.post("/api/next-round")
def api_next_round(request: Request):
    session = _get_session(request)
    with session.lock:
        _check(session.engine.start_next_round())
        return session.get_frontend_state()


@app.post("/api/agent_move")
def api_agent_move(request: Request):
    """Let the heuristic agent take one action for the player to move."""
    session = _get_session(request)
    with session.lock:
        engine = session.engine
        mask = get_action_mask(engine)
        if not mask.any():
            raise HTTPException(status_code=409, detail="no_legal_action")
        action = session.agent.act(build_observation(engine), mask)
        _check(apply_action(engine, action))
        state = session.get_frontend_state()
        state["agent_action"] = describe_action(action)
        return state


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    try:
        host = os.getenv("GOLF_HOST", "0.0.0.0")
        port = int(os.getenv("GOLF_PORT", "8000"))
        print(f"Starting server at http://{host}:{port}")
        uvicorn.run(app, host=host, port=port)
    except KeyboardInterrupt:
        pass
