"""Manages per-group game sessions and their phase timers."""

import asyncio
import logging
import random
import weakref
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, Dict, List, Optional

import config
from data.words import get_random_word
from game import notices, tally
from game.messenger import Member, Messenger
from game.notices import GameResults, RoleCard
from game.polls import build_accusation_poll, build_duration_poll
from game.session import GameSession, Outcome, Phase, SessionStatus

logger = logging.getLogger(__name__)

DeadlineHandler = Callable[[GameSession], Awaitable[None]]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class GameTimings:
    """Phase timer lengths, in seconds."""
    duration_vote: float = config.DURATION_VOTE_TIMEOUT
    player_vote: float = config.PLAYER_VOTE_TIMEOUT
    reset_grace: float = config.RESET_GRACE_PERIOD
    role_handoff: float = config.ROLE_ASSIGN_DELAY
    speaker_reveal: float = config.SPEAKER_REVEAL_DELAY
    seconds_per_minute: float = config.SECONDS_PER_MINUTE


class SessionManager:
    """
    Runs one imposter game per group.

    Every group has its own lock and at most one armed deadline task. Inbound
    events and deadline bodies for a group run under that group's lock, so a
    vote and a deadline for the same group never interleave. Groups never
    share a lock.
    """

    def __init__(
        self,
        messenger: Messenger,
        resolver,
        rng: Optional[random.Random] = None,
        timings: Optional[GameTimings] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.messenger = messenger
        self.resolver = resolver
        self.rng = rng or random.Random()
        self.timings = timings or GameTimings()
        self._clock = clock or _utcnow

        # group_id -> session
        self._sessions: Dict[str, GameSession] = {}
        # group_id -> lock serializing that group's events; dropped once unused
        self._locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()
        # group_id -> armed deadline
        self._timers: Dict[str, asyncio.Task] = {}

    # Session store

    def _get_session(self, group_id: str) -> GameSession:
        session = self._sessions.get(group_id)
        if session is None:
            session = tally.create_session(group_id)
            self._sessions[group_id] = session
        return session

    def _lock(self, group_id: str) -> asyncio.Lock:
        lock = self._locks.get(group_id)
        if lock is None:
            lock = self._locks[group_id] = asyncio.Lock()
        return lock

    def _reset(self, session: GameSession) -> None:
        """Cancel the deadline and forget the game. Idle groups keep no session."""
        self._cancel_deadline(session.group_id)
        tally.reset_session(session)
        if self._sessions.get(session.group_id) is session:
            del self._sessions[session.group_id]

    def get_session(self, group_id: str) -> Optional[GameSession]:
        """Get a group's session. Idle groups have none."""
        return self._sessions.get(group_id)

    def get_status(self, group_id: str) -> SessionStatus:
        """Snapshot of a group's game. Never creates or changes a session."""
        session = self._sessions.get(group_id)
        if session is None:
            return SessionStatus(group_id=group_id, phase=Phase.IDLE)
        return tally.describe_status(session, self._clock())

    def has_deadline(self, group_id: str) -> bool:
        """Check whether a phase timer is armed for a group."""
        return group_id in self._timers

    # Inbound events

    async def start_game(
        self,
        group_id: str,
        members: Optional[List[Member]] = None,
    ) -> Outcome:
        """Open duration voting for a new game."""
        async with self._lock(group_id):
            session = self._get_session(group_id)

            if tally.is_active(session):
                await self._notify(group_id, notices.ALREADY_IN_PROGRESS)
                return Outcome.ALREADY_IN_PROGRESS

            if members is None:
                try:
                    members = await self.messenger.get_members(group_id)
                except Exception as e:
                    logger.warning("Failed to list members of %s: %s", group_id, e)
                    members = []

            if len(members) < config.MIN_PLAYERS:
                self._reset(session)
                await self._notify(group_id, notices.not_enough_players())
                return Outcome.NOT_ENOUGH_PLAYERS

            self._cancel_deadline(group_id)
            tally.reset_session(session)
            session.phase = Phase.VOTING_DURATION
            logger.info("Game starting in %s with %d members", group_id, len(members))

            await self._notify(group_id, notices.GAME_STARTING)
            await self._notify(group_id, build_duration_poll(self._clock()))

            self._arm_deadline(group_id, self.timings.duration_vote, self._close_duration_vote)
            return Outcome.STARTED

    async def record_duration_vote(self, group_id: str, voter_id: str, duration: int) -> bool:
        """Record a discussion-length vote. Ignored outside duration voting."""
        async with self._lock(group_id):
            session = self._sessions.get(group_id)
            if session is None or session.phase != Phase.VOTING_DURATION:
                return False

            recorded = tally.record_duration_vote(session, voter_id, duration)
            if recorded:
                logger.info("Duration vote in %s: %s minutes from %s", group_id, duration, voter_id)
            return recorded

    async def assign_roles(
        self,
        group_id: str,
        members: Optional[List[Member]] = None,
    ) -> bool:
        """
        Assign roles for a game whose duration is settled but has no players yet.

        Runs automatically once the duration vote closes. Calling it first with a
        members snapshot assigns roles from that snapshot instead of refetching.
        """
        async with self._lock(group_id):
            session = self._sessions.get(group_id)
            if session is None or session.phase != Phase.ASSIGNING_ROLES or session.players:
                return False
            return await self._assign_roles(session, members)

    async def record_player_vote(self, group_id: str, voter_id: str, votee_id: str) -> bool:
        """Record an accusation. Ignored outside the voting phase."""
        async with self._lock(group_id):
            session = self._sessions.get(group_id)
            if session is None or session.phase != Phase.VOTING:
                return False

            tally.record_vote(session, voter_id, votee_id)
            logger.info("Vote in %s: %s voted for %s", group_id, voter_id, votee_id)
            return True

    async def finalize_voting(self, group_id: str) -> None:
        """Close accusation voting now instead of waiting for the timer."""
        async with self._lock(group_id):
            session = self._sessions.get(group_id)
            if session is not None:
                await self._close_voting(session)

    async def cancel_game(self, group_id: str) -> Outcome:
        """Stop a running game and return the group to idle."""
        async with self._lock(group_id):
            session = self._sessions.get(group_id)
            if session is None or not tally.is_active(session):
                await self._notify(group_id, notices.NOTHING_TO_CANCEL)
                return Outcome.NOTHING_TO_CANCEL

            self._reset(session)
            logger.info("Game cancelled in %s", group_id)
            await self._notify(group_id, notices.GAME_CANCELLED)
            return Outcome.CANCELLED

    def shutdown(self) -> None:
        """Cancel every armed timer."""
        for task in self._timers.values():
            task.cancel()
        self._timers.clear()
        logger.info("Session manager shut down, all timers cleared")

    # Phase transitions (called with the group lock held)

    async def _close_duration_vote(self, session: GameSession) -> None:
        if session.phase != Phase.VOTING_DURATION:
            return

        winning_duration = tally.calculate_winning_duration(session)
        if winning_duration is None:
            logger.info("No duration votes in %s, aborting", session.group_id)
            self._reset(session)
            await self._notify(session.group_id, notices.NO_DURATION_VOTES)
            return

        session.selected_duration = winning_duration
        session.phase = Phase.ASSIGNING_ROLES
        await self._notify(session.group_id, notices.duration_selected(winning_duration))

        self._arm_deadline(session.group_id, self.timings.role_handoff, self._hand_off_roles)

    async def _hand_off_roles(self, session: GameSession) -> None:
        # assign_roles() may already have run with a members snapshot
        if session.phase == Phase.ASSIGNING_ROLES and not session.players:
            await self._assign_roles(session)

    async def _assign_roles(
        self,
        session: GameSession,
        members: Optional[List[Member]] = None,
    ) -> bool:
        group_id = session.group_id
        if members is None:
            members = await self.messenger.get_members(group_id)

        self_id = self.messenger.self_id
        eligible = {m.id: m for m in members if m.id != self_id}

        if len(eligible) < config.MIN_PLAYERS:
            self._reset(session)
            await self._notify(group_id, notices.not_enough_players(at_start=False))
            return False

        for member in eligible.values():
            tally.add_player(session, member.id, member.handle)

        impostor_id = tally.choose_impostor(session, self.rng)
        session.secret_word = get_random_word(self.rng)
        logger.info("Impostor selected in %s: %s", group_id, impostor_id)
        logger.debug("Secret word in %s: %s", group_id, session.secret_word)

        delivered = 0
        for player in session.players.values():
            card = RoleCard(
                is_impostor=player.is_impostor,
                secret_word=None if player.is_impostor else session.secret_word,
            )
            if await self._deliver_role(player.id, card):
                delivered += 1

        if delivered == 0:
            self._reset(session)
            await self._notify(group_id, notices.NO_ROLES_DELIVERED)
            return False

        await self._notify(group_id, notices.roles_assigned(delivered, len(session.players)))

        self._arm_deadline(group_id, self.timings.speaker_reveal, self._begin_discussion)
        return True

    async def _begin_discussion(self, session: GameSession) -> None:
        if session.phase != Phase.ASSIGNING_ROLES:
            return

        # First speaker has no gameplay effect
        speaker = tally.choose_speaker(session, self.rng)
        speaker_name = await self.resolver.resolve(speaker.handle)

        now = self._clock()
        seconds = session.selected_duration * self.timings.seconds_per_minute
        session.phase = Phase.DISCUSSION
        session.started_at = now
        session.discussion_deadline = now + timedelta(seconds=seconds)

        await self._notify(
            session.group_id,
            notices.speaker_selected(speaker_name, session.selected_duration),
        )
        logger.info("Discussion started in %s for %s minutes", session.group_id, session.selected_duration)

        self._arm_deadline(session.group_id, seconds, self._end_discussion)

    async def _end_discussion(self, session: GameSession) -> None:
        if session.phase != Phase.DISCUSSION:
            return

        await self._notify(session.group_id, notices.TIME_UP)

        now = self._clock()
        session.phase = Phase.VOTING
        session.voting_started_at = now

        players = list(session.players.values())
        names = await self.resolver.resolve_many(p.handle for p in players)
        await self._notify(session.group_id, build_accusation_poll(players, names, now))
        logger.info("Voting started in %s", session.group_id)

        self._arm_deadline(session.group_id, self.timings.player_vote, self._close_voting)

    async def _close_voting(self, session: GameSession) -> None:
        if session.phase != Phase.VOTING:
            return

        group_id = session.group_id
        result = tally.calculate_vote_results(session)
        if result is None:
            self._reset(session)
            await self._notify(group_id, notices.NO_ACCUSATION_VOTES)
            return

        voted_out = session.players.get(result.voted_out_id)
        if voted_out is None:
            logger.warning("Most voted id %s in %s is not a player", result.voted_out_id, group_id)
            self._reset(session)
            await self._notify(group_id, notices.VOTE_PROCESSING_FAILED)
            return

        winner = tally.determine_winner(session, voted_out.id)
        session.voted_out_id = voted_out.id
        session.winner = winner

        names = await self.resolver.resolve_many(p.handle for p in session.players.values())

        def name_of(player_id: str) -> str:
            player = session.players.get(player_id)
            if player is None:
                return player_id
            return names.get(player.handle, player.handle)

        results = GameResults(
            voted_out_name=name_of(voted_out.id),
            vote_count=result.vote_count,
            correct_guess=voted_out.is_impostor,
            impostor_name=name_of(session.impostor_id),
            secret_word=session.secret_word,
            winner=winner,
            breakdown=[(name_of(voter), name_of(votee)) for voter, votee in session.votes.items()],
        )

        session.phase = Phase.ENDED
        session.ended_at = self._clock()
        logger.info("Game ended in %s, winner: %s", group_id, winner.value)
        await self._notify(group_id, results)

        # Keep ENDED visible to status queries for a moment
        self._arm_deadline(group_id, self.timings.reset_grace, self._reset_after_game)

    async def _reset_after_game(self, session: GameSession) -> None:
        if session.phase == Phase.ENDED:
            self._reset(session)
            logger.info("Game state reset for %s", session.group_id)

    # Deadlines

    def _arm_deadline(self, group_id: str, delay: float, handler: DeadlineHandler) -> None:
        self._cancel_deadline(group_id)
        self._timers[group_id] = asyncio.create_task(
            self._run_deadline(group_id, delay, handler)
        )

    def _cancel_deadline(self, group_id: str) -> bool:
        task = self._timers.pop(group_id, None)
        if task is None:
            return False
        task.cancel()
        return True

    async def _run_deadline(self, group_id: str, delay: float, handler: DeadlineHandler) -> None:
        # Cancellation lands in the sleep or the lock wait, never in the handler
        await asyncio.sleep(delay)
        async with self._lock(group_id):
            if self._timers.get(group_id) is not asyncio.current_task():
                return
            del self._timers[group_id]

            session = self._get_session(group_id)
            try:
                await handler(session)
            except Exception:
                logger.exception("Phase timer failed in %s, resetting game", group_id)
                self._reset(session)
                await self._notify(group_id, notices.GAME_ABORTED)

    # Delivery

    async def _notify(self, group_id: str, payload) -> bool:
        try:
            sent = await self.messenger.send_group(group_id, payload)
        except Exception as e:
            logger.warning("Failed to send to group %s: %s", group_id, e)
            return False

        if not sent:
            logger.warning("Message to group %s was not delivered", group_id)
        return sent

    async def _deliver_role(self, player_id: str, card: RoleCard) -> bool:
        try:
            sent = await self.messenger.send_private(player_id, card)
        except Exception as e:
            logger.warning("Failed to DM player %s: %s", player_id, e)
            return False

        if not sent:
            logger.warning("Role for player %s was not delivered", player_id)
        return sent
