import asyncio
import logging
from typing import Awaitable, Callable, Optional

from chemquiz.services.session_store import SessionKey, SessionStore
from chemquiz.services.state_machine import QuizStateMachine, Reply
from chemquiz.services.stats import SessionSummary

DEFAULT_TIMEOUT_MS = 300_000

Notifier = Callable[[int, str], Awaitable[None]]
FinishHook = Callable[[SessionKey, SessionSummary], Awaitable[None]]


class QuizDispatcher:
    """
    Entry point used by the chat handlers.

    Resolves the session key and keeps one timeout watchdog per live
    session. The chat-facing methods expect the caller to hold
    ``store.lock(key)``; aiogram does that for handlers through the
    ``events_isolation`` shared with the store. The watchdog takes the same
    lock itself. The watchdog is re-armed on every message the session
    receives; when it fires the session ends with a timeout and ``notify``
    delivers the final text to the chat.
    """

    def __init__(
        self,
        machine: QuizStateMachine,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        notify: Optional[Notifier] = None,
        on_finish: Optional[FinishHook] = None,
    ) -> None:
        self.machine = machine
        self.timeout_ms = timeout_ms
        self.notify = notify
        self.on_finish = on_finish
        self._watchdogs: dict[SessionKey, asyncio.Task] = {}

    @property
    def store(self) -> SessionStore:
        return self.machine.store

    async def has_session(self, user_id: int, chat_id: int) -> bool:
        return await self.store.has(SessionKey(user_id, chat_id))

    async def start_quiz(self, user_id: int, chat_id: int) -> str:
        """Start a practice session and return the first question."""
        key = SessionKey(user_id, chat_id)
        busy = await self.store.has(key)
        reply = await self.machine.start(key)
        if not busy:
            await self._arm(key)
        return reply.text

    async def handle_message(
        self, user_id: int, chat_id: int, text: str
    ) -> Optional[str]:
        """Feed a chat message to the session; None means no session here."""
        key = SessionKey(user_id, chat_id)
        reply = await self.machine.handle_input(key, text)
        if reply is None:
            return None
        if reply.finished:
            self._disarm(key)
        else:
            await self._arm(key)
        await self._finished(key, reply)
        return reply.text

    async def expire(self, user_id: int, chat_id: int) -> Optional[str]:
        """End a session as timed out; None when it is already gone."""
        key = SessionKey(user_id, chat_id)
        reply = await self.machine.expire(key)
        self._disarm(key)
        if reply is None:
            return None
        await self._finished(key, reply)
        return reply.text

    async def shutdown(self) -> None:
        """Cancel all watchdogs; live sessions are dropped with the process."""
        tasks = list(self._watchdogs.values())
        self._watchdogs.clear()
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        logging.info(f"Quiz dispatcher stopped, {len(tasks)} sessions dropped")

    async def _arm(self, key: SessionKey) -> None:
        self._disarm(key)
        state = await self.store.get(key)
        if state is None:
            return
        self._watchdogs[key] = asyncio.create_task(
            self._watch(key, state.session_id),
            name=f"quiz-timeout-{key.user_id}-{key.chat_id}",
        )

    def _disarm(self, key: SessionKey) -> None:
        task = self._watchdogs.pop(key, None)
        if task is not None and task is not asyncio.current_task():
            task.cancel()

    async def _watch(self, key: SessionKey, session_id: str) -> None:
        await asyncio.sleep(self.timeout_ms / 1000)
        async with self.store.lock(key):
            # A newer session may have taken the key after this one ended
            state = await self.store.get(key)
            if state is None or state.session_id != session_id:
                return
            if self._watchdogs.get(key) is asyncio.current_task():
                del self._watchdogs[key]
            reply = await self.machine.expire(key)
        if reply is None:
            return
        logging.info(f"Timeout fired for {key}")
        await self._finished(key, reply)
        if self.notify is None:
            return
        try:
            await self.notify(key.chat_id, reply.text)
        except Exception as e:
            logging.warning(f"Failed to deliver timeout notice to {key}: {e}")

    async def _finished(self, key: SessionKey, reply: Reply) -> None:
        if reply.summary is None or self.on_finish is None:
            return
        try:
            await self.on_finish(key, reply.summary)
        except Exception as e:
            logging.warning(f"Failed to record result for {key}: {e}")
