import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, NamedTuple, Optional

from aiogram.fsm.storage.base import BaseEventIsolation, BaseStorage, StorageKey
from aiogram.fsm.storage.memory import MemoryStorage, SimpleEventIsolation

from chemquiz.states import (
    AwaitingAnswer,
    NoSession,
    PracticeState,
    SessionPhase,
    SessionState,
)

SESSION_DATA_KEY = "practice"


class SessionKey(NamedTuple):
    """Identifies a session: one user in one chat."""

    user_id: int
    chat_id: int


class SessionBusyError(Exception):
    """Raised when a session already exists for the key."""

    def __init__(self, key: SessionKey) -> None:
        super().__init__(f"Session already in progress for {key}")
        self.key = key


class SessionStore:
    """
    Live practice sessions kept in aiogram FSM storage.

    A session is the ``PracticeState.awaiting_answer`` state of the
    user-in-chat storage key plus its progress in the FSM data, so the
    dispatcher's ``StateFilter`` and this store read the same record.
    ``isolation`` is handed to the aiogram ``Dispatcher`` as well: handlers
    run inside ``lock(key)``, and code outside a handler (the timeout
    watchdog) takes the same lock before touching a session.
    """

    def __init__(
        self,
        bot_id: int = 0,
        storage: Optional[BaseStorage] = None,
        isolation: Optional[BaseEventIsolation] = None,
    ) -> None:
        self.bot_id = bot_id
        self.storage = storage or MemoryStorage()
        self.isolation = isolation or SimpleEventIsolation()

    def storage_key(self, key: SessionKey) -> StorageKey:
        return StorageKey(bot_id=self.bot_id, chat_id=key.chat_id, user_id=key.user_id)

    async def has(self, key: SessionKey) -> bool:
        state = await self.storage.get_state(self.storage_key(key))
        return state == PracticeState.awaiting_answer.state

    async def get(self, key: SessionKey) -> Optional[SessionState]:
        if not await self.has(key):
            return None
        data = (await self.storage.get_data(self.storage_key(key))).get(SESSION_DATA_KEY)
        if data is None:
            return None
        return SessionState.from_data(data)

    async def lookup(self, key: SessionKey) -> SessionPhase:
        """Return the phase of the key as a tagged value."""
        state = await self.get(key)
        if state is None:
            return NoSession()
        return AwaitingAnswer(state)

    async def put(self, key: SessionKey, state: SessionState) -> None:
        """Register a new session; never overwrites a live one."""
        if await self.has(key):
            raise SessionBusyError(key)
        storage_key = self.storage_key(key)
        await self.storage.set_state(storage_key, PracticeState.awaiting_answer)
        await self.storage.set_data(storage_key, {SESSION_DATA_KEY: state.to_data()})
        logging.debug(f"Session stored for {key}")

    async def save(self, key: SessionKey, state: SessionState) -> None:
        """Write back the progress of the live session of ``key``."""
        await self.storage.update_data(
            self.storage_key(key), {SESSION_DATA_KEY: state.to_data()}
        )

    async def remove(self, key: SessionKey) -> Optional[SessionState]:
        state = await self.get(key)
        storage_key = self.storage_key(key)
        await self.storage.set_state(storage_key, None)
        await self.storage.set_data(storage_key, {})
        if state is not None:
            logging.debug(f"Session removed for {key}")
        return state

    @asynccontextmanager
    async def lock(self, key: SessionKey) -> AsyncIterator[None]:
        """Serialize work on a single key with the dispatcher's event isolation."""
        async with self.isolation.lock(self.storage_key(key)):
            yield

    async def close(self) -> None:
        await self.storage.close()
        await self.isolation.close()
