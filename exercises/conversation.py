"""Turn-based conversations: speaking practice and open chat.

A learner turn is appended as soon as it is submitted. Feedback, when the
surface gives any, is attached to that same turn by index, and the assistant
reply is appended after a short delay. The transcript only ever grows.
"""

import asyncio
import logging
import random
from abc import ABC, abstractmethod

from content import prompts, schemas
from content.decoding import decode_speaking_feedback
from errors import (
    GenerationDecodeError,
    GenerationError,
    SurfaceBusyError,
)
from exercises.validators import reject_blank
from models import (
    ConversationSurface,
    ConversationTurn,
    SpeakingFeedback,
    SurfaceKind,
    TurnRole,
)
from session import SessionContext

logger = logging.getLogger(__name__)

FILLER_REPLY = "That's interesting! Could you tell me more?"
APOLOGY_REPLY = "Sorry, I had a little trouble understanding. Can you say that again?"


class ConversationOrchestrator(ABC):
    """Abstract base class for conversation surfaces."""

    kind: SurfaceKind

    def __init__(self, context: SessionContext):
        self.context = context

    @property
    @abstractmethod
    def state(self) -> ConversationSurface:
        ...

    @abstractmethod
    async def _opening_turn(self) -> ConversationTurn:
        """Produce the first assistant turn of a new conversation."""
        ...

    @abstractmethod
    async def _respond(
        self, history: list[ConversationTurn], text: str
    ) -> tuple[SpeakingFeedback | None, str]:
        """Produce feedback on the learner turn and the assistant's reply.

        Raises:
            GenerationError: If no usable reply could be produced.
        """
        ...

    @property
    def turns(self) -> list[ConversationTurn]:
        return self.state.turns

    async def enter(self) -> None:
        """Activate the surface, opening a conversation if none exists."""
        self.context.activate(self.kind)
        if not self.state.turns and not self.state.busy:
            await self.start()

    async def start(self) -> None:
        """Discard the transcript and open a new conversation."""
        state = self.state
        if state.busy:
            raise SurfaceBusyError(f"{self.kind.value} is waiting for a reply")
        state.turns = []
        state.error = ""
        state.busy = True
        try:
            turn = await self._opening_turn()
        finally:
            state.busy = False
        state.turns.append(turn)
        self.context.persist()

    async def submit(self, text: str) -> ConversationTurn:
        """Send a learner turn and wait for the assistant's reply.

        Returns:
            The assistant turn that was appended.

        Raises:
            ValidationInputRejected: If the text is blank.
            SurfaceBusyError: If a reply is still pending.
        """
        reject_blank(text)
        state = self.state
        if state.busy:
            raise SurfaceBusyError(f"{self.kind.value} is waiting for a reply")

        history = list(state.turns)
        state.turns.append(ConversationTurn(role=TurnRole.USER, text=text.strip()))
        user_index = len(state.turns) - 1
        state.busy = True
        state.error = ""
        self.context.persist()

        try:
            try:
                feedback, reply = await self._respond(history, text.strip())
            except GenerationDecodeError as e:
                logger.warning("%s: unusable reply: %s", self.kind.value, e)
                reply = FILLER_REPLY
            except GenerationError as e:
                logger.warning("%s: reply failed: %s", self.kind.value, e)
                reply = APOLOGY_REPLY
            else:
                if feedback is not None:
                    state.turns[user_index].feedback = feedback
                    self.context.persist()
                await asyncio.sleep(self.context.reply_delay)

            assistant = ConversationTurn(role=TurnRole.ASSISTANT, text=reply)
            state.turns.append(assistant)
        finally:
            state.busy = False
            self.context.persist()
        return assistant


class SpeakingPractice(ConversationOrchestrator):
    """Role-play with pronunciation, fluency and grammar feedback per turn."""

    kind = SurfaceKind.SPEAKING
    start_error = "Could not start speaking practice. Please try again."
    fallback_opening = "Hello! Let's practice speaking. Tell me about your day."

    def __init__(self, context: SessionContext, rng: random.Random | None = None):
        super().__init__(context)
        self.rng = rng or random.Random()

    @property
    def state(self) -> ConversationSurface:
        return self.context.record.speaking

    async def _opening_turn(self) -> ConversationTurn:
        scenario = self.rng.choice(prompts.SPEAKING_SCENARIOS)
        generation = await self.context.generator.generate(
            prompts.speaking_opening_prompt(self.context.settings, scenario)
        )
        try:
            text = generation.unwrap()
        except GenerationError as e:
            logger.warning("Could not open speaking practice: %s", e)
            self.state.error = self.start_error
            text = self.fallback_opening
        return ConversationTurn(role=TurnRole.ASSISTANT, text=text)

    async def _respond(
        self, history: list[ConversationTurn], text: str
    ) -> tuple[SpeakingFeedback | None, str]:
        settings = self.context.settings
        generation = await self.context.generator.generate(
            prompts.speaking_feedback_prompt(settings, history, text),
            schema=schemas.SPEAKING_FEEDBACK,
            system_instruction=prompts.persona_instruction(settings),
        )
        return decode_speaking_feedback(generation.unwrap())


class OpenChat(ConversationOrchestrator):
    """Free conversation with the tutor persona. No per-turn feedback."""

    kind = SurfaceKind.CHAT
    greeting = "Hello! What would you like to talk about today?"

    @property
    def state(self) -> ConversationSurface:
        return self.context.record.chat

    async def _opening_turn(self) -> ConversationTurn:
        return ConversationTurn(role=TurnRole.ASSISTANT, text=self.greeting)

    async def _respond(
        self, history: list[ConversationTurn], text: str
    ) -> tuple[SpeakingFeedback | None, str]:
        transcript = history + [ConversationTurn(role=TurnRole.USER, text=text)]
        generation = await self.context.generator.reply(
            transcript, system_instruction=prompts.chat_instruction(self.context.settings)
        )
        return None, generation.unwrap()
