"""Reference content: vocabulary, dictionary, phrasal verbs, common phrases.

These are lookups rather than exercises, so there is nothing to answer. Each
fetch replaces the previous content for its tool; on failure the tool is left
empty with an error message.
"""

import logging
from typing import Any, Callable

from google.genai import types

from content import prompts, schemas
from content.decoding import (
    decode_common_phrase,
    decode_dictionary_entry,
    decode_phrasal_verb,
    decode_vocabulary_list,
    decode_word_of_the_day,
)
from errors import GenerationError, SurfaceBusyError, ValidationInputRejected
from models import (
    CommonPhrase,
    DictionaryEntry,
    LanguageTool,
    LanguageToolsSurface,
    PhrasalVerb,
    SurfaceKind,
    VocabularyEntry,
    WordOfTheDay,
)
from session import SessionContext

logger = logging.getLogger(__name__)

FETCH_ERROR = "An error occurred. Please try again."


class LanguageTools:
    """Drives the language tools surface of a session."""

    kind = SurfaceKind.LANGUAGE_TOOLS

    def __init__(self, context: SessionContext):
        self.context = context

    @property
    def state(self) -> LanguageToolsSurface:
        return self.context.record.language_tools

    async def enter(self) -> None:
        """Activate the surface, loading vocabulary the first time."""
        self.context.activate(self.kind)
        if (
            self.state.active_tool == LanguageTool.VOCABULARY
            and not self.state.vocabulary
            and not self.state.busy
        ):
            await self.refresh_vocabulary()

    def select_tool(self, tool: LanguageTool) -> None:
        self.state.active_tool = tool
        self.context.persist()

    async def refresh_vocabulary(self) -> list[VocabularyEntry]:
        """Fetch a fresh list of five words for the learner's level."""
        self._ensure_idle()
        self.state.vocabulary = []
        entries = await self._fetch(
            prompts.vocabulary_prompt(self.context.settings),
            schemas.VOCABULARY_LIST,
            decode_vocabulary_list,
        )
        self.state.vocabulary = entries or []
        self.context.persist()
        return self.state.vocabulary

    async def lookup(self, word: str) -> DictionaryEntry | None:
        """Look a word up in the dictionary.

        Raises:
            ValidationInputRejected: If the word is blank.
        """
        word = word.strip()
        if not word:
            raise ValidationInputRejected("Enter a word to look up.")
        self._ensure_idle()
        self.state.dictionary_query = word
        self.state.dictionary_entry = None
        self.state.dictionary_entry = await self._fetch(
            prompts.dictionary_prompt(word),
            schemas.DICTIONARY_ENTRY,
            decode_dictionary_entry,
        )
        self.context.persist()
        return self.state.dictionary_entry

    async def refresh_phrasal_verb(self) -> PhrasalVerb | None:
        self._ensure_idle()
        self.state.phrasal_verb = None
        self.state.phrasal_verb = await self._fetch(
            prompts.phrasal_verb_prompt(self.context.settings),
            schemas.PHRASAL_VERB,
            decode_phrasal_verb,
        )
        self.context.persist()
        return self.state.phrasal_verb

    async def refresh_common_phrase(self) -> CommonPhrase | None:
        self._ensure_idle()
        self.state.common_phrase = None
        self.state.common_phrase = await self._fetch(
            prompts.common_phrase_prompt(self.context.settings),
            schemas.COMMON_PHRASE,
            decode_common_phrase,
        )
        self.context.persist()
        return self.state.common_phrase

    def _ensure_idle(self) -> None:
        if self.state.busy:
            raise SurfaceBusyError("Language tools are already loading")

    async def _fetch(
        self, prompt: str, schema: types.Schema, decode: Callable[[Any], Any]
    ) -> Any:
        state = self.state
        state.busy = True
        state.error = ""
        try:
            generation = await self.context.generator.generate(prompt, schema=schema)
            return decode(generation.unwrap())
        except GenerationError as e:
            logger.warning("Language tool request failed: %s", e)
            state.error = FETCH_ERROR
            return None
        finally:
            state.busy = False


async def fetch_word_of_the_day(context: SessionContext) -> WordOfTheDay | None:
    """Generate the word of the day shown on the dashboard.

    Failure leaves the previous word (if any) in place.
    """
    generation = await context.generator.generate(
        prompts.word_of_the_day_prompt(), schema=schemas.WORD_OF_THE_DAY
    )
    try:
        word = decode_word_of_the_day(generation.unwrap())
    except GenerationError as e:
        logger.warning("Could not fetch the word of the day: %s", e)
        return None
    context.record.word_of_the_day = word
    context.persist()
    return word
