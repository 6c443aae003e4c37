"""Upgrade stored session records to the current shape.

Records are upgraded in memory on load. The upgraded record is written back
the next time the session saves.
"""

import logging
from typing import Any, Callable

from models import (
    CURRENT_SCHEMA_VERSION,
    ExamPhase,
    ExercisePhase,
    SessionRecord,
)

logger = logging.getLogger(__name__)

_LEGACY_ROLES = {"ai": "assistant", "model": "assistant"}
_LEGACY_EXAM_PHASES = {"in-progress": ExamPhase.IN_PROGRESS.value}


def _upgrade_v1(raw: dict[str, Any]) -> dict[str, Any]:
    """Version 1 used the model's role names and hyphenated exam phases."""
    for surface in ("speaking", "chat"):
        turns = (raw.get(surface) or {}).get("turns") or []
        for turn in turns:
            if isinstance(turn, dict) and turn.get("role") in _LEGACY_ROLES:
                turn["role"] = _LEGACY_ROLES[turn["role"]]

    exam = raw.get("exam")
    if isinstance(exam, dict) and exam.get("phase") in _LEGACY_EXAM_PHASES:
        exam["phase"] = _LEGACY_EXAM_PHASES[exam["phase"]]
    return raw


_UPGRADES: dict[int, Callable[[dict[str, Any]], dict[str, Any]]] = {
    1: _upgrade_v1,
}


def upgrade_record(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply every upgrade step between the stored and current version.

    Args:
        raw: The decoded JSON object as stored.

    Returns:
        The same object brought up to CURRENT_SCHEMA_VERSION.
    """
    version = raw.get("schema_version", 1)
    while version < CURRENT_SCHEMA_VERSION:
        step = _UPGRADES.get(version)
        if step is not None:
            logger.info("Upgrading session record from version %d", version)
            raw = step(raw)
        version += 1
    raw["schema_version"] = CURRENT_SCHEMA_VERSION
    return raw


def recover_interrupted(record: SessionRecord) -> SessionRecord:
    """Settle surfaces that were saved with a request in flight.

    A request never survives a restart, so a surface caught mid-generation
    goes back to idle (or ready, if it still has a task), one caught while
    grading goes back to ready with its answer, and an exam caught while
    grading returns to its last question.
    """
    for surface in (
        record.story,
        record.translation,
        record.writing,
        record.sentence_builder,
        record.grammar,
        record.idiom,
    ):
        if surface.phase == ExercisePhase.GENERATING:
            surface.phase = ExercisePhase.READY if surface.task else ExercisePhase.IDLE
        elif surface.phase == ExercisePhase.SUBMITTED:
            surface.phase = ExercisePhase.READY

    exam = record.exam
    if exam.busy:
        exam.busy = False
        if exam.phase == ExamPhase.RESULTS and exam.result is None:
            if exam.questions:
                exam.phase = ExamPhase.IN_PROGRESS
                exam.current_index = len(exam.questions) - 1
                last_id = exam.questions[-1].id
                exam.current_answer = next(
                    (a.value for a in exam.answers if a.question_id == last_id), ""
                )
            else:
                exam.phase = ExamPhase.SETUP

    for conversation in (record.speaking, record.chat):
        conversation.busy = False
    record.language_tools.busy = False
    record.learning_path.busy = False
    return record
