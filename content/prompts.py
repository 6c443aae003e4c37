"""Prompt text for every generator call site."""

import json

from models import (
    ConversationTurn,
    Difficulty,
    ExamAnswer,
    ExamQuestion,
    ExamType,
    Persona,
    PlanFocus,
    Settings,
    SurfaceKind,
)

PERSONA_INSTRUCTIONS = {
    Persona.FRIENDLY: (
        "You are a friendly and encouraging English tutor. "
        "Your feedback is positive and gentle."
    ),
    Persona.FORMAL: (
        "You are a formal English examiner. "
        "Your feedback is precise, professional, and direct."
    ),
}

SPEAKING_SCENARIOS = [
    "ordering at a coffee shop",
    "asking for directions",
    "a simple check-in at a hotel",
    "buying a train ticket",
    "making a doctor's appointment",
]

FOCUS_DESCRIPTIONS = {
    PlanFocus.INTEGRAL: (
        "The plan should be balanced, covering various skills like reading, "
        "speaking, grammar, and vocabulary. The main objective for the week "
        "should be to improve overall English skills."
    ),
    PlanFocus.SPEAKING: (
        "The main objective for the week is to improve conversational fluency, "
        "pronunciation, and listening skills. Focus on speaking and "
        "conversation activities."
    ),
    PlanFocus.WRITING: (
        "The main objective for the week is to improve writing accuracy, "
        "grammar, and style. Focus on writing and grammar activities."
    ),
    PlanFocus.VOCABULARY: (
        "The main objective for the week is to expand vocabulary with new "
        "words, idioms, and phrases. Focus on vocabulary, reading, and idiom "
        "activities."
    ),
    PlanFocus.EXAM: (
        "The main objective for the week is to prepare for an exam by "
        "practicing relevant skills. Include a mix of activities and a final "
        "exam-style challenge."
    ),
}

SURFACE_NAMES = {
    SurfaceKind.DASHBOARD: "Dashboard",
    SurfaceKind.STORY: "Story Practice",
    SurfaceKind.SPEAKING: "Speaking Practice",
    SurfaceKind.CHAT: "AI Conversation",
    SurfaceKind.WRITING: "Writing Analysis",
    SurfaceKind.TRANSLATION: "Translation Practice",
    SurfaceKind.LANGUAGE_TOOLS: "Language Tools",
    SurfaceKind.SENTENCE_BUILDER: "Sentence Builder",
    SurfaceKind.GRAMMAR: "Grammar Gauntlet",
    SurfaceKind.IDIOM: "Idiom Quest",
    SurfaceKind.EXAM: "Exams",
    SurfaceKind.LEARNING_PATH: "Learning Path",
}


def level(difficulty: Difficulty) -> str:
    return difficulty.label


def persona_instruction(settings: Settings) -> str:
    return PERSONA_INSTRUCTIONS[settings.persona]


def chat_instruction(settings: Settings) -> str:
    return (
        persona_instruction(settings)
        + f" You are having a conversation with a {level(settings.difficulty)}"
        " level English learner."
    )


# ============================================================================
# Task generation
# ============================================================================


def word_of_the_day_prompt() -> str:
    return "Generate an interesting English word of the day appropriate for an intermediate learner."


def story_prompt(settings: Settings) -> str:
    return (
        "Generate a short story (3-4 paragraphs) and a comprehension question "
        f"about it for an English learner at the {level(settings.difficulty)} level."
    )


def translation_prompt(settings: Settings) -> str:
    return (
        "Provide a single, interesting English sentence to be translated into "
        f"{settings.translation_language}, appropriate for a "
        f"{level(settings.difficulty)} level learner. Just the sentence, no extra text."
    )


def sentence_prompt(settings: Settings) -> str:
    return (
        "Generate a single, grammatically correct English sentence appropriate "
        f"for a {level(settings.difficulty)} level learner. The sentence should "
        "be between 7 and 14 words long. The sentence must not contain complex "
        "punctuation like commas. Just provide the sentence as a single string."
    )


def grammar_prompt(settings: Settings) -> str:
    return (
        f"Generate a grammar challenge for a {level(settings.difficulty)} English "
        "learner. Create a single sentence with one common, clear grammatical "
        "error. Provide the incorrect sentence, the corrected version, and a "
        "simple explanation for the correction."
    )


def idiom_prompt(settings: Settings) -> str:
    return (
        f"Generate an idiom quest for a {level(settings.difficulty)} English "
        "learner. Create a sentence with a blank (___) where a common idiom "
        "should go. Provide the correct idiom, its meaning, and three plausible "
        "but incorrect meanings as distractors in a shuffled array. Also provide "
        "a simple explanation for the idiom."
    )


def vocabulary_prompt(settings: Settings) -> str:
    return (
        "Generate a list of 5 vocabulary words appropriate for a "
        f"{level(settings.difficulty)} English learner. For each word, provide "
        "a simple definition and an example sentence."
    )


def dictionary_prompt(word: str) -> str:
    return f'Provide a dictionary entry for the word "{word}".'


def phrasal_verb_prompt(settings: Settings) -> str:
    return (
        "Provide one common English phrasal verb, its definition, and an example "
        f"sentence. It should be suitable for a {level(settings.difficulty)} learner."
    )


def common_phrase_prompt(settings: Settings) -> str:
    return (
        "Provide one common English idiom or phrase, its meaning, and an example "
        f"sentence. It should be suitable for a {level(settings.difficulty)} learner."
    )


# ============================================================================
# Remote grading
# ============================================================================


def story_grading_prompt(settings: Settings, text: str, question: str, answer: str) -> str:
    return (
        f"A {level(settings.difficulty)} English learner was told the story: "
        f'"{text}". They were asked: "{question}". Their answer was: "{answer}". '
        "Decide whether the answer shows correct comprehension, and provide "
        "feedback on their comprehension and grammar."
    )


def translation_grading_prompt(settings: Settings, sentence: str, answer: str) -> str:
    return (
        f"A {level(settings.difficulty)} learner was asked to translate "
        f'"{sentence}" into {settings.translation_language}. Their translation '
        f'was "{answer}". Decide whether the translation is acceptable, and '
        "provide feedback on the translation's accuracy and grammar in simple English."
    )


def writing_analysis_prompt(settings: Settings, text: str) -> str:
    return (
        "Analyze the following English text written by a "
        f"{level(settings.difficulty)} level learner. Provide structured "
        f'feedback. \n\nText: "{text}"'
    )


# ============================================================================
# Conversation
# ============================================================================


def speaking_opening_prompt(settings: Settings, scenario: str) -> str:
    return (
        "You are an English tutor starting a role-playing conversation for a "
        f"{level(settings.difficulty)} learner. Start a common scenario: "
        f"{scenario}. Provide only the first line of the conversation as a "
        "single string. Be welcoming and clear."
    )


def speaking_feedback_prompt(
    settings: Settings, history: list[ConversationTurn], transcript: str
) -> str:
    context = "\n".join(f"{turn.role.value}: {turn.text}" for turn in history)
    return (
        f"An English learner at the {level(settings.difficulty)} level is in a "
        f"role-playing conversation. Here is the conversation so far:\n{context}\n"
        f'The user just responded with: "{transcript}"\n'
        "Please analyze their response. Provide structured feedback and your "
        "next line in the conversation according to the provided JSON schema."
    )


# ============================================================================
# Exams and learning plans
# ============================================================================


def exam_prompt(settings: Settings, exam_type: ExamType, question_count: int) -> str:
    return (
        f"Generate a {exam_type.value} exam with {question_count} questions for "
        f"an English learner at the {level(settings.difficulty)} level. For MCQ "
        "questions, provide 4 options. For writing, speaking, and listening, "
        "just provide the prompt/question text. Ensure question IDs are "
        "sequential starting from 1."
    )


def exam_grading_prompt(
    settings: Settings, questions: list[ExamQuestion], answers: list[ExamAnswer]
) -> str:
    question_data = [
        {"id": q.id, "type": q.kind.value, "text": q.text, "options": q.options}
        for q in questions
    ]
    answer_data = [{"questionId": a.question_id, "answer": a.value} for a in answers]
    return (
        f"An English learner at the {level(settings.difficulty)} level has "
        "completed an exam. Here are the questions and their answers. Please "
        "grade the exam and provide an overall score (out of 100), a summary, "
        "and feedback for each question.\n\n"
        f"Questions: {json.dumps(question_data)}\n"
        f"User Answers: {json.dumps(answer_data)}\n"
    )


def learning_plan_prompt(
    settings: Settings, focus: PlanFocus, activities: list[SurfaceKind]
) -> str:
    prompt = (
        "Generate a 7-day personalized learning plan for an English learner at "
        f"the {level(settings.difficulty)} level. {FOCUS_DESCRIPTIONS[focus]}"
    )
    if activities:
        names = ", ".join(SURFACE_NAMES[a] for a in activities)
        prompt += (
            "\nPlease prioritize including the following user-preferred "
            f"activities in the plan: {names}."
        )
    prompt += (
        "\nPlease provide 2-3 specific, actionable tasks for each day from "
        "Monday to Sunday. The tasks should correspond to activities available "
        "in the app. Ensure task IDs are unique. Return the output as a JSON "
        "object following the provided schema."
    )
    return prompt
