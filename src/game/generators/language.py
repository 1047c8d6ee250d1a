"""
Language learning domain.

Each level mixes three skills: 2 writing (draw/type), 2 reading and
1 listening question.

Bands:
- Levels 1-5: characters of the locale's alphabet
- Levels 6-10: short words
- Level 11+: sentences and short passages
"""

from __future__ import annotations

import random

from loguru import logger

from src.game.models import ListeningQuestion, ReadingQuestion, WritingQuestion
from src.game.types import Difficulty, Locale, WritingSkill

from .base import QUESTIONS_PER_LEVEL, build_options, shuffle_fixed, take_cycled
from .language_bank import LanguageBank, get_language_bank

CHARACTER_BAND_MAX = 5
WORD_BAND_MAX = 10

WRITING_PER_LEVEL = 2
READING_PER_LEVEL = 2
LISTENING_PER_LEVEL = 1


def writing_skill_for(level: int) -> WritingSkill:
    """Even levels practise drawing, odd levels typing."""
    return WritingSkill.DRAW if level % 2 == 0 else WritingSkill.TYPE


# =============================================================================
# Writing
# =============================================================================


def generate_writing_questions(
    level: int,
    skill: WritingSkill,
    bank: LanguageBank,
) -> list[WritingQuestion]:
    """
    Writing practice.

    Characters: the first ``level + 1`` letters.
    Words: the first ``level - 4`` words.
    Sentences: every bank sentence, expected answer lower-cased.
    """
    draw = skill == WritingSkill.DRAW
    verb = "Draw" if draw else "Type"

    if level <= CHARACTER_BAND_MAX:
        band = "letter"
        items = list(bank.letters[: level + 1])
        prompts = [f'{verb} the character "{c}"' for c in items]
        answers = items
        difficulty = Difficulty.MEDIUM if level > 3 else Difficulty.EASY
        time_limit = 60 if draw else 20
    elif level <= WORD_BAND_MAX:
        band = "word"
        items = take_cycled(bank.words, level - 4)
        prompts = [f'{verb} the word "{w}"' for w in items]
        answers = items
        difficulty = Difficulty.MEDIUM
        time_limit = 90 if draw else 30
    else:
        band = "sentence"
        items = list(bank.sentences)
        prompts = [f'{verb} this sentence: "{s}"' for s in items]
        answers = [s.lower() for s in items]
        difficulty = Difficulty.HARD
        time_limit = 120 if draw else 60

    questions = [
        WritingQuestion(
            question_id=f"writing-{bank.locale.value}-{level}-{band}-{i}",
            difficulty=difficulty,
            time_limit_seconds=time_limit,
            prompt=prompt,
            skill=skill,
            correct_answer=answer,
        )
        for i, (prompt, answer) in enumerate(zip(prompts, answers))
    ]
    return questions[:QUESTIONS_PER_LEVEL]


# =============================================================================
# Reading
# =============================================================================


def generate_reading_questions(
    level: int,
    bank: LanguageBank,
    rng: random.Random,
) -> list[ReadingQuestion]:
    questions: list[ReadingQuestion] = []
    prefix = f"reading-{bank.locale.value}-{level}"

    if level <= CHARACTER_BAND_MAX:
        letters = bank.letters[: min(5, level + 2)]
        for i, target in enumerate(letters):
            options, index = build_options(target, bank.alphabet, rng)
            questions.append(
                ReadingQuestion(
                    question_id=f"{prefix}-letter-{i}",
                    difficulty=Difficulty.MEDIUM if level > 3 else Difficulty.EASY,
                    time_limit_seconds=15,
                    text=f'Which character is "{target}"?',
                    question=f'Look at the characters below. Find "{target}"',
                    options=options,
                    correct_answer_index=index,
                )
            )
    elif level <= WORD_BAND_MAX:
        for i, target in enumerate(take_cycled(bank.words, 5, offset=level - 6)):
            options, index = build_options(target, bank.word_distractors, rng)
            questions.append(
                ReadingQuestion(
                    question_id=f"{prefix}-word-{i}",
                    difficulty=Difficulty.MEDIUM,
                    time_limit_seconds=20,
                    text=f"Read: {target}",
                    question=f'Which word says "{target}"?',
                    options=options,
                    correct_answer_index=index,
                )
            )
    else:
        passages = take_cycled(bank.passages, len(bank.passages), offset=level - 11)
        for i, passage in enumerate(passages):
            options, index = shuffle_fixed(passage.options, passage.answer, rng)
            questions.append(
                ReadingQuestion(
                    question_id=f"{prefix}-sentence-{i}",
                    difficulty=Difficulty.HARD,
                    time_limit_seconds=30,
                    text=passage.text,
                    question=passage.question,
                    options=options,
                    correct_answer_index=index,
                )
            )

    return questions[:QUESTIONS_PER_LEVEL]


# =============================================================================
# Listening
# =============================================================================


def generate_listening_questions(
    level: int,
    bank: LanguageBank,
    rng: random.Random,
    count: int = LISTENING_PER_LEVEL,
) -> list[ListeningQuestion]:
    """
    Listening comprehension. ``spoken_text`` is read aloud by the speech
    collaborator; the item rotates with the level.
    """
    questions: list[ListeningQuestion] = []
    prefix = f"listening-{bank.locale.value}-{level}"

    if level <= CHARACTER_BAND_MAX:
        for i, letter in enumerate(take_cycled(bank.letters, count, offset=level - 1)):
            options, index = build_options(letter, bank.alphabet, rng)
            questions.append(
                ListeningQuestion(
                    question_id=f"{prefix}-letter-{i}",
                    difficulty=Difficulty.EASY,
                    time_limit_seconds=10,
                    spoken_text=letter,
                    question="Listen to the sound. Which did you hear?",
                    options=options,
                    correct_answer_index=index,
                )
            )
    elif level <= WORD_BAND_MAX:
        for i, word in enumerate(take_cycled(bank.listening_words, count, offset=level - 6)):
            options, index = build_options(word, bank.listening_distractors, rng)
            questions.append(
                ListeningQuestion(
                    question_id=f"{prefix}-word-{i}",
                    difficulty=Difficulty.MEDIUM,
                    time_limit_seconds=15,
                    spoken_text=word,
                    question="Listen and choose. Which word did you hear?",
                    options=options,
                    correct_answer_index=index,
                )
            )
    else:
        for i, sentence in enumerate(take_cycled(bank.spoken_sentences, count, offset=level - 11)):
            options, index = shuffle_fixed(sentence.options, sentence.answer, rng)
            questions.append(
                ListeningQuestion(
                    question_id=f"{prefix}-sentence-{i}",
                    difficulty=Difficulty.HARD,
                    time_limit_seconds=20,
                    spoken_text=sentence.text,
                    question="Which sentence matches what you heard?",
                    options=options,
                    correct_answer_index=index,
                )
            )

    return questions[:QUESTIONS_PER_LEVEL]


# =============================================================================
# Level
# =============================================================================


def generate_language_questions(
    level: int,
    locale: Locale,
    rng: random.Random,
) -> list[WritingQuestion | ReadingQuestion | ListeningQuestion]:
    """Complete language level with all three skills."""
    bank = get_language_bank(locale)

    writing = generate_writing_questions(level, writing_skill_for(level), bank)
    reading = generate_reading_questions(level, bank, rng)
    listening = generate_listening_questions(level, bank, rng)

    questions = [
        *writing[:WRITING_PER_LEVEL],
        *reading[:READING_PER_LEVEL],
        *listening[:LISTENING_PER_LEVEL],
    ]
    logger.debug(
        f"Language level {level} ({locale.value}): "
        f"{len(writing[:WRITING_PER_LEVEL])} writing, {len(reading[:READING_PER_LEVEL])} reading, "
        f"{len(listening[:LISTENING_PER_LEVEL])} listening"
    )
    return questions
