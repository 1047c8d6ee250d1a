"""
Language content banks, one per Locale.

Each bank covers all three bands (characters, words, sentences) for
writing, reading and listening questions.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.game.errors import UnsupportedLocaleError
from src.game.types import Locale


@dataclass(frozen=True)
class Passage:
    """Short reading passage with an authored multiple choice question."""

    text: str
    question: str
    options: tuple[str, ...]
    answer: str


@dataclass(frozen=True)
class SpokenSentence:
    """Sentence read aloud, with authored answer options."""

    text: str
    options: tuple[str, ...]
    answer: str


@dataclass(frozen=True)
class LanguageBank:
    locale: Locale
    letters: tuple[str, ...]  # practised characters, in teaching order
    alphabet: tuple[str, ...]  # distractor pool for character questions
    words: tuple[str, ...]
    word_distractors: tuple[str, ...]
    listening_words: tuple[str, ...]
    listening_distractors: tuple[str, ...]
    sentences: tuple[str, ...]
    passages: tuple[Passage, ...]
    spoken_sentences: tuple[SpokenSentence, ...]


ENGLISH = LanguageBank(
    locale=Locale.EN,
    letters=tuple("ABCDEFGHIJ"),
    alphabet=tuple("ABCDEFGHIJKLMNOPQRSTUVWXYZ"),
    words=("cat", "dog", "fish", "bird", "tree", "sun", "moon", "star", "apple", "ball"),
    word_distractors=(
        "cat", "dog", "fish", "bird", "tree", "sun", "moon",
        "star", "apple", "ball", "box", "hat", "mat", "rat",
    ),
    listening_words=("apple", "banana", "cat", "dog", "elephant", "fish", "grapes", "house"),
    listening_distractors=(
        "apple", "banana", "cat", "dog", "elephant", "fish",
        "grapes", "house", "ice", "jacket", "kite", "lion",
    ),
    sentences=("The cat is sleeping", "I like to play games", "The sun is bright"),
    passages=(
        Passage(
            text="A cat is playing with a ball. It is very happy.",
            question="What is the cat playing with?",
            options=("a toy", "a ball", "a dog", "a rope"),
            answer="a ball",
        ),
        Passage(
            text="The sun is bright and warm. It helps plants grow.",
            question="What does the sun help?",
            options=("animals", "rocks", "plants", "water"),
            answer="plants",
        ),
    ),
    spoken_sentences=(
        SpokenSentence(
            text="The dog can run very fast",
            options=("The cat runs", "The dog runs", "The bird runs"),
            answer="The dog runs",
        ),
        SpokenSentence(
            text="I like to eat red apples",
            options=("I like green apples", "I like red apples", "I like oranges"),
            answer="I like red apples",
        ),
    ),
)

HINDI = LanguageBank(
    locale=Locale.HI,
    letters=("अ", "आ", "इ", "ई", "उ", "ए", "ओ", "क", "ख", "ग"),
    alphabet=("अ", "आ", "इ", "ई", "उ", "ए", "ओ", "क", "ख", "ग", "घ", "च"),
    words=("बिल्ली", "कुत्ता", "मछली", "पक्षी", "पेड़", "सूरज", "चाँद", "तारा", "सेब", "गेंद"),
    word_distractors=(
        "बिल्ली", "कुत्ता", "मछली", "पक्षी", "पेड़", "सूरज", "चाँद",
        "तारा", "सेब", "गेंद", "डिब्बा", "टोपी", "चटाई", "चूहा",
    ),
    listening_words=("सेब", "केला", "बिल्ली", "कुत्ता", "हाथी", "मछली", "अंगूर", "घर"),
    listening_distractors=(
        "सेब", "केला", "बिल्ली", "कुत्ता", "हाथी", "मछली",
        "अंगूर", "घर", "बर्फ़", "जैकेट", "पतंग", "शेर",
    ),
    sentences=("बिल्ली सो रही है", "मुझे खेल खेलना पसंद है", "सूरज चमकीला है"),
    passages=(
        Passage(
            text="एक बिल्ली गेंद से खेल रही है। वह बहुत खुश है।",
            question="बिल्ली किससे खेल रही है?",
            options=("खिलौना", "गेंद", "कुत्ता", "रस्सी"),
            answer="गेंद",
        ),
        Passage(
            text="सूरज चमकीला और गर्म है। वह पौधों को बढ़ने में मदद करता है।",
            question="सूरज किसकी मदद करता है?",
            options=("जानवर", "पत्थर", "पौधे", "पानी"),
            answer="पौधे",
        ),
    ),
    spoken_sentences=(
        SpokenSentence(
            text="कुत्ता बहुत तेज़ दौड़ सकता है",
            options=("बिल्ली दौड़ती है", "कुत्ता दौड़ता है", "पक्षी दौड़ता है"),
            answer="कुत्ता दौड़ता है",
        ),
        SpokenSentence(
            text="मुझे लाल सेब खाना पसंद है",
            options=("मुझे हरे सेब पसंद हैं", "मुझे लाल सेब पसंद हैं", "मुझे संतरे पसंद हैं"),
            answer="मुझे लाल सेब पसंद हैं",
        ),
    ),
)

CHINESE = LanguageBank(
    locale=Locale.ZH,
    letters=("你", "我", "他", "是", "不", "了", "在", "有", "这", "那"),
    alphabet=("你", "我", "他", "是", "不", "了", "在", "有", "这", "那", "她", "们"),
    words=("猫", "狗", "鱼", "鸟", "树", "太阳", "月亮", "星星", "苹果", "球"),
    word_distractors=(
        "猫", "狗", "鱼", "鸟", "树", "太阳", "月亮",
        "星星", "苹果", "球", "盒子", "帽子", "垫子", "老鼠",
    ),
    listening_words=("苹果", "香蕉", "猫", "狗", "大象", "鱼", "葡萄", "房子"),
    listening_distractors=(
        "苹果", "香蕉", "猫", "狗", "大象", "鱼",
        "葡萄", "房子", "冰", "夹克", "风筝", "狮子",
    ),
    sentences=("猫在睡觉", "我喜欢玩游戏", "太阳很亮"),
    passages=(
        Passage(
            text="一只猫在玩球。它很开心。",
            question="猫在玩什么？",
            options=("玩具", "球", "狗", "绳子"),
            answer="球",
        ),
        Passage(
            text="太阳又亮又暖。它帮助植物生长。",
            question="太阳帮助什么？",
            options=("动物", "石头", "植物", "水"),
            answer="植物",
        ),
    ),
    spoken_sentences=(
        SpokenSentence(
            text="小狗跑得很快",
            options=("猫在跑", "狗在跑", "鸟在跑"),
            answer="狗在跑",
        ),
        SpokenSentence(
            text="我喜欢吃红苹果",
            options=("我喜欢青苹果", "我喜欢红苹果", "我喜欢橙子"),
            answer="我喜欢红苹果",
        ),
    ),
)

LANGUAGE_BANKS: dict[Locale, LanguageBank] = {
    Locale.EN: ENGLISH,
    Locale.HI: HINDI,
    Locale.ZH: CHINESE,
}


def get_language_bank(locale: Locale) -> LanguageBank:
    try:
        return LANGUAGE_BANKS[locale]
    except KeyError:
        raise UnsupportedLocaleError(locale) from None
