import re
import threading
from typing import FrozenSet, List, Optional

import Stemmer

LANGUAGE = "english"
MAX_TERM_LENGTH = 100

TOKEN_PATTERN = re.compile(r"[^\W_]+")

# Стоп-слова английского словаря Snowball (тот же список, что english.stop в PostgreSQL)
STOP_WORDS: FrozenSet[str] = frozenset(
    """
    i me my myself we our ours ourselves you your yours yourself yourselves
    he him his himself she her hers herself it its itself they them their
    theirs themselves what which who whom this that these those am is are
    was were be been being have has had having do does did doing a an the
    and but if or because as until while of at by for with about against
    between into through during before after above below to from up down
    in out on off over under again further then once here there when where
    why how all any both each few more most other some such no nor not only
    own same so than too very s t can will just don should now
    """.split()
)

TermSet = FrozenSet[str]

# Экземпляр Stemmer нельзя делить между потоками
_local = threading.local()


def _stemmer() -> "Stemmer.Stemmer":
    stemmer = getattr(_local, "stemmer", None)
    if stemmer is None:
        stemmer = Stemmer.Stemmer(LANGUAGE)
        _local.stemmer = stemmer
    return stemmer


def analyze(text: Optional[str]) -> List[str]:
    """Термы текста по порядку, с повторами: нижний регистр, без стоп-слов, со стеммингом"""
    if not text:
        return []

    words = [
        word
        for word in (match.group().lower() for match in TOKEN_PATTERN.finditer(text))
        if word not in STOP_WORDS and len(word) <= MAX_TERM_LENGTH
    ]
    if not words:
        return []

    return [term for term in _stemmer().stemWords(words) if term]


def tokenize(raw_query: Optional[str]) -> TermSet:
    """
    Множество термов поискового запроса.

    Правила те же, что у индексатора. Запрос из одних стоп-слов дает
    пустое множество; это не ошибка, а сигнал для перехода к подстрочному поиску.
    """
    return frozenset(analyze(raw_query))
