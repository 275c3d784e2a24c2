# dictionary_backend/app/models/enums.py
from enum import Enum

from sqlalchemy import Enum as SAEnum, JSON
from sqlalchemy.dialects.postgresql import JSONB


# PostgreSQL 用 JSONB，其它数据库（测试用 SQLite）退化为 JSON
JSONType = JSON().with_variant(JSONB(), "postgresql")


class LanguageCode(str, Enum):
    en = "en"
    ru = "ru"
    da = "da"
    es = "es"
    fr = "fr"
    de = "de"
    it = "it"
    pt = "pt"
    zh = "zh"
    ja = "ja"
    ko = "ko"
    ar = "ar"


class UserRole(str, Enum):
    admin = "admin"
    user = "user"
    moderator = "moderator"
    learner = "learner"
    guest = "guest"


class PartOfSpeech(str, Enum):
    noun = "noun"
    verb = "verb"
    phrasal_verb = "phrasal_verb"
    adjective = "adjective"
    adverb = "adverb"
    pronoun = "pronoun"
    preposition = "preposition"
    conjunction = "conjunction"
    interjection = "interjection"
    numeral = "numeral"
    article = "article"
    exclamation = "exclamation"
    abbreviation = "abbreviation"
    suffix = "suffix"
    phrase = "phrase"
    sentence = "sentence"
    undefined = "undefined"


class SourceType(str, Enum):
    ai_generated = "ai-generated"
    merriam_learners = "merriam_learners"
    merriam_intermediate = "merriam_intermediate"
    helsinki_nlp = "helsinki_nlp"
    danish_dictionary = "danish_dictionary"
    user = "user"
    admin = "admin"


class Gender(str, Enum):
    masculine = "masculine"
    feminine = "feminine"
    common = "common"
    neuter = "neuter"


class DifficultyLevel(str, Enum):
    beginner = "beginner"
    elementary = "elementary"
    intermediate = "intermediate"
    advanced = "advanced"
    proficient = "proficient"


class LearningStatus(str, Enum):
    notStarted = "notStarted"
    inProgress = "inProgress"
    learned = "learned"
    needsReview = "needsReview"
    difficult = "difficult"


class SessionType(str, Enum):
    review = "review"
    newLearning = "newLearning"
    practice = "practice"
    test = "test"
    spaced = "spaced"


def enum_column_type(enum_cls):
    """Store the enum's value (not its member name) in a plain VARCHAR."""
    return SAEnum(
        enum_cls,
        native_enum=False,
        length=32,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )
