# dictionary_backend/app/models/__init__.py
# ============================================================
# 枚举 / 通用类型
# ============================================================
from .enums import (
    JSONType,
    LanguageCode,
    UserRole,
    PartOfSpeech,
    SourceType,
    Gender,
    DifficultyLevel,
    LearningStatus,
    SessionType,
)

# ============================================================
# 用户
# ============================================================
from .user import User, UserSettings

# ============================================================
# 词典：单词 / 释义 / 例句 / 音频 / 图片
# ============================================================
from .word import (
    Word,
    WordDetails,
    Definition,
    DefinitionExample,
    WordDefinition,
    Image,
    Audio,
    WordDetailsAudio,
    DefinitionAudio,
    ExampleAudio,
)

# ============================================================
# 词表 + 用户词典 + 学习会话
# ============================================================
from .vocabulary_list import Category, VocabularyList, ListWord, UserList, UserListWord
from .user_dictionary import UserDictionary
from .learning_session import UserLearningSession, UserSessionItem

__all__ = [
    # ---- 枚举 ----
    "JSONType",
    "LanguageCode",
    "UserRole",
    "PartOfSpeech",
    "SourceType",
    "Gender",
    "DifficultyLevel",
    "LearningStatus",
    "SessionType",

    # ---- 用户 ----
    "User",
    "UserSettings",

    # ---- 词典 ----
    "Word",
    "WordDetails",
    "Definition",
    "DefinitionExample",
    "WordDefinition",
    "Image",
    "Audio",
    "WordDetailsAudio",
    "DefinitionAudio",
    "ExampleAudio",

    # ---- 词表 ----
    "Category",
    "VocabularyList",
    "ListWord",
    "UserList",
    "UserListWord",

    # ---- 学习 ----
    "UserDictionary",
    "UserLearningSession",
    "UserSessionItem",
]
