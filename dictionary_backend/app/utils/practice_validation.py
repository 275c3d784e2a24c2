# dictionary_backend/app/utils/practice_validation.py
"""
练习作答校验：输入拼写、多选、拼词。

准确率用 Levenshtein 距离换算成 0-100 的整数：

    accuracy = round((max_len - distance) / max_len * 100)

拼写题 80 分以上、拼词题 70 分以上算"差一点"（partial credit）。
"""
from dataclasses import dataclass, field
from typing import Dict, List

TYPING_PARTIAL_CREDIT = 80
CONSTRUCTION_PARTIAL_CREDIT = 70


@dataclass
class WordComparison:
    is_correct: bool
    accuracy: int
    partial_credit: bool
    user_input: str
    correct_word: str
    differences: List[Dict] = field(default_factory=list)


def normalize(text: str) -> str:
    return (text or "").strip().lower()


def levenshtein_distance(a: str, b: str) -> int:
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, 1):
        current = [i]
        for j, cb in enumerate(b, 1):
            current.append(min(
                previous[j] + 1,               # 删除
                current[j - 1] + 1,            # 插入
                previous[j - 1] + (ca != cb),  # 替换
            ))
        previous = current
    return previous[-1]


def calculate_accuracy(user_input: str, correct: str) -> int:
    if not user_input or not correct:
        return 0
    user_input, correct = user_input.lower(), correct.lower()
    longest = max(len(user_input), len(correct))
    distance = levenshtein_distance(user_input, correct)
    return round((longest - distance) / longest * 100)


def find_word_differences(user_input: str, correct: str) -> List[Dict]:
    """Position-by-position mismatches, used for feedback highlighting."""
    differences = []
    for i in range(max(len(user_input), len(correct))):
        actual = user_input[i] if i < len(user_input) else ""
        expected = correct[i] if i < len(correct) else ""
        if actual != expected:
            differences.append({"position": i, "expected": expected, "actual": actual})
    return differences


def _compare(user_input: str, correct_word: str, partial_threshold: int) -> WordComparison:
    typed = normalize(user_input)
    correct = normalize(correct_word)
    is_correct = typed == correct
    accuracy = calculate_accuracy(typed, correct)
    return WordComparison(
        is_correct=is_correct,
        accuracy=accuracy,
        partial_credit=not is_correct and accuracy >= partial_threshold,
        user_input=typed,
        correct_word=correct,
        differences=find_word_differences(typed, correct),
    )


def validate_word_input(user_input: str, correct_word: str) -> WordComparison:
    return _compare(user_input, correct_word, TYPING_PARTIAL_CREDIT)


def validate_word_construction(constructed: str, correct_word: str) -> WordComparison:
    return _compare(constructed, correct_word, CONSTRUCTION_PARTIAL_CREDIT)


def validate_multiple_choice(selected: str, correct_word: str) -> WordComparison:
    typed = normalize(selected)
    correct = normalize(correct_word)
    is_correct = typed == correct
    return WordComparison(
        is_correct=is_correct,
        accuracy=100 if is_correct else 0,
        partial_credit=False,
        user_input=typed,
        correct_word=correct,
    )
