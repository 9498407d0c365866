"""Name-based gender lookup used for filtering and display, never by the engines."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import Protocol


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"


class GenderResolver(Protocol):
    def __call__(self, full_name: str) -> Gender: ...


DEFAULT_FEMALE_NAMES = frozenset(
    {
        "Мария",
        "Анна",
        "Ольга",
        "Светлана",
        "Юлия",
        "Наталья",
        "Екатерина",
        "Анастасия",
        "Елена",
        "Татьяна",
        "Ирина",
        "Дарья",
        "Ксения",
        "Евгения",
        "Василиса",
        "Инна",
        "Жанна",
        "Нина",
    }
)

DEFAULT_MALE_EXCEPTIONS = frozenset({"Никита", "Илья", "Кирилл"})


class NameGenderResolver:
    """Known names first, then a Russian first-name suffix rule.

    Full names are "Surname Name"; a single token is treated as the first name.
    """

    def __init__(
        self,
        female_names: Iterable[str] = DEFAULT_FEMALE_NAMES,
        male_exceptions: Iterable[str] = DEFAULT_MALE_EXCEPTIONS,
    ) -> None:
        self.female_names = frozenset(female_names)
        self.male_exceptions = frozenset(male_exceptions)

    @staticmethod
    def first_name(full_name: str) -> str:
        parts = full_name.split()
        if not parts:
            return ""
        return parts[1] if len(parts) > 1 else parts[0]

    def __call__(self, full_name: str) -> Gender:
        first_name = self.first_name(full_name)

        if first_name in self.female_names:
            return Gender.FEMALE
        if first_name in self.male_exceptions:
            return Gender.MALE

        ending = first_name.lower()
        # "ья" endings are male unless listed above (Наталья).
        if ending.endswith("ья"):
            return Gender.MALE
        if ending.endswith(("а", "я")):
            return Gender.FEMALE
        return Gender.MALE


infer_gender: GenderResolver = NameGenderResolver()


__all__ = [
    "DEFAULT_FEMALE_NAMES",
    "DEFAULT_MALE_EXCEPTIONS",
    "Gender",
    "GenderResolver",
    "NameGenderResolver",
    "infer_gender",
]
