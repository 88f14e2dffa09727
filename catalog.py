from __future__ import annotations

from dataclasses import dataclass

from models import TestRef, TestType


@dataclass(frozen=True)
class CatalogEntry:
    test_type: TestType
    test_id: str
    name: str
    domain: str | None = None

    @property
    def ref(self) -> TestRef:
        return TestRef(test_type=self.test_type, test_id=self.test_id, name=self.name)


CHAPTERS = [
    CatalogEntry(TestType.CHAPTER, "1", "Identify the research questions", "Domain 1"),
    CatalogEntry(TestType.CHAPTER, "2", "Source data", "Domain 2"),
    CatalogEntry(TestType.CHAPTER, "3", "Analyze data", "Domain 3"),
    CatalogEntry(TestType.CHAPTER, "4", "Interpret and report results", "Domain 4"),
    CatalogEntry(
        TestType.CHAPTER,
        "5",
        "Use results to influence business decision-making",
        "Domain 5",
    ),
    CatalogEntry(
        TestType.CHAPTER,
        "6",
        "Guide organizational-level strategy for business analytics",
        "Domain 6",
    ),
]

MOCK_EXAMS = [
    CatalogEntry(TestType.MOCK, str(n), f"Mock Exam {n}")
    for n in range(1, 5)
]


def find_entry(test_type: TestType, test_id: str) -> CatalogEntry | None:
    for entry in (*CHAPTERS, *MOCK_EXAMS):
        if entry.test_type is test_type and entry.test_id == test_id:
            return entry
    return None


def make_test_ref(test_type: TestType, test_id: str, name: str | None = None) -> TestRef:
    """Build a test reference, naming it from the catalog when no name is given."""
    if not name:
        entry = find_entry(test_type, test_id)
        if entry is not None:
            return entry.ref
        name = f"{test_type.value.title()} {test_id}"
    return TestRef(test_type=test_type, test_id=test_id, name=name)
