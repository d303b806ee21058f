from pathlib import Path

import pytest
from pydantic import BaseModel


def _paragraph(text: str) -> str:
    """Pad prose to a realistic line length."""
    return text + " " + "It is the natural effect of improvement." * 2


SAMPLE_LINES = [
    "AN INQUIRY INTO THE NATURE AND CAUSES OF THE WEALTH OF NATIONS",
    "",
    "BOOK I",
    "Book I",
    "",
    "CHAPTER I.",
    "Ch.1",
    "",
    _paragraph("The greatest improvement in the productive powers of labour."),
    "",
    _paragraph("The effects of the division of labour are most easily understood."),
    "",
    "12",
    "",
    "CHAPTER II.",
    "Ch.2",
    "",
    _paragraph("This division of labour is not originally the effect of wisdom."),
    "",
]


class RecordingGenerator:
    """Structured generator stub that always answers {summary: "S"}."""

    def __init__(self) -> None:
        self.prompts: list[str] = []

    async def generate(self, prompt: str, schema: type[BaseModel]) -> BaseModel:
        self.prompts.append(prompt)
        return schema(summary="S")


@pytest.fixture
def sample_path(tmp_path: Path) -> Path:
    path = tmp_path / "wealth_of_nations.txt"
    path.write_text("\n".join(SAMPLE_LINES), encoding="utf-8")
    return path


@pytest.fixture
def generator() -> RecordingGenerator:
    return RecordingGenerator()
