from dataclasses import dataclass


@dataclass(frozen=True)
class Subject:
    id: str
    code: str
    label: str  # short label ("siglas")
    level: str

    @property
    def display(self) -> str:
        return f"{self.label} · {self.code} · {self.level}"
