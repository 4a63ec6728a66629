from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, Iterable, List, Mapping, Set

from ..errors import InvalidSubjectError, UnknownSubjectError
from ..models.subject import Subject

# Original planner spellings are accepted alongside the English field names
FIELD_ALIASES: Dict[str, tuple[str, ...]] = {
    "code": ("code", "codigo"),
    "label": ("label", "siglas"),
    "level": ("level", "nivel"),
}


def subject_from_mapping(data: Mapping[str, object]) -> Subject:
    values: Dict[str, str] = {}
    for name, keys in FIELD_ALIASES.items():
        raw = next((data[k] for k in keys if data.get(k) not in (None, "")), "")
        values[name] = str(raw).strip()
    sid = str(data.get("id") or "").strip()
    return Subject(id=sid, **values)


def unique_id(base: str, taken: Set[str]) -> str:
    """Append -2, -3, ... to ``base`` until it is not in ``taken``."""
    if base not in taken:
        return base
    n = 2
    while f"{base}-{n}" in taken:
        n += 1
    return f"{base}-{n}"


class SubjectRegistry:
    def __init__(self, subjects: Iterable[Subject] = ()):
        self._subjects: Dict[str, Subject] = {}
        if subjects:
            self.set_catalog(subjects)

    def set_catalog(self, records: Iterable[Subject | Mapping[str, object]]) -> List[Subject]:
        logger = logging.getLogger(__name__)
        out: Dict[str, Subject] = {}
        for rec in records:
            s = rec if isinstance(rec, Subject) else subject_from_mapping(rec)
            base = s.id or s.code or s.label
            if not base:
                logger.debug("Skipping catalog record without id, code or label")
                continue
            sid = unique_id(base, set(out))
            if sid != s.id:
                s = replace(s, id=sid)
            out[sid] = s
        self._subjects = out
        logger.info(f"Catalog replaced: {len(out)} subjects")
        return list(out.values())

    def add_one(self, subject: Subject) -> Subject:
        base = subject.id or subject.code or subject.label
        if not base:
            raise InvalidSubjectError("Subject needs an id, code or label")
        sid = unique_id(base, set(self._subjects))
        stored = replace(subject, id=sid)
        self._subjects[sid] = stored
        logging.getLogger(__name__).info(f"Subject added: {sid}")
        return stored

    def edit_one(self, subject_id: str, **changes: str) -> Subject:
        current = self._subjects.get(subject_id)
        if current is None:
            raise UnknownSubjectError(subject_id)
        # The id is the assignment reference and is never edited
        changes.pop("id", None)
        updated = replace(current, **changes)
        self._subjects[subject_id] = updated
        return updated

    def get(self, subject_id: str) -> Subject | None:
        return self._subjects.get(subject_id)

    def resolve(self, ids: Iterable[str]) -> List[Subject]:
        # Orphan ids (removed from the catalog) resolve to nothing
        return [self._subjects[i] for i in ids if i in self._subjects]

    def all(self) -> List[Subject]:
        return list(self._subjects.values())

    def ids(self) -> List[str]:
        return list(self._subjects)

    def __contains__(self, subject_id: object) -> bool:
        return subject_id in self._subjects

    def __len__(self) -> int:
        return len(self._subjects)
