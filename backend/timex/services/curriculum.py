from __future__ import annotations

import logging
from typing import List, Protocol, Sequence

from timex.schemas.batch import BatchOut
from timex.schemas.subject import SubjectOut

logger = logging.getLogger(__name__)


class CurriculumResolver(Protocol):
    def subjects_for(self, batch: BatchOut, subjects: Sequence[SubjectOut]) -> List[SubjectOut]:
        ...


class DepartmentCurriculumResolver:
    """Assigns a subject to every batch of its faculty's department.

    A stand-in until curriculum data is modelled; order follows the subject list.
    """

    def subjects_for(self, batch: BatchOut, subjects: Sequence[SubjectOut]) -> List[SubjectOut]:
        matched: List[SubjectOut] = []
        for subject in subjects:
            if subject.faculty is None:
                logger.debug("Subject %s has no resolved faculty; skipping for batch %s", subject.name, batch.id)
                continue
            if subject.faculty.department == batch.department:
                matched.append(subject)
        return matched
