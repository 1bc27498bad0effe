from __future__ import annotations

from typing import Optional, Protocol

from .model import Company


class CompanyRepository(Protocol):
    def get_for_student(self, student_id: str) -> Optional[Company]:
        """Company the student is assigned to, or None."""

        raise NotImplementedError
