"""
Schémas Pydantic pour les tableaux de bord enseignant et élève.
"""

from typing import List

from pydantic import BaseModel

from skillverse.schemas.assignment import AssignmentResponse
from skillverse.schemas.submission import SubmissionResponse


class TeacherDashboard(BaseModel):
    nb_classes: int
    total_students: int
    total_assignments: int
    pending_submissions: int
    recent_submissions: List[SubmissionResponse]


class StudentStats(BaseModel):
    total_submissions: int
    graded_submissions: int
    average_grade: int


class StudentDashboard(BaseModel):
    nb_classes: int
    upcoming_assignments: List[AssignmentResponse]
    stats: StudentStats
