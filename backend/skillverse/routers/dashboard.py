"""
Router pour les tableaux de bord.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from skillverse.auth import CurrentUser, require_student, require_teacher
from skillverse.database import get_db
from skillverse.schemas.dashboard import StudentDashboard, TeacherDashboard
from skillverse.services import dashboard_service

router = APIRouter(prefix="/api/v1/dashboard", tags=["Tableaux de bord"])


@router.get("/teacher", response_model=TeacherDashboard, summary="Tableau de bord enseignant")
def teacher_dashboard(user: CurrentUser = Depends(require_teacher), db: Session = Depends(get_db)):
    return dashboard_service.teacher_dashboard(db, user.id)


@router.get("/student", response_model=StudentDashboard, summary="Tableau de bord élève")
def student_dashboard(user: CurrentUser = Depends(require_student), db: Session = Depends(get_db)):
    """Devoirs à rendre dans les 7 jours, nombre de rendus et moyenne des notes."""
    return dashboard_service.student_dashboard(db, user.id)
