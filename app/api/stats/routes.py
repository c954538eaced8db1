from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.stats import crud as stats_crud
from app.api.stats import schemas
from app.core.database import get_db
from app.core.security import TokenData, get_current_admin

router = APIRouter()


@router.get('/', response_model=schemas.ClubStats)
def get_club_stats(
    current_admin: TokenData = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    return stats_crud.get_club_stats(db=db, club=current_admin.club)


@router.get('/all', response_model=list[schemas.ClubStats])
def get_all_club_stats(
    current_admin: TokenData = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    return stats_crud.get_all_club_stats(db=db, user=current_admin)


@router.get('/dashboard', response_model=schemas.DashboardStats)
def get_dashboard(
    current_admin: TokenData = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    return stats_crud.get_dashboard(db=db, user=current_admin)
