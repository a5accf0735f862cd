from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from muse.crud import genre_crud
from muse.database import get_db
from muse.schemas.movie_schema import GenresResponse

router = APIRouter(tags=["genres"])


@router.get("/genres", response_model=GenresResponse)
def get_genres(db: Session = Depends(get_db)) -> GenresResponse:
    return GenresResponse(genres=genre_crud.get_genres(db))
