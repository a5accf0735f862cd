"""
Catalog status report.

    python -m muse.scripts.db_status
"""
from __future__ import annotations

import sys
from collections import Counter
from typing import Any, Dict

from sqlalchemy import func
from sqlalchemy.orm import Session

from muse.database import SessionLocal
from muse.model import Genre, Movie, UserPick, movie_genres
from muse.recommender.config import SelectionConfig

LANGUAGE_NAMES = {
    "en": "English",
    "ja": "Japanese",
    "ko": "Korean",
    "fr": "French",
    "es": "Spanish",
    "de": "German",
    "it": "Italian",
    "zh": "Chinese",
    "hi": "Hindi",
}


def collect_status(db: Session) -> Dict[str, Any]:
    total = db.query(Movie).count()
    with_runtime = (
        db.query(Movie)
        .filter(Movie.runtime.isnot(None), Movie.runtime >= SelectionConfig.MIN_RUNTIME)
        .count()
    )
    # same floors the picker enforces
    quality = (
        db.query(Movie)
        .filter(
            Movie.vote_count >= SelectionConfig.MIN_VOTE_COUNT,
            Movie.vote_average >= SelectionConfig.MIN_VOTE_AVERAGE,
        )
        .count()
    )

    genre_count = func.count(movie_genres.c.movie_id)
    genres = (
        db.query(Genre.name, genre_count)
        .outerjoin(movie_genres, movie_genres.c.genre_id == Genre.id)
        .group_by(Genre.id, Genre.name)
        .order_by(genre_count.desc(), Genre.name)
        .limit(10)
        .all()
    )

    decades: Counter = Counter()
    for year, count in db.query(Movie.year, func.count(Movie.id)).filter(Movie.year >= 1980).group_by(Movie.year):
        decades[f"{year // 10 * 10}s"] += count

    language_count = func.count(Movie.id)
    languages = (
        db.query(Movie.original_language, language_count)
        .group_by(Movie.original_language)
        .order_by(language_count.desc())
        .limit(5)
        .all()
    )

    return {
        "total_movies": total,
        "with_runtime": with_runtime,
        "quality_movies": quality,
        "genres": [(name, count) for name, count in genres],
        "decades": sorted(decades.items(), reverse=True),
        "languages": [(LANGUAGE_NAMES.get(code, code), count) for code, count in languages],
        "total_picks": db.query(UserPick).count(),
    }


def render(status: Dict[str, Any]) -> str:
    lines = [
        "",
        "  📊 Muse Database Status",
        "",
        f"  📽  Total Movies:         {status['total_movies']}",
        f"  ⏱  With Runtime ({SelectionConfig.MIN_RUNTIME}+):   {status['with_runtime']}",
        f"  ⭐ Quality ({SelectionConfig.MIN_VOTE_COUNT}+ votes):  {status['quality_movies']}",
        "",
        "  📚 Movies by Genre:",
    ]
    for name, count in status["genres"]:
        lines.append(f"     {name:<15} {count:>4} {'█' * min(round(count / 20), 20)}")
    lines += ["", "  📅 Movies by Decade:"]
    for decade, count in status["decades"]:
        lines.append(f"     {decade:<6} {count:>4} {'█' * min(round(count / 10), 30)}")
    lines += ["", "  🌍 Top Languages:"]
    for name, count in status["languages"]:
        lines.append(f"     {str(name):<12} {count}")
    lines += ["", f"  🎯 Total User Picks:      {status['total_picks']}", ""]
    return "\n".join(lines)


def main() -> int:
    db = SessionLocal()
    try:
        print(render(collect_status(db)))
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
