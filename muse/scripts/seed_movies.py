"""
TMDB movie seeder.

Pulls popular and/or top rated titles from TMDB, fetches full details for
each one (runtime and genres are only on the details endpoint) and upserts
them into the catalog.

    python -m muse.scripts.seed_movies --count 1000
    python -m muse.scripts.seed_movies -c 500 -s popular
    python -m muse.scripts.seed_movies --count 2000 --min-votes 500 --clear
"""
from __future__ import annotations

import argparse
import math
import sys
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import requests
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from muse.database import SessionLocal, init_db
from muse.model import Genre, Movie, UserPick, movie_genres
from muse.utils.tmdbclient import TMDBClient, map_tmdb_to_movie, release_year

RATE_LIMIT_DELAY = 0.05  # seconds between detail requests
MOVIES_PER_PAGE = 20
SOURCES = ("popular", "top_rated", "both")


@dataclass
class SeedOptions:
    count: int = 500
    source: str = "both"
    min_votes: int = 100
    clear: bool = False


@dataclass
class SeedProgress:
    processed: int = 0
    inserted: int = 0
    skipped: int = 0
    errors: int = 0
    started: float = field(default_factory=time.time)


def parse_args(argv: Optional[List[str]] = None) -> SeedOptions:
    parser = argparse.ArgumentParser(description="Populate the Muse catalog from TMDB")
    parser.add_argument("--count", "-c", type=int, default=500, help="Number of movies to insert (default: 500)")
    parser.add_argument("--source", "-s", choices=SOURCES, default="both", help="TMDB list to page through")
    parser.add_argument("--min-votes", type=int, default=100, help="Skip titles with fewer votes (default: 100)")
    parser.add_argument("--clear", action="store_true", help="Delete existing movies and picks first")
    args = parser.parse_args(argv)
    return SeedOptions(count=args.count, source=args.source, min_votes=args.min_votes, clear=args.clear)


def clear_movies(db: Session) -> None:
    db.execute(movie_genres.delete())
    db.query(UserPick).delete()
    db.query(Movie).delete()
    db.commit()


def is_seedable(details: Dict[str, Any], min_votes: int) -> bool:
    if not details.get("title") or release_year(details) is None:
        return False
    if (details.get("vote_count") or 0) < min_votes:
        return False
    if details.get("adult"):
        return False
    return bool(details.get("poster_path"))


def upsert_movie(db: Session, details: Dict[str, Any], known_genres: Dict[int, Genre]) -> Movie:
    values = map_tmdb_to_movie(details)
    movie = db.query(Movie).filter(Movie.tmdb_id == values["tmdb_id"]).first()
    if movie is None:
        movie = Movie(**values)
        db.add(movie)
    else:
        for key in ("title", "runtime", "synopsis", "poster_path", "vote_average", "vote_count"):
            setattr(movie, key, values[key])

    linked = {g.id for g in movie.genres}
    for genre in details.get("genres") or []:
        genre_id = genre.get("id")
        if genre_id in known_genres and genre_id not in linked:
            movie.genres.append(known_genres[genre_id])
            linked.add(genre_id)

    db.commit()
    return movie


def load_known_genres(db: Session) -> Dict[int, Genre]:
    return {g.id: g for g in db.query(Genre).all()}


def list_fetchers(client: TMDBClient, source: str) -> List[Callable[[int], Dict[str, Any]]]:
    fetchers = []
    if source in ("both", "popular"):
        fetchers.append(client.popular_movies)
    if source in ("both", "top_rated"):
        fetchers.append(client.top_rated_movies)
    return fetchers


def seed(
    db: Session,
    client: TMDBClient,
    options: SeedOptions,
    sleep: Callable[[float], None] = time.sleep,
) -> SeedProgress:
    if options.clear:
        clear_movies(db)

    progress = SeedProgress()
    seen = set()
    known_genres = load_known_genres(db)
    fetchers = list_fetchers(client, options.source)
    per_source = math.ceil(options.count / len(fetchers))
    pages = math.ceil(per_source / MOVIES_PER_PAGE)

    for fetch_page in fetchers:
        for page in range(1, pages + 1):
            if progress.inserted >= options.count:
                return progress
            try:
                listing = fetch_page(page)
            except requests.RequestException as exc:
                print(f"\n  ✗ page {page} failed: {exc}")
                progress.errors += 1
                continue

            for summary in listing.get("results") or []:
                if progress.inserted >= options.count:
                    return progress
                tmdb_id = summary.get("id")
                if tmdb_id in seen:
                    continue
                seen.add(tmdb_id)
                progress.processed += 1

                sleep(RATE_LIMIT_DELAY)
                try:
                    details = client.get_movie_details(tmdb_id)
                    if not is_seedable(details, options.min_votes):
                        progress.skipped += 1
                        continue
                    upsert_movie(db, details, known_genres)
                except (requests.RequestException, SQLAlchemyError) as exc:
                    db.rollback()
                    print(f"\n  ✗ movie {tmdb_id} failed: {exc}")
                    progress.errors += 1
                    continue
                progress.inserted += 1

            if page >= (listing.get("total_pages") or page):
                break
    return progress


def main(argv: Optional[List[str]] = None) -> int:
    options = parse_args(argv)
    try:
        client = TMDBClient()
    except RuntimeError as e:
        print(f"\n  ❌ Error: {e}\n")
        return 1

    print(f"""
  🎬 Muse Movie Seeder

  Target Movies:  {options.count}
  Source:         {options.source}
  Min Votes:      {options.min_votes}
  Clear First:    {'Yes' if options.clear else 'No'}
""")

    init_db()
    db = SessionLocal()
    try:
        print(f"  Current movies in DB: {db.query(Movie).count()}\n")
        progress = seed(db, client, options)
        elapsed = int(time.time() - progress.started)
        print(f"""
  ✓ Inserted: {progress.inserted}
  ⊘ Skipped:  {progress.skipped}
  ✗ Errors:   {progress.errors}
  Movies in DB: {db.query(Movie).count()} ({elapsed}s)
""")
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
