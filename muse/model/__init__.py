from muse.model.genre import Genre
from muse.model.movie import Movie, movie_genres
from muse.model.user_pick import UserPick

__all__ = ["Genre", "Movie", "UserPick", "movie_genres"]
