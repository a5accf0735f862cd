from sqlalchemy.exc import OperationalError

# TMDB genre ids used across tests
COMEDY, DRAMA, HORROR, ACTION = 35, 18, 27, 28


def store_down(*args, **kwargs):
    raise OperationalError("SELECT 1", {}, Exception("could not connect to server"))


def connection_reset(*args, **kwargs):
    raise ConnectionResetError("connection reset by peer")
