"""Spotify API URLs and request defaults."""

# Spotify Auth
SPOTIFY_AUTHORIZE_URL = "https://accounts.spotify.com/authorize"
SPOTIFY_TOKEN_URL = "https://accounts.spotify.com/api/token"

SPOTIFY_SCOPES = (
    "streaming user-read-email user-read-private user-library-read "
    "user-library-modify user-read-playback-state user-modify-playback-state"
)

# Spotify Web API base
SPOTIFY_API_BASE = "https://api.spotify.com/v1"

# Spotify Web API endpoints
SEARCH_URL = f"{SPOTIFY_API_BASE}/search"
CURRENTLY_PLAYING_URL = f"{SPOTIFY_API_BASE}/me/player/currently-playing"

# Search defaults
SEARCH_RESULT_LIMIT = 10

